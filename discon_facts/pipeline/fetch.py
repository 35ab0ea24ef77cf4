from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

import httpx

from discon_facts.core.models import FetchSummary
from discon_facts.observability.metrics import Metrics
from discon_facts.providers.base import SchedulePageProvider
from discon_facts.providers.http_page import ProviderError
from discon_facts.storage.repository import write_text_atomic

logger = logging.getLogger("discon.fetch")


async def fetch_regions(
    provider: SchedulePageProvider,
    region_sources: Mapping[str, str],
    outputs_dir: str,
    *,
    only: Iterable[str] | None = None,
    metrics: Metrics | None = None,
) -> FetchSummary:
    """Download ``outputs_dir/<region>.html`` for each region, skipping failures."""
    regions = list(only) if only is not None else sorted(region_sources)
    total = 0
    ok = 0

    for region_id in regions:
        total += 1
        url = region_sources.get(region_id)
        if not url:
            logger.warning("No URL configured for region %s, skipping", region_id)
            _mark(metrics, "unconfigured")
            continue

        logger.info("Fetching region=%s url=%s", region_id, url)
        try:
            html = await provider.fetch_page(url)
        except (httpx.HTTPError, ProviderError) as exc:
            logger.warning("Fetch failed for region %s: %s", region_id, exc)
            _mark(metrics, "fetch_error")
            continue

        if not html.strip():
            logger.warning("Empty response for region %s, skipping", region_id)
            _mark(metrics, "empty")
            continue

        target = Path(outputs_dir) / f"{region_id}.html"
        write_text_atomic(target, html)
        logger.info("Saved %s (%d chars)", target, len(html))
        _mark(metrics, "success")
        ok += 1

    summary = FetchSummary(total=total, ok=ok, skipped=total - ok)
    logger.info(
        "Done. Regions processed: %d, successful: %d, skipped: %d",
        summary.total,
        summary.ok,
        summary.skipped,
    )
    return summary


def _mark(metrics: Metrics | None, status: str) -> None:
    if metrics is not None:
        metrics.mark_fetch(status)
