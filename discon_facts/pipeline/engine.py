from __future__ import annotations

import hashlib
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from time import perf_counter

from discon_facts.config import Settings
from discon_facts.core.constants import FACT_MARKER, STATUS_ERROR, STATUS_PARSED
from discon_facts.core.document import apply_failure, apply_success
from discon_facts.core.models import DocumentDefaults, RunOutcome
from discon_facts.core.normalizer import GroupNormalizer
from discon_facts.observability.metrics import Metrics
from discon_facts.parsers.base import BraceScanner
from discon_facts.parsers.errors import FactError, InputNotFound, InternalFault
from discon_facts.parsers.locator import locate_fact_literal
from discon_facts.parsers.structural import parse_structure
from discon_facts.storage.repository import FactDocumentStore


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def content_hash(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class FactEngine:
    """
    Runs one region through locate, parse, normalize and persist.

    ``process`` never raises: every failure ends up as an error status in the
    region's document, and the previous ``data`` is kept.
    """

    def __init__(
        self,
        *,
        store: FactDocumentStore,
        normalizer: GroupNormalizer,
        defaults: DocumentDefaults,
        metrics: Metrics | None = None,
        scanner: BraceScanner | None = None,
        marker: str = FACT_MARKER,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.store = store
        self.normalizer = normalizer
        self.defaults = defaults
        self.metrics = metrics
        self.scanner = scanner
        self.marker = marker
        self.clock = clock
        self._logger = logging.getLogger("discon.engine")

    def process(
        self,
        region_id: str,
        input_path: str | Path,
        output_path: str | Path,
        *,
        upstream: str | None = None,
        pretty: bool = False,
    ) -> RunOutcome:
        timer_start = perf_counter()
        upstream = upstream or None

        try:
            outcome = self._parse_and_store(
                region_id, Path(input_path), Path(output_path), upstream=upstream, pretty=pretty
            )
        except FactError as exc:
            message = str(exc) if isinstance(exc, InputNotFound) else f"{exc} in {input_path}"
            self._logger.warning("%s", message)
            outcome = self._record_failure(
                region_id, Path(output_path), upstream=upstream, pretty=pretty, error=exc, message=message
            )
        except Exception as exc:
            self._logger.exception("Parser crashed for region %s", region_id)
            fault = InternalFault(f"Parser crashed: {exc}")
            outcome = self._record_failure(
                region_id, Path(output_path), upstream=upstream, pretty=pretty, error=fault, message=str(fault)
            )

        if self.metrics is not None:
            self.metrics.mark_parse(outcome.status, outcome.code)
            self.metrics.parse_duration_seconds.observe(perf_counter() - timer_start)
        return outcome

    def _parse_and_store(
        self,
        region_id: str,
        input_path: Path,
        output_path: Path,
        *,
        upstream: str | None,
        pretty: bool,
    ) -> RunOutcome:
        if not input_path.is_file():
            raise InputNotFound(f"Input not found: {input_path}")

        html = input_path.read_bytes().decode("utf-8", errors="replace")
        extraction = locate_fact_literal(html, marker=self.marker, scanner=self.scanner)
        parsed = parse_structure(extraction.text)
        fact = self.normalizer.normalize(parsed.value)

        now = self.clock()
        prior = self.store.load(output_path)
        document = apply_success(
            prior,
            region_id=region_id,
            upstream=upstream,
            fact=fact,
            content_hash=content_hash(extraction.text),
            now=now,
            defaults=self.defaults,
            template=self.store.load_template() if prior is None else None,
        )
        written = self.store.write(output_path, document, pretty=pretty)

        self._logger.info(
            "Parsed %s -> %s (method=%s, bytes=%d)",
            region_id,
            output_path,
            parsed.method.value,
            written,
        )
        if self.metrics is not None:
            self.metrics.mark_parse_success(region_id, now)

        return RunOutcome(
            region_id=region_id,
            output_path=str(output_path),
            status=STATUS_PARSED,
            code=200,
            method=parsed.method,
        )

    def _record_failure(
        self,
        region_id: str,
        output_path: Path,
        *,
        upstream: str | None,
        pretty: bool,
        error: FactError,
        message: str,
    ) -> RunOutcome:
        persisted = True
        try:
            document = apply_failure(
                self.store.load(output_path),
                region_id=region_id,
                upstream=upstream,
                code=error.code,
                message=message,
                now=self.clock(),
                defaults=self.defaults,
                template=self.store.load_template(),
            )
            self.store.write(output_path, document, pretty=pretty)
        except Exception:
            persisted = False
            self._logger.exception("Could not persist error status for region %s", region_id)

        return RunOutcome(
            region_id=region_id,
            output_path=str(output_path),
            status=STATUS_ERROR,
            code=error.code,
            message=message,
            persisted=persisted,
        )


def build_engine(settings: Settings, metrics: Metrics | None = None) -> FactEngine:
    return FactEngine(
        store=FactDocumentStore(settings.data_dir, settings.template_path),
        normalizer=GroupNormalizer(settings.fact_timezone),
        defaults=DocumentDefaults(
            timezone=settings.fact_timezone,
            ttl_seconds=settings.fact_ttl_seconds,
        ),
        metrics=metrics,
    )
