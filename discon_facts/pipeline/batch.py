from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from discon_facts.core.models import BatchSummary, RunOutcome
from discon_facts.pipeline.engine import FactEngine

logger = logging.getLogger("discon.batch")


class BatchDriver:
    """Parse every downloaded ``<region>.html`` page into ``<region>.json``."""

    def __init__(
        self,
        *,
        engine: FactEngine,
        outputs_dir: str,
        data_dir: str,
        region_sources: Mapping[str, str] | None = None,
        pretty: bool = True,
    ) -> None:
        self.engine = engine
        self.outputs_dir = Path(outputs_dir)
        self.data_dir = Path(data_dir)
        self.region_sources = dict(region_sources or {})
        self.pretty = pretty

    def discover(self) -> list[Path]:
        if not self.outputs_dir.is_dir():
            return []
        return sorted(path for path in self.outputs_dir.glob("*.html") if path.is_file())

    def run(self) -> BatchSummary:
        outcomes: list[RunOutcome] = []
        for page in self.discover():
            region_id = page.stem
            output_path = self.data_dir / f"{region_id}.json"
            logger.info("Parsing region=%s from %s -> %s", region_id, page, output_path)
            outcomes.append(
                self.engine.process(
                    region_id,
                    page,
                    output_path,
                    upstream=self.region_sources.get(region_id),
                    pretty=self.pretty,
                )
            )

        parsed = sum(1 for outcome in outcomes if outcome.ok)
        summary = BatchSummary(
            processed=len(outcomes),
            parsed=parsed,
            failed=len(outcomes) - parsed,
            outcomes=outcomes,
        )
        logger.info(
            "Done. Processed: %d, parsed: %d, failed: %d",
            summary.processed,
            summary.parsed,
            summary.failed,
        )
        return summary
