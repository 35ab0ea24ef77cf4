from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

from discon_facts.core.models import DocumentDefaults
from discon_facts.core.normalizer import GroupNormalizer
from discon_facts.observability.metrics import Metrics
from discon_facts.pipeline.engine import FactEngine
from discon_facts.storage.repository import FactDocumentStore

START = datetime(2025, 3, 29, 10, 0, tzinfo=timezone.utc)

SAMPLE_FACT = (
    '{"data":{"GPV1.1":[{"date":"2025-03-30","start":"2:00","end":"4:00"}],'
    '"GPV1.2":[{"date":"2025-03-30","start":"10:00","end":"13:30"}]},'
    '"update":"29.03.2025 12:00","today":1743285600}'
)

LOOSE_FACT = """{
    data: {
        'GPV2.1': [{day: '2025-01-10', from: '9:00', to: '12:30',},],
        "GPV2.2": [{d: "2025-01-10", s: "18:00", e: "20:00"}],
    },
    update: '10.01.2025 08:00', // posted by operator
}"""


class StepClock:
    def __init__(self, start: datetime = START, step: timedelta = timedelta(minutes=5)) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        return value


def page(literal: str) -> str:
    return (
        "<!doctype html><html><head><script>"
        "window.DisconSchedule = window.DisconSchedule || {};"
        f"DisconSchedule.fact = {literal};"
        "DisconSchedule.preset = {};"
        "</script></head><body><div id='app'></div></body></html>"
    )


def write_page(directory: Path, region_id: str, literal: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{region_id}.html"
    path.write_text(page(literal), encoding="utf-8")
    return path


def make_engine(
    tmp_path: Path,
    *,
    zone: str = "Europe/Kyiv",
    clock: StepClock | None = None,
    template_path: str | None = None,
    metrics: Metrics | None = None,
) -> FactEngine:
    return FactEngine(
        store=FactDocumentStore(str(tmp_path / "data"), template_path),
        normalizer=GroupNormalizer(zone),
        defaults=DocumentDefaults(timezone=zone, ttl_seconds=300),
        metrics=metrics,
        clock=clock or StepClock(),
    )
