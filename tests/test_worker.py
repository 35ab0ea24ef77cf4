from __future__ import annotations

import pytest

from discon_facts.config import Settings
from discon_facts.pipeline.batch import BatchDriver
from discon_facts.scheduler.worker import RefreshWorker
from tests.helpers import SAMPLE_FACT, make_engine, page


class _FakeProvider:
    def __init__(self, pages: dict[str, str]) -> None:
        self.pages = pages

    async def fetch_page(self, url: str) -> str:
        return self.pages[url]


def _worker(tmp_path, pages: dict[str, str]) -> RefreshWorker:
    sources = {region: f"https://example.test/{region}" for region in pages}
    settings = Settings(
        data_dir=str(tmp_path / "data"),
        outputs_dir=str(tmp_path / "outputs"),
        region_sources=sources,
    )
    batch = BatchDriver(
        engine=make_engine(tmp_path),
        outputs_dir=settings.outputs_dir,
        data_dir=settings.data_dir,
        region_sources=sources,
    )
    provider = _FakeProvider({sources[region]: html for region, html in pages.items()})
    return RefreshWorker(settings=settings, provider=provider, batch=batch)


@pytest.mark.asyncio
async def test_run_once_fetches_and_parses(tmp_path) -> None:
    worker = _worker(tmp_path, {"kyiv": page(SAMPLE_FACT)})

    await worker.run_once()

    assert worker.last_run_status == "success"
    assert worker.last_error is None
    assert (tmp_path / "data" / "kyiv.json").exists()


@pytest.mark.asyncio
async def test_run_once_reports_partial_failures(tmp_path) -> None:
    worker = _worker(tmp_path, {"kyiv": page(SAMPLE_FACT), "lviv": "<html>no schedule</html>"})

    await worker.run_once()

    assert worker.last_run_status == "partial"
    assert worker.last_error == "1 of 2 regions failed"
    assert worker.last_run_finished_at is not None


def test_sleep_is_at_least_one_second(tmp_path) -> None:
    worker = _worker(tmp_path, {})

    assert worker._next_sleep_seconds() >= 1.0
    assert worker.is_running() is False
