from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from discon_facts.config import Settings
from discon_facts.observability.metrics import Metrics
from discon_facts.pipeline.batch import BatchDriver
from discon_facts.pipeline.fetch import fetch_regions
from discon_facts.providers.base import SchedulePageProvider


class RefreshWorker:
    def __init__(
        self,
        *,
        settings: Settings,
        provider: SchedulePageProvider,
        batch: BatchDriver,
        metrics: Metrics | None = None,
    ) -> None:
        self.settings = settings
        self.provider = provider
        self.batch = batch
        self.metrics = metrics

        self._task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()
        self._logger = logging.getLogger("discon.worker")

        self.last_run_status: str = "never"
        self.last_run_started_at: datetime | None = None
        self.last_run_finished_at: datetime | None = None
        self.last_error: str | None = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run_loop(), name="refresh-worker")

    async def stop(self) -> None:
        if self._task is None:
            return

        self._stop_event.set()
        await self._task
        self._task = None

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> None:
        self.last_run_started_at = datetime.now(tz=timezone.utc)
        stage = "fetch"
        status = "success"
        error: str | None = None

        try:
            if self.settings.region_sources:
                await fetch_regions(
                    self.provider,
                    self.settings.region_sources,
                    self.settings.outputs_dir,
                    metrics=self.metrics,
                )

            stage = "parse"
            summary = await asyncio.to_thread(self.batch.run)
            if summary.failed:
                status = "partial"
                error = f"{summary.failed} of {summary.processed} regions failed"
        except Exception as exc:  # pragma: no cover
            status = f"{stage}_error"
            error = str(exc)
            self._logger.exception("Unhandled refresh error")
        finally:
            self.last_run_finished_at = datetime.now(tz=timezone.utc)
            self.last_run_status = status
            self.last_error = error

    async def _run_loop(self) -> None:
        await self.run_once()

        while not self._stop_event.is_set():
            sleep_seconds = self._next_sleep_seconds()
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=sleep_seconds)
            except TimeoutError:
                pass

            if self._stop_event.is_set():
                break
            await self.run_once()

    def _next_sleep_seconds(self) -> float:
        interval_seconds = max(self.settings.poll_interval_minutes, 1) * 60
        if not self.settings.poll_align_clock:
            return float(interval_seconds)

        now = datetime.now(tz=timezone.utc).timestamp()
        next_tick = ((int(now) // interval_seconds) + 1) * interval_seconds
        return max(next_tick - now, 1.0)
