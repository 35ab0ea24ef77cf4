from __future__ import annotations

import logging

from fastapi import FastAPI

from discon_facts.api.routes import router as api_router
from discon_facts.config import Settings, load_settings
from discon_facts.observability.metrics import Metrics
from discon_facts.pipeline.batch import BatchDriver
from discon_facts.pipeline.engine import build_engine
from discon_facts.providers.registry import build_provider
from discon_facts.scheduler.worker import RefreshWorker


class NullWorker:
    last_run_status = "disabled"
    last_run_started_at = None
    last_run_finished_at = None
    last_error = None

    def is_running(self) -> bool:
        return False


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def build_batch(settings: Settings, metrics: Metrics | None = None) -> BatchDriver:
    return BatchDriver(
        engine=build_engine(settings, metrics),
        outputs_dir=settings.outputs_dir,
        data_dir=settings.data_dir,
        region_sources=settings.region_sources,
        pretty=settings.pretty_output,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    app_settings = settings or load_settings()
    configure_logging(app_settings.log_level)

    metrics = Metrics()
    batch = build_batch(app_settings, metrics)

    worker = (
        RefreshWorker(
            settings=app_settings,
            provider=build_provider(app_settings),
            batch=batch,
            metrics=metrics,
        )
        if app_settings.enable_scheduler
        else None
    )

    app = FastAPI(title="discon-facts", version="0.1.0")
    app.state.settings = app_settings
    app.state.store = batch.engine.store
    app.state.metrics = metrics
    app.state.worker = worker if worker is not None else NullWorker()

    @app.on_event("startup")
    async def _on_startup() -> None:
        if worker is not None:
            await worker.start()

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:
        if worker is not None:
            await worker.stop()

    app.include_router(api_router)
    return app
