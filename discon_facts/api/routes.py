from __future__ import annotations

import re

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response

router = APIRouter()

_REGION_ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


@router.get("/healthz")
async def healthz(request: Request) -> dict:
    worker = request.app.state.worker
    return {
        "status": "ok",
        "scheduler": {
            "enabled": request.app.state.settings.enable_scheduler,
            "running": worker.is_running() if worker else False,
            "lastRunStatus": worker.last_run_status if worker else "disabled",
            "lastRunStartedAt": worker.last_run_started_at.isoformat() if worker and worker.last_run_started_at else None,
            "lastRunFinishedAt": worker.last_run_finished_at.isoformat() if worker and worker.last_run_finished_at else None,
            "lastError": worker.last_error if worker else None,
        },
    }


@router.get("/readyz")
async def readyz(request: Request) -> dict:
    if not request.app.state.store.ping():
        raise HTTPException(status_code=503, detail="data directory not ready")

    return {"status": "ready"}


@router.get("/v1/regions")
async def list_regions(request: Request) -> dict:
    store = request.app.state.store
    items = []
    for region_id in store.list_regions():
        document = store.get_document(region_id) or {}
        items.append(
            {
                "regionId": region_id,
                "lastUpdated": document.get("lastUpdated"),
                "lastUpdateStatus": document.get("lastUpdateStatus"),
            }
        )
    return {"count": len(items), "items": items}


@router.get("/v1/regions/{region_id}")
async def region_document(request: Request, region_id: str) -> dict:
    if not _REGION_ID_RE.match(region_id) or ".." in region_id:
        raise HTTPException(status_code=400, detail="Invalid region id")

    document = request.app.state.store.get_document(region_id)
    if document is None:
        raise HTTPException(status_code=404, detail="No fact document available")
    return document


@router.get("/metrics")
async def metrics(request: Request) -> Response:
    payload, content_type = request.app.state.metrics.render()
    return Response(content=payload, media_type=content_type)
