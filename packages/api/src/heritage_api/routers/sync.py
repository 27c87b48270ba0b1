"""Sync trigger endpoints: scheduled (cron) and manual (admin)."""

from __future__ import annotations

import json

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, ValidationError

from heritage_pipeline.loaders.supabase_loader import SupabaseLoader
from heritage_pipeline.pipelines import unclaimed_lands

from heritage_api.dependencies import get_loader, require_admin_key, verify_cron_secret
from heritage_api.responses import error_response

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["sync"])


class SyncRequest(BaseModel):
    cities: list[str] | None = None


async def _read_sync_request(request: Request) -> SyncRequest:
    """A missing or non-JSON body means "all cities"."""
    raw = await request.body()
    if not raw.strip():
        return SyncRequest()
    try:
        payload = json.loads(raw)
    except ValueError:
        return SyncRequest()
    if not isinstance(payload, dict):
        return SyncRequest()
    try:
        return SyncRequest.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False))


@router.get("/cron/sync", dependencies=[Depends(verify_cron_secret)])
async def cron_sync():
    """Daily sync of every known city."""
    logger.info("cron_sync_triggered")
    try:
        result = await unclaimed_lands.run()
    except Exception as exc:
        logger.error("cron_sync_fatal", error=str(exc), exc_info=True)
        return error_response("Sync failed", details=str(exc))

    payload = result.to_dict()
    return {
        "success": payload["success"],
        "synced_at": payload["synced_at"],
        "results": payload["results"],
    }


@router.post("/admin/sync", dependencies=[Depends(require_admin_key)])
async def admin_sync(request: Request):
    """Sync the requested cities (default: all known cities)."""
    body = await _read_sync_request(request)
    logger.info("admin_sync_triggered", cities=body.cities)
    try:
        result = await unclaimed_lands.run(cities=body.cities or None)
    except Exception as exc:
        logger.error("admin_sync_fatal", error=str(exc), exc_info=True)
        return error_response("Sync failed", details=str(exc))

    payload = result.to_dict()
    return {
        "success": result.success,
        "message": (
            "Sync completed successfully" if result.success else "Sync completed with errors"
        ),
        "summary": payload["summary"],
        "results": payload["results"],
    }


@router.get("/admin/sync", dependencies=[Depends(require_admin_key)])
async def admin_sync_status(loader: SupabaseLoader = Depends(get_loader)):
    """Data source metadata and the 50 most recent sync logs."""
    try:
        sources = await loader.list_data_sources()
        logs = await loader.recent_sync_logs(limit=50)
    except Exception as exc:
        logger.error("sync_status_fetch_failed", error=str(exc))
        return error_response("Failed to fetch sync status", details=str(exc))

    return {
        "success": True,
        "data_sources": [s.model_dump(mode="json") for s in sources],
        "recent_sync_logs": [entry.model_dump(mode="json") for entry in logs],
    }
