"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from heritage_api import __version__
from heritage_api.dependencies import get_supabase_client

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {"status": "ok", "version": __version__}


@router.get("/ready")
async def ready(request: Request) -> JSONResponse:
    cache = request.app.state.store_health
    available = cache.current(get_supabase_client)
    return JSONResponse(
        status_code=200 if available else 503,
        content={
            "status": "ready" if available else "unavailable",
            "store": cache.snapshot(),
        },
    )
