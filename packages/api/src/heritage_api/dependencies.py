"""Shared FastAPI dependencies."""

from __future__ import annotations

import structlog
from fastapi import HTTPException

from heritage_shared.db import get_supabase_client
from heritage_pipeline.loaders.supabase_loader import SupabaseLoader

from heritage_api.middleware.auth import require_admin_key, verify_cron_secret

logger = structlog.get_logger(__name__)


def get_loader() -> SupabaseLoader:
    """Service-role loader for reading sync bookkeeping tables."""
    try:
        return SupabaseLoader()
    except RuntimeError as exc:
        logger.error("loader_unavailable", error=str(exc))
        raise HTTPException(status_code=500, detail=f"Server misconfiguration: {exc}")


__all__ = [
    "get_loader",
    "get_supabase_client",
    "require_admin_key",
    "verify_cron_secret",
]
