"""Bearer-secret guards for the sync triggers."""

from __future__ import annotations

import hmac

import structlog
from fastapi import HTTPException, Request

from heritage_shared.config import settings

logger = structlog.get_logger(__name__)


def bearer_token(request: Request) -> str | None:
    """Return the token from 'Authorization: Bearer <token>', if present."""
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return None
    return header[len("Bearer "):]


def _matches(token: str | None, secret: str) -> bool:
    if token is None:
        return False
    return hmac.compare_digest(token.encode("utf-8"), secret.encode("utf-8"))


async def verify_cron_secret(request: Request) -> None:
    """
    Guard for the scheduled trigger.

    With CRON_SECRET set, the bearer token must match it. Without it the
    endpoint is open in development and refuses to run in production.
    """
    secret = settings.cron_secret
    if secret:
        if not _matches(bearer_token(request), secret):
            raise HTTPException(status_code=401, detail="Unauthorized")
        return
    if settings.is_production:
        logger.error("cron_secret_missing")
        raise HTTPException(
            status_code=500,
            detail="Server misconfiguration: CRON_SECRET not set",
        )


async def require_admin_key(request: Request) -> None:
    """Guard for the admin trigger; there is no fallback key."""
    key = settings.admin_api_key
    if not key:
        logger.error("admin_api_key_missing")
        raise HTTPException(
            status_code=500,
            detail="Server misconfiguration: ADMIN_API_KEY not set",
        )
    if not _matches(bearer_token(request), key):
        raise HTTPException(status_code=401, detail="Unauthorized")
