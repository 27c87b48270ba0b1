"""
Request logging middleware.

Sync trigger calls are tagged with trigger="cron" or trigger="admin"; the
platform's liveness and readiness probes are logged at debug level only.
The Authorization header is never logged since it carries the sync secrets.
"""

from __future__ import annotations

import time

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

logger = structlog.get_logger(__name__)

PROBE_PATHS = frozenset({"/health", "/ready"})


def _trigger(path: str) -> str | None:
    if path.startswith("/api/cron/"):
        return "cron"
    if path.startswith("/api/admin/"):
        return "admin"
    return None


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        started = time.monotonic()
        log = logger.bind(
            method=request.method,
            path=path,
            trigger=_trigger(path),
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            log.error("request_failed", error=str(exc), exc_info=True)
            raise

        status = response.status_code
        duration_ms = round((time.monotonic() - started) * 1000, 2)
        if status >= 500:
            log.error("request_completed", status=status, duration_ms=duration_ms)
        elif status in (401, 403):
            log.warning("request_unauthorized", status=status, duration_ms=duration_ms)
        elif path in PROBE_PATHS:
            log.debug("probe_completed", status=status, duration_ms=duration_ms)
        else:
            log.info("request_completed", status=status, duration_ms=duration_ms)
        return response
