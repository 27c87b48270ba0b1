"""Error payloads for the sync endpoints."""

from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse


def error_response(
    error: str,
    *,
    details: Any | None = None,
    status_code: int = 500,
) -> JSONResponse:
    """Build a JSON error response: {"error": ..., "details": ...}."""
    body: dict[str, Any] = {"error": error}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)
