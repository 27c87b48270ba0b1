"""
sources/base.py — Abstract base class for all open-data fetchers.

Each concrete source must implement:
  _fetch()        — retrieve one dataset and return a FetchResult

The public fetch() method wraps _fetch() with timing, structured logging
and error capture: any HTTP or network failure is converted into a failed
FetchResult, so callers never see an exception from fetch().
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from heritage_shared.config import settings
from heritage_pipeline.utils.retry import transport_retry

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """Raw CSV text from one dataset, or the reason it could not be fetched."""

    success: bool
    data: str | None = None
    record_count: int = 0
    error: str | None = None

    @classmethod
    def ok(cls, data: str, record_count: int) -> "FetchResult":
        return cls(success=True, data=data, record_count=record_count)

    @classmethod
    def fail(cls, error: str) -> "FetchResult":
        return cls(success=False, error=error)


class BaseSource(ABC):
    """Abstract base for heritage open-data fetchers."""

    # Override in subclass; used for logging
    name: str = "unknown"

    def __init__(
        self,
        *,
        timeout: float | None = None,
        max_attempts: int | None = None,
        retry_delay: float = 1.0,
    ) -> None:
        self._timeout = timeout if timeout is not None else settings.http_timeout
        self._log = log.bind(source_name=self.name)
        attempts = max_attempts if max_attempts is not None else settings.http_max_attempts
        self._get = transport_retry(max_attempts=attempts, base_delay=retry_delay)(
            self._get_once
        )

    # ------------------------------------------------------------------
    # Abstract interface
    # ------------------------------------------------------------------

    @abstractmethod
    async def _fetch(self, client: httpx.AsyncClient, dataset_id: str) -> FetchResult:
        """Retrieve one dataset. May raise; fetch() converts errors."""
        ...

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    async def fetch(self, dataset_id: str) -> FetchResult:
        """
        Fetch a dataset as CSV text.

        Returns:
            FetchResult — success with data and record_count, or failure
            with a human-readable error. Never raises.
        """
        fetch_log = self._log.bind(dataset_id=dataset_id)
        fetch_log.info("fetch_start")
        t0 = time.monotonic()

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, follow_redirects=True
            ) as client:
                result = await self._fetch(client, dataset_id)
        except httpx.HTTPError as exc:
            result = FetchResult.fail(f"Network error: {type(exc).__name__}: {exc}")
        except Exception as exc:
            result = FetchResult.fail(f"Unexpected fetch error: {type(exc).__name__}: {exc}")

        duration_ms = int((time.monotonic() - t0) * 1000)
        if result.success:
            fetch_log.info(
                "fetch_complete",
                record_count=result.record_count,
                duration_ms=duration_ms,
            )
        else:
            fetch_log.warning("fetch_failed", error=result.error, duration_ms=duration_ms)
        return result

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    async def _get_once(
        self,
        client: httpx.AsyncClient,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        self._log.debug("http_get", url=url, params=params)
        return await client.get(url, params=params)

    @staticmethod
    def _decode(content: bytes) -> str:
        """Decode a Taiwanese government CSV: UTF-8 (BOM tolerant), else Big5/cp950."""
        try:
            return content.decode("utf-8-sig")
        except UnicodeDecodeError:
            return content.decode("cp950", errors="replace")
