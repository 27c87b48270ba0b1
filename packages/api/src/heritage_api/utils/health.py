"""Time-stamped store availability cache for the readiness probe."""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import structlog

from heritage_shared.constants import DATA_SOURCES_TABLE

logger = structlog.get_logger(__name__)


class StoreHealthCache:
    """
    Remembers whether Supabase answered a trivial query, for ttl_s seconds.

    Owned by the app (app.state.store_health); nothing here is module-level.
    refresh() always probes; current() probes only when the value is stale.
    """

    def __init__(
        self,
        ttl_s: float = 60.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_s = ttl_s
        self._clock = clock
        self.available: bool | None = None
        self.checked_at: datetime | None = None
        self.error: str | None = None
        self._checked_mono: float | None = None

    def is_stale(self) -> bool:
        if self._checked_mono is None:
            return True
        return self._clock() - self._checked_mono >= self.ttl_s

    def refresh(self, client_factory: Callable[[], Any]) -> bool:
        """Probe the store now and record the outcome."""
        try:
            client = client_factory()
            client.table(DATA_SOURCES_TABLE).select("city").limit(1).execute()
            self.available, self.error = True, None
        except Exception as exc:
            logger.warning("store_health_check_failed", error=str(exc))
            self.available, self.error = False, str(exc)

        self._checked_mono = self._clock()
        self.checked_at = datetime.now(timezone.utc)
        return self.available

    def current(self, client_factory: Callable[[], Any]) -> bool:
        if self.is_stale():
            return self.refresh(client_factory)
        return bool(self.available)

    def snapshot(self) -> dict[str, Any]:
        return {
            "available": self.available,
            "checked_at": self.checked_at.isoformat() if self.checked_at else None,
            "error": self.error,
        }
