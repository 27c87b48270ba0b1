"""
loaders/supabase_loader.py — Batched upsert loader and sync bookkeeping.

All land rows funnel through this module on their way to Supabase. The loader:
  - Batches rows (default 100 per request)
  - Splits each batch into inserts vs updates with one existence query, so
    sync logs can report records_added and records_updated separately
  - Upserts (INSERT … ON CONFLICT DO UPDATE) on the conflict columns
  - Keeps going after a failed batch and records every batch outcome
  - Writes sync_logs rows and data_sources metadata

Usage:
    from heritage_pipeline.loaders.supabase_loader import SupabaseLoader

    loader = SupabaseLoader()

    log_id = await loader.start_sync_log("台北市")
    result = await loader.upsert_lands([land.to_insert_dict() for land in lands])
    await loader.finish_sync_log(
        log_id,
        records_added=result.records_added,
        records_updated=result.records_updated,
    )
    await loader.mark_source_synced("台北市", result.records_loaded)

    # On failure instead:
    await loader.fail_sync_log(log_id, "Failed to fetch: 503")
"""

from __future__ import annotations

import math
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import structlog

from heritage_shared.config import settings
from heritage_shared.constants import (
    DATA_SOURCES_TABLE,
    LAND_CONFLICT_COLUMNS,
    LANDS_TABLE,
    SYNC_LOGS_TABLE,
)
from heritage_shared.db import get_supabase_client
from heritage_shared.models.sync import DataSource, SyncLog

log = structlog.get_logger(__name__)

MAX_ERROR_LENGTH = 2000  # sync_logs.error_message


@dataclass
class BatchOutcome:
    """Result of one upsert request."""

    index: int
    size: int
    added: int = 0
    updated: int = 0
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class LoadResult:
    """Summary of a loader upsert operation."""

    table: str
    records_added: int = 0
    records_updated: int = 0
    records_failed: int = 0
    batches: list[BatchOutcome] = field(default_factory=list)
    duration_ms: int = 0

    @property
    def records_loaded(self) -> int:
        return self.records_added + self.records_updated

    @property
    def batches_total(self) -> int:
        return len(self.batches)

    @property
    def batches_failed(self) -> int:
        return sum(1 for b in self.batches if not b.success)

    @property
    def errors(self) -> list[str]:
        return [
            f"Batch {b.index + 1}/{self.batches_total}: {b.error}"
            for b in self.batches
            if b.error
        ]

    @property
    def success(self) -> bool:
        return self.records_failed == 0

    @property
    def status(self) -> str:
        if self.records_failed == 0:
            return "success"
        if self.records_loaded > 0:
            return "partial_failure"
        return "failure"


class SupabaseLoader:
    """
    Handles all writes to Supabase from the pipeline.

    Uses the service role key so RLS is bypassed for ETL writes.
    """

    def __init__(self, batch_size: int | None = None, client: Any | None = None) -> None:
        self._batch_size = batch_size or settings.sync_batch_size
        self._client = client if client is not None else get_supabase_client(service_role=True)

    # ------------------------------------------------------------------
    # Core upsert
    # ------------------------------------------------------------------

    async def upsert_lands(self, rows: list[dict[str, Any]]) -> LoadResult:
        return await self.upsert(LANDS_TABLE, rows, LAND_CONFLICT_COLUMNS)

    async def upsert(
        self,
        table: str,
        rows: list[dict[str, Any]],
        conflict_columns: list[str],
    ) -> LoadResult:
        """
        Upsert rows into a Supabase table in sequential batches.

        A failed batch is recorded in result.batches and the remaining
        batches are still attempted.

        Args:
            table:            Target table name.
            rows:             JSON-serialisable row dicts.
            conflict_columns: Columns that identify uniqueness for upsert.

        Returns:
            LoadResult with per-batch outcomes and added/updated counts.
        """
        result = LoadResult(table=table)
        t0 = time.monotonic()

        if not rows:
            log.warning("upsert_empty_rows", table=table)
            return result

        loader_log = log.bind(table=table, total_rows=len(rows))
        loader_log.info("upsert_start")

        n_batches = math.ceil(len(rows) / self._batch_size)

        for batch_idx in range(n_batches):
            start = batch_idx * self._batch_size
            batch = rows[start : start + self._batch_size]
            outcome = BatchOutcome(index=batch_idx, size=len(batch))

            try:
                existing = self._existing_keys(table, batch, conflict_columns)
                self._client.table(table).upsert(
                    batch,
                    on_conflict=",".join(conflict_columns),
                ).execute()
                outcome.updated = sum(
                    1 for row in batch if _key(row, conflict_columns) in existing
                )
                outcome.added = len(batch) - outcome.updated
                result.records_added += outcome.added
                result.records_updated += outcome.updated
                loader_log.debug(
                    "batch_loaded",
                    batch=batch_idx + 1,
                    n_batches=n_batches,
                    added=outcome.added,
                    updated=outcome.updated,
                )
            except Exception as exc:
                outcome.error = str(exc)
                log.error("batch_failed", table=table, batch=batch_idx + 1, error=str(exc))
                result.records_failed += len(batch)

            result.batches.append(outcome)

        result.duration_ms = int((time.monotonic() - t0) * 1000)
        loader_log.info(
            "upsert_complete",
            records_added=result.records_added,
            records_updated=result.records_updated,
            records_failed=result.records_failed,
            duration_ms=result.duration_ms,
            status=result.status,
        )
        return result

    def _existing_keys(
        self,
        table: str,
        batch: list[dict[str, Any]],
        conflict_columns: list[str],
    ) -> set[tuple[Any, ...]]:
        """
        Return the conflict keys from `batch` that already exist in `table`.

        Narrows the query on the first conflict column (equality when the
        batch holds one value) and the last (IN list), then matches full keys
        in Python.
        """
        first, last = conflict_columns[0], conflict_columns[-1]
        first_values = {row[first] for row in batch}
        query = self._client.table(table).select(",".join(conflict_columns))
        if len(first_values) == 1:
            query = query.eq(first, next(iter(first_values)))
        else:
            query = query.in_(first, sorted(first_values))
        response = query.in_(last, sorted({str(row[last]) for row in batch})).execute()
        return {_key(row, conflict_columns) for row in (response.data or [])}

    # ------------------------------------------------------------------
    # Sync log tracking
    # ------------------------------------------------------------------

    async def start_sync_log(self, city: str) -> str:
        """Insert a 'running' sync_logs row and return its id."""
        entry = SyncLog(
            id=uuid.uuid4(),
            source_city=city,
            started_at=datetime.now(timezone.utc),
        )
        self._client.table(SYNC_LOGS_TABLE).insert(entry.to_insert_dict()).execute()
        log.info("sync_log_started", sync_log_id=str(entry.id), city=city)
        return str(entry.id)

    async def finish_sync_log(
        self,
        log_id: str,
        *,
        records_added: int,
        records_updated: int,
    ) -> None:
        """Mark a sync log completed with its counts."""
        self._client.table(SYNC_LOGS_TABLE).update(
            {
                "status": "completed",
                "completed_at": datetime.now(timezone.utc).isoformat(),
                "records_added": records_added,
                "records_updated": records_updated,
                "error_message": None,
            }
        ).eq("id", log_id).execute()
        log.info(
            "sync_log_completed",
            sync_log_id=log_id,
            records_added=records_added,
            records_updated=records_updated,
        )

    async def fail_sync_log(
        self,
        log_id: str,
        error_message: str,
        *,
        records_added: int = 0,
        records_updated: int = 0,
    ) -> None:
        """Mark a sync log failed with an error message."""
        self._client.table(SYNC_LOGS_TABLE).update(
            {
                "status": "failed",
                "completed_at": datetime.now(timezone.utc).isoformat(),
                "records_added": records_added,
                "records_updated": records_updated,
                "error_message": error_message[:MAX_ERROR_LENGTH],
            }
        ).eq("id", log_id).execute()
        log.error("sync_log_failed", sync_log_id=log_id, error=error_message[:200])

    # ------------------------------------------------------------------
    # Data source metadata
    # ------------------------------------------------------------------

    async def mark_source_synced(self, city: str, record_count: int) -> None:
        """Stamp last_synced_at and record_count on the city's data_sources row."""
        self._client.table(DATA_SOURCES_TABLE).update(
            {
                "last_synced_at": datetime.now(timezone.utc).isoformat(),
                "record_count": record_count,
            }
        ).eq("city", city).execute()
        log.info("data_source_updated", city=city, record_count=record_count)

    async def list_data_sources(self) -> list[DataSource]:
        result = self._client.table(DATA_SOURCES_TABLE).select("*").execute()
        return [DataSource.from_db_row(row) for row in (result.data or [])]

    async def recent_sync_logs(self, limit: int = 50) -> list[SyncLog]:
        result = (
            self._client.table(SYNC_LOGS_TABLE)
            .select("*")
            .order("started_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [SyncLog.from_db_row(row) for row in (result.data or [])]


def _key(row: dict[str, Any], columns: list[str]) -> tuple[Any, ...]:
    return tuple(str(row.get(c)) for c in columns)
