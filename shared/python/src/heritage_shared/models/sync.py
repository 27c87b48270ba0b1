"""
models/sync.py — Pydantic models for sync bookkeeping tables.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from heritage_shared.constants import DataSourceStatus, SyncStatus


class DataSource(BaseModel):
    """Matches the data_sources table row (one per city)."""

    city: str
    dataset_id: str | None = None
    api_url: str | None = None
    last_synced_at: datetime | None = None
    record_count: int = 0
    status: DataSourceStatus = "active"

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "DataSource":
        return cls(**{k: v for k, v in row.items() if k != "id"})


class SyncLog(BaseModel):
    """Matches the sync_logs table row (one per city per run)."""

    id: UUID = Field(default_factory=uuid4)
    source_city: str
    started_at: datetime | None = None
    completed_at: datetime | None = None
    records_added: int = 0
    records_updated: int = 0
    status: SyncStatus = "running"
    error_message: str | None = None

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "SyncLog":
        return cls(**row)

    def to_insert_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "source_city": self.source_city,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "status": self.status,
        }
