"""
heritage_shared.models — Pydantic models matching each database table.

These models are used by:
- packages/pipeline: shape parsed and normalized records before writing to Supabase
- packages/api: serialize sync status into API responses
"""

from heritage_shared.models.lands import (
    Coordinates,
    NormalizedLand,
    RawLandRecord,
)
from heritage_shared.models.sync import DataSource, SyncLog

__all__ = [
    "Coordinates",
    "RawLandRecord",
    "NormalizedLand",
    "DataSource",
    "SyncLog",
]
