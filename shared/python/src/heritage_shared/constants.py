"""
constants.py — shared constants used across the pipeline and API.

City names, table names, status sentinels and the area-unit factor are
defined here so they stay in sync between Python packages.
"""

from __future__ import annotations

from typing import Final, Literal

# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------
M2_PER_PING: Final[float] = 3.30579
AREA_DECIMALS: Final[int] = 2

# ---------------------------------------------------------------------------
# Record defaults
# ---------------------------------------------------------------------------
DEFAULT_LAND_STATUS: Final[str] = "列管中"
UNKNOWN_DISTRICT: Final[str] = "未知區"
PLACEHOLDER_LAND_NUMBER_PREFIX: Final[str] = "unknown-"

# ---------------------------------------------------------------------------
# Cities
# ---------------------------------------------------------------------------
TAIPEI: Final[str] = "台北市"
NEW_TAIPEI: Final[str] = "新北市"
CHIAYI_CITY: Final[str] = "嘉義市"
CHIAYI_COUNTY: Final[str] = "嘉義縣"
CHANGHUA_COUNTY: Final[str] = "彰化縣"

# Canonical names the store knows about
CANONICAL_CITIES: Final[tuple[str, ...]] = (
    TAIPEI,
    NEW_TAIPEI,
    CHIAYI_CITY,
    CHIAYI_COUNTY,
    CHANGHUA_COUNTY,
)

# Alias (lowercased, whitespace-free) -> canonical city name
CITY_ALIASES: Final[dict[str, str]] = {
    # 台北市
    "台北市": TAIPEI,
    "臺北市": TAIPEI,
    "台北": TAIPEI,
    "臺北": TAIPEI,
    "taipei": TAIPEI,
    "taipeicity": TAIPEI,
    # 新北市
    "新北市": NEW_TAIPEI,
    "新北": NEW_TAIPEI,
    "台北縣": NEW_TAIPEI,
    "臺北縣": NEW_TAIPEI,
    "newtaipei": NEW_TAIPEI,
    "newtaipeicity": NEW_TAIPEI,
    # 嘉義市
    "嘉義市": CHIAYI_CITY,
    "嘉义市": CHIAYI_CITY,
    "chiayi": CHIAYI_CITY,
    "chiayicity": CHIAYI_CITY,
    # 嘉義縣
    "嘉義縣": CHIAYI_COUNTY,
    "嘉义县": CHIAYI_COUNTY,
    "chiayicounty": CHIAYI_COUNTY,
    # 彰化縣
    "彰化縣": CHANGHUA_COUNTY,
    "彰化县": CHANGHUA_COUNTY,
    "彰化": CHANGHUA_COUNTY,
    "changhua": CHANGHUA_COUNTY,
    "changhuacounty": CHANGHUA_COUNTY,
}

# ---------------------------------------------------------------------------
# Store tables
# ---------------------------------------------------------------------------
LANDS_TABLE: Final[str] = "unclaimed_lands"
DATA_SOURCES_TABLE: Final[str] = "data_sources"
SYNC_LOGS_TABLE: Final[str] = "sync_logs"

LAND_CONFLICT_COLUMNS: Final[list[str]] = ["source_city", "district", "land_number"]

# ---------------------------------------------------------------------------
# Typed literals
# ---------------------------------------------------------------------------
SyncStatus = Literal["running", "completed", "failed"]
DataSourceStatus = Literal["active", "inactive"]
