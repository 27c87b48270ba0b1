"""
parsers/base.py — Shared parsing capability for unclaimed-land CSVs.

Every county publishes the same kind of list (decedent name, district, land
section, land number, area) with its own header spellings. Concrete parsers
only declare which headers feed which field; everything else lives here:

  - CSV reading (all columns as strings, BOM / blank-cell tolerant)
  - first_value() lookup across header spelling variants
  - row filtering: rows with neither an owner name nor a land number are
    footers or noise and are dropped
  - placeholder land numbers "unknown-<row index>" for rows that have an
    owner but no land number, so distinct rows never share an empty key
  - owner-name cleaning, area parsing, m² -> 坪 conversion

Area values that are missing or malformed become None, never 0.
"""

from __future__ import annotations

import io
import re
from abc import ABC
from collections.abc import Iterator
from enum import Enum
from typing import Any, ClassVar

import polars as pl
import structlog

from heritage_shared.constants import PLACEHOLDER_LAND_NUMBER_PREFIX, UNKNOWN_DISTRICT
from heritage_shared.models.lands import RawLandRecord
from heritage_shared.units import m2_to_ping

log = structlog.get_logger(__name__)

_WHITESPACE = re.compile(r"\s+")
_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")


def clean_headers(columns: list[str]) -> dict[str, str]:
    """
    Rename map that strips whitespace and BOMs from header names.

    A header keeps its raw name when the cleaned form is already taken: an
    exact header wins over a padded one ("地號" over " 地號"), otherwise the
    first padded header gets the clean name.
    """
    taken = set(columns)
    mapping: dict[str, str] = {}
    for col in columns:
        cleaned = col.strip().lstrip("\ufeff")
        if cleaned == col or cleaned in taken:
            continue
        mapping[col] = cleaned
        taken.add(cleaned)
    return mapping


class ParserKind(str, Enum):
    """One tag per government dataset layout."""

    TAIPEI = "taipei"
    CHIAYI = "chiayi"
    CHANGHUA = "changhua"


class BaseParser(ABC):
    """Common base for all per-source parsers."""

    kind: ClassVar[ParserKind]

    # Header candidates, tried in order. Override in subclasses.
    owner_columns: ClassVar[tuple[str, ...]] = ()
    district_columns: ClassVar[tuple[str, ...]] = ()
    section_columns: ClassVar[tuple[str, ...]] = ()
    land_number_columns: ClassVar[tuple[str, ...]] = ()
    area_m2_columns: ClassVar[tuple[str, ...]] = ()
    area_ping_columns: ClassVar[tuple[str, ...]] = ()
    status_columns: ClassVar[tuple[str, ...]] = ()

    def __init__(self, city_name: str) -> None:
        self.city_name = city_name
        self._log = log.bind(parser=self.kind.value, city=city_name)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def parse(self, csv_text: str) -> list[RawLandRecord]:
        """Parse CSV text (header row + data rows) into raw land records."""
        records: list[RawLandRecord] = []
        total = 0
        for index, row in enumerate(self.read_rows(csv_text)):
            total += 1
            record = self.parse_row(row, index)
            if record is not None:
                records.append(record)

        self._log.info(
            "parse_complete",
            rows=total,
            records=len(records),
            dropped=total - len(records),
        )
        return records

    def parse_row(self, row: dict[str, Any], index: int) -> RawLandRecord | None:
        """Map one CSV row to a RawLandRecord, or None if the row is noise."""
        owner = self.first_value(row, *self.owner_columns)
        explicit_number = self.first_value(row, *self.land_number_columns)
        if not self.keep_row(owner, explicit_number):
            return None

        area_m2 = self.parse_area(self.first_value(row, *self.area_m2_columns))
        area_ping = self.parse_area(self.first_value(row, *self.area_ping_columns))
        if area_ping is None and area_m2 is not None:
            area_ping = self.m2_to_ping(area_m2)

        return RawLandRecord(
            source_city=self.city_name,
            district=self.first_value(row, *self.district_columns) or UNKNOWN_DISTRICT,
            section=self.first_value(row, *self.section_columns),
            land_number=self.land_number_for(row, explicit_number, index),
            owner_name=self.clean_owner_name(owner),
            area_m2=area_m2,
            area_ping=area_ping,
            status=self.first_value(row, *self.status_columns),
            raw_data=dict(row),
        )

    # ------------------------------------------------------------------
    # Hooks for source-specific behaviour
    # ------------------------------------------------------------------

    def keep_row(self, owner: str | None, land_number: str | None) -> bool:
        return bool(owner or land_number)

    def land_number_for(
        self, row: dict[str, Any], explicit: str | None, index: int
    ) -> str:
        return explicit or self.placeholder_land_number(index)

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    @staticmethod
    def read_rows(csv_text: str) -> Iterator[dict[str, Any]]:
        """Yield each data row as {header: stripped string or None}."""
        text = csv_text.lstrip("\ufeff")
        if not text.strip():
            return
        df = pl.read_csv(
            io.StringIO(text),
            infer_schema_length=0,
            truncate_ragged_lines=True,
            ignore_errors=True,
        )
        df = df.rename(clean_headers(df.columns))
        for row in df.iter_rows(named=True):
            yield {
                key: (value.strip() or None) if isinstance(value, str) else value
                for key, value in row.items()
            }

    @staticmethod
    def first_value(row: dict[str, Any], *columns: str) -> str | None:
        for col in columns:
            value = row.get(col)
            if value is None:
                continue
            value = str(value).strip()
            if value:
                return value
        return None

    @staticmethod
    def placeholder_land_number(index: int) -> str:
        return f"{PLACEHOLDER_LAND_NUMBER_PREFIX}{index}"

    @staticmethod
    def clean_owner_name(name: str | None) -> str | None:
        """Trim and drop internal whitespace ("王 O" -> "王O"); blank -> None."""
        if not name:
            return None
        cleaned = _WHITESPACE.sub("", name.strip())
        return cleaned or None

    @staticmethod
    def parse_area(text: str | None) -> float | None:
        """Parse "1,234.5" -> 1234.5. Missing or malformed -> None."""
        if text is None:
            return None
        cleaned = str(text).replace(",", "").strip()
        if not _NUMBER.match(cleaned):
            return None
        return float(cleaned)

    @staticmethod
    def m2_to_ping(m2: float) -> float:
        return m2_to_ping(m2)
