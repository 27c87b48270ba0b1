"""
models/lands.py — Pydantic models for land records.

RawLandRecord is what a parser produces from one source row; NormalizedLand
is the canonical shape written to the unclaimed_lands table.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from heritage_shared.constants import DEFAULT_LAND_STATUS


class Coordinates(BaseModel):
    """Approximate point (district or city centre), not parcel geometry."""

    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float


class RawLandRecord(BaseModel):
    """One parsed source row, before normalization."""

    model_config = ConfigDict(frozen=True)

    source_city: str
    district: str
    section: str | None = None
    land_number: str
    owner_name: str | None = None
    area_m2: float | None = None
    area_ping: float | None = None
    status: str | None = None
    raw_data: dict[str, Any] = Field(default_factory=dict)


class NormalizedLand(BaseModel):
    """Matches an unclaimed_lands insert row."""

    source_city: str
    district: str
    section: str | None = None
    land_number: str
    owner_name: str | None = None
    area_m2: float | None = None
    area_ping: float | None = None
    status: str = DEFAULT_LAND_STATUS
    coordinates: Coordinates | None = None
    raw_data: dict[str, Any] | None = None
    source_url: str | None = None

    @property
    def conflict_key(self) -> tuple[str, str, str]:
        return (self.source_city, self.district, self.land_number)

    def to_insert_dict(self) -> dict[str, Any]:
        return {
            "source_city": self.source_city,
            "district": self.district,
            "section": self.section,
            "land_number": self.land_number,
            "owner_name": self.owner_name,
            "area_m2": self.area_m2,
            "area_ping": self.area_ping,
            "status": self.status,
            "coordinates": self.coordinates.model_dump() if self.coordinates else None,
            "raw_data": self.raw_data,
            "source_url": self.source_url,
        }
