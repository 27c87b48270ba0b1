"""
transforms/normalize.py — RawLandRecord -> NormalizedLand.

Folds city-name variants onto canonical names, fills in 坪 from m² when a
source only publishes one unit, defaults the management status, and attaches
an approximate coordinate from the static district table.

Usage:
    from heritage_pipeline.transforms.normalize import normalize_lands

    lands = normalize_lands(raw_records, source_url="https://data.gov.tw/dataset/28529")

    # Or with a custom coordinate table:
    normalizer = LandNormalizer(DistrictLookup.from_file("coords.json"))
    lands = normalizer.normalize(raw_records)
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from heritage_shared.constants import DEFAULT_LAND_STATUS
from heritage_shared.geo import DistrictLookup, normalize_city_name
from heritage_shared.models.lands import NormalizedLand, RawLandRecord
from heritage_shared.units import m2_to_ping

log = structlog.get_logger(__name__)


class LandNormalizer:
    """Maps parser output onto the canonical unclaimed_lands shape."""

    def __init__(self, lookup: DistrictLookup | None = None) -> None:
        self._lookup = lookup or DistrictLookup.default()

    def normalize_one(
        self, record: RawLandRecord, source_url: str | None = None
    ) -> NormalizedLand:
        city = normalize_city_name(record.source_city)

        area_ping = record.area_ping
        if area_ping is None and record.area_m2 is not None:
            area_ping = m2_to_ping(record.area_m2)

        return NormalizedLand(
            source_city=city,
            district=record.district,
            section=record.section or None,
            land_number=record.land_number,
            owner_name=record.owner_name or None,
            area_m2=record.area_m2,
            area_ping=area_ping,
            status=record.status or DEFAULT_LAND_STATUS,
            coordinates=self._lookup.resolve(city, record.district),
            raw_data=dict(record.raw_data) if record.raw_data else None,
            source_url=source_url or None,
        )

    def normalize(
        self,
        records: Iterable[RawLandRecord],
        source_url: str | None = None,
    ) -> list[NormalizedLand]:
        lands = [self.normalize_one(r, source_url) for r in records]
        missing = sum(1 for land in lands if land.coordinates is None)
        if missing:
            log.warning("lands_without_coordinates", count=missing, total=len(lands))
        log.debug("normalize_complete", count=len(lands))
        return lands


def normalize_lands(
    records: Iterable[RawLandRecord],
    source_url: str | None = None,
) -> list[NormalizedLand]:
    """One-shot normalization with the bundled district table."""
    return LandNormalizer().normalize(records, source_url)


def deduplicate_lands(lands: Iterable[NormalizedLand]) -> list[NormalizedLand]:
    """
    Collapse records sharing (source_city, district, land_number); last wins.

    A single upsert request may not touch the same conflict key twice.
    """
    by_key: dict[tuple[str, str, str], NormalizedLand] = {}
    total = 0
    for land in lands:
        total += 1
        by_key[land.conflict_key] = land

    if len(by_key) < total:
        log.info("duplicate_keys_collapsed", before=total, after=len(by_key))
    return list(by_key.values())
