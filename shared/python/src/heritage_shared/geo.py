"""
geo.py — City-name normalization and approximate district coordinates.

Government datasets spell the same city several ways ("臺北市", "台北市",
"Taipei"). normalize_city_name() folds them onto one canonical form.

Coordinates are a display aid only: each district resolves to a single
representative point from data/district_coords.json, never to parcel
geometry. Coverage is partial; add districts to the JSON file to extend it.

Usage:
    from heritage_shared.geo import DistrictLookup, normalize_city_name

    normalize_city_name("臺北市")                # "台北市"
    lookup = DistrictLookup.default()
    lookup.resolve("台北市", "台北市大安區")      # Coordinates(lat=25.0268, lng=121.5435)
    lookup.resolve("嘉義縣", "太保市")            # city centre
    lookup.resolve("高雄市", "前金區")            # None
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from heritage_shared.constants import CITY_ALIASES
from heritage_shared.models.lands import Coordinates

DEFAULT_COORDS_PATH = Path(__file__).parent / "data" / "district_coords.json"

# Full city names usable as a district prefix ("台北市大安區"), longest first
_CITY_PREFIXES: tuple[str, ...] = tuple(
    sorted(
        (alias for alias in CITY_ALIASES if alias.endswith(("市", "縣", "县"))),
        key=len,
        reverse=True,
    )
)


def _alias_key(name: str) -> str:
    return "".join(name.split()).lower()


def normalize_city_name(name: str) -> str:
    """
    Map a city name variant to its canonical form.

    Unknown names are returned unchanged (stripped), never rejected.
    """
    if not name:
        return name
    return CITY_ALIASES.get(_alias_key(name), name.strip())


def is_known_city(name: str) -> bool:
    return _alias_key(name) in CITY_ALIASES


def strip_city_prefix(district: str) -> str:
    """Remove a leading city name from a district string, if present."""
    for prefix in _CITY_PREFIXES:
        if district.startswith(prefix):
            return district[len(prefix):]
    return district


class DistrictLookup:
    """
    Static district -> coordinate table with a per-city centre fallback.

    Resolution order:
      0. None for a city that is neither an alias nor in the table
      1. exact district match (the record's own city preferred)
      2. exact match after stripping a leading city name
      3. the city's centre point
      4. None when the city has no centre point
    """

    def __init__(self, table: dict[str, dict[str, Any]]) -> None:
        self._centers: dict[str, Coordinates] = {}
        self._by_city: dict[str, dict[str, Coordinates]] = {}
        self._flat: dict[str, Coordinates] = {}

        for city, entry in table.items():
            canonical = normalize_city_name(city)
            center = entry.get("center")
            if center:
                self._centers[canonical] = Coordinates(**center)
            districts = {
                name: Coordinates(**point)
                for name, point in (entry.get("districts") or {}).items()
            }
            self._by_city[canonical] = districts
            for name, point in districts.items():
                self._flat.setdefault(name, point)

    @classmethod
    def from_file(cls, path: Path | str) -> "DistrictLookup":
        with open(path, encoding="utf-8") as fh:
            return cls(json.load(fh))

    @classmethod
    def default(cls) -> "DistrictLookup":
        return _default_lookup()

    def center_of(self, city: str) -> Coordinates | None:
        return self._centers.get(normalize_city_name(city))

    def _match(self, city: str, district: str) -> Coordinates | None:
        own = self._by_city.get(city, {})
        if district in own:
            return own[district]
        return self._flat.get(district)

    def resolve(self, city: str, district: str | None) -> Coordinates | None:
        city = normalize_city_name(city)
        if not (is_known_city(city) or city in self._by_city):
            return None
        district = (district or "").strip()

        if district:
            point = self._match(city, district)
            if point is not None:
                return point

            stripped = strip_city_prefix(district)
            if stripped != district:
                point = self._match(city, stripped)
                if point is not None:
                    return point

        return self.center_of(city)


@lru_cache(maxsize=1)
def _default_lookup() -> DistrictLookup:
    return DistrictLookup.from_file(DEFAULT_COORDS_PATH)
