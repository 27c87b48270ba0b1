"""
enrichment/geocoder.py — Address -> coordinates via OpenStreetMap Nominatim.

Not on the primary sync path: lands get approximate district coordinates from
the bundled table during normalization. This module is for refining
individual addresses on demand.

Nominatim's usage policy allows at most one request per second and requires
an identifying User-Agent, so batch_geocode() serializes requests with a
fixed sleep between consecutive calls.

Usage:
    geocoder = NominatimGeocoder()
    hit = await geocoder.geocode("中正區重慶南路一段122號", city="台北市")
    results = await geocoder.batch_geocode([("信義路五段7號", "台北市")])
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Literal

import httpx
import structlog

from heritage_shared.config import settings

log = structlog.get_logger(__name__)

Confidence = Literal["high", "medium", "low"]


@dataclass(frozen=True)
class GeocodingResult:
    lat: float
    lng: float
    display_name: str
    confidence: Confidence


def confidence_from_importance(importance: float | None) -> Confidence:
    if importance is None:
        return "low"
    if importance > 0.5:
        return "high"
    if importance > 0.3:
        return "medium"
    return "low"


class NominatimGeocoder:
    """Rate-limited Nominatim client restricted to Taiwan."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        contact_email: str | None = None,
        interval_s: float | None = None,
        timeout: float | None = None,
    ) -> None:
        self._url = base_url or settings.nominatim_url
        self._interval_s = settings.geocode_interval_s if interval_s is None else interval_s
        self._timeout = timeout if timeout is not None else settings.http_timeout
        email = contact_email or settings.contact_email
        self.user_agent = f"HeritageHunter/1.0 ({email})"

    @staticmethod
    def full_address(address: str, city: str | None = None) -> str:
        return f"{city}{address}" if city else address

    async def geocode(
        self,
        address: str,
        city: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> GeocodingResult | None:
        """
        Geocode one address. Returns None when nothing matches or on any
        HTTP or decoding error (logged).
        """
        query = self.full_address(address, city)
        params = {
            "format": "json",
            "q": f"{query}, Taiwan",
            "countrycodes": "tw",
            "limit": 1,
        }

        try:
            if client is None:
                async with httpx.AsyncClient(timeout=self._timeout) as own_client:
                    response = await self._request(own_client, params)
            else:
                response = await self._request(client, params)

            if response.status_code != 200:
                log.warning("geocode_failed", address=query, status_code=response.status_code)
                return None

            hits: list[dict[str, Any]] = response.json()
            if not hits:
                log.debug("geocode_no_result", address=query)
                return None

            hit = hits[0]
            return GeocodingResult(
                lat=float(hit["lat"]),
                lng=float(hit["lon"]),
                display_name=hit.get("display_name", ""),
                confidence=confidence_from_importance(hit.get("importance")),
            )
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            log.error("geocode_error", address=query, error=str(exc))
            return None

    async def batch_geocode(
        self,
        addresses: Sequence[tuple[str, str | None]],
        on_progress: Callable[[int, int], None] | None = None,
    ) -> dict[str, GeocodingResult | None]:
        """
        Geocode (address, city) pairs one at a time.

        Returns a dict keyed by the full address (city + address).
        """
        results: dict[str, GeocodingResult | None] = {}
        total = len(addresses)

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            for i, (address, city) in enumerate(addresses):
                key = self.full_address(address, city)
                results[key] = await self.geocode(address, city, client=client)

                if on_progress is not None:
                    on_progress(i + 1, total)

                if i < total - 1:
                    await asyncio.sleep(self._interval_s)

        found = sum(1 for r in results.values() if r is not None)
        log.info("batch_geocode_complete", total=total, found=found)
        return results

    async def _request(
        self, client: httpx.AsyncClient, params: dict[str, Any]
    ) -> httpx.Response:
        return await client.get(
            self._url,
            params=params,
            headers={"User-Agent": self.user_agent},
        )
