"""
sources/taipei.py — data.taipei dataset fetcher (paginated JSON listing).

data.taipei exposes dataset rows as JSON pages:

    GET /api/v1/dataset/{id}?scope=resourceAquire&limit=1000&offset=N
    -> {"result": {"limit": 1000, "offset": N, "count": 5321, "results": [...]}}

Pages are requested at increasing offsets until one comes back empty. The
accumulated rows are capped (taipei_max_records) so an upstream that never
returns an empty page cannot exhaust memory; no page is requested once the
cap is reached. Rows are re-serialized to CSV so every source feeds the
parsers the same tabular text.

Usage:
    source = TaipeiSource()
    result = await source.fetch("134972")
"""

from __future__ import annotations

from typing import Any

import httpx
import polars as pl

from heritage_shared.config import settings
from heritage_pipeline.sources.base import BaseSource, FetchResult


def records_to_csv(records: list[dict[str, Any]]) -> str:
    """Serialize JSON rows to CSV; header is the union of keys in first-seen order."""
    columns: dict[str, None] = {}
    for record in records:
        for key in record:
            columns.setdefault(key, None)

    rows = [
        {col: None if record.get(col) is None else str(record[col]) for col in columns}
        for record in records
    ]
    df = pl.DataFrame(rows, schema={col: pl.String for col in columns})
    return df.write_csv()


class TaipeiSource(BaseSource):
    """Fetcher for data.taipei's paginated dataset API."""

    name = "DataTaipei"

    def __init__(
        self,
        base_url: str | None = None,
        *,
        page_size: int | None = None,
        max_records: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._base_url = (base_url or settings.taipei_api_base).rstrip("/")
        self._page_size = page_size or settings.taipei_page_size
        self._max_records = max_records or settings.taipei_max_records

    async def _fetch(self, client: httpx.AsyncClient, dataset_id: str) -> FetchResult:
        url = f"{self._base_url}/{dataset_id}"
        all_records: list[dict[str, Any]] = []
        offset = 0

        while len(all_records) < self._max_records:
            response = await self._get(
                client,
                url,
                {"scope": "resourceAquire", "limit": self._page_size, "offset": offset},
            )
            if not response.is_success:
                return FetchResult.fail(f"Failed to fetch: {response.status_code}")

            payload = response.json()
            records = (payload.get("result") or {}).get("results") or []
            if not records:
                break

            all_records.extend(records)
            offset += self._page_size
            self._log.debug(
                "page_fetched",
                dataset_id=dataset_id,
                offset=offset,
                fetched=len(all_records),
            )
        else:
            self._log.warning(
                "pagination_cap_reached",
                dataset_id=dataset_id,
                max_records=self._max_records,
            )
            all_records = all_records[: self._max_records]

        if not all_records:
            return FetchResult.fail("No records found")

        return FetchResult.ok(records_to_csv(all_records), len(all_records))
