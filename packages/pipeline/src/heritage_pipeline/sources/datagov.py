"""
sources/datagov.py — data.gov.tw dataset fetcher (metadata indirection).

The national open-data portal does not serve rows directly. A dataset id
resolves to a metadata document listing its resources (one per file format);
the CSV resource's download URL is then fetched separately, usually from the
publishing county's own server.

Metadata shapes handled:
  {"resources": [{"format": "CSV", "resourceDownloadUrl": "..."}]}
  {"success": true, "result": {"distribution": [{"resourceFormat": "CSV",
                                                 "resourceDownloadUrl": "..."}]}}

Usage:
    source = DataGovSource()
    result = await source.fetch("28529")
    if result.success:
        rows = ChanghuaParser().parse(result.data)
"""

from __future__ import annotations

import io
from typing import Any

import httpx
import polars as pl

from heritage_shared.config import settings
from heritage_pipeline.sources.base import BaseSource, FetchResult


def find_csv_resource(meta: dict[str, Any]) -> dict[str, Any] | None:
    """Return the first resource whose format tag is CSV (case-insensitive)."""
    resources = meta.get("resources")
    if resources is None:
        result = meta.get("result") or {}
        resources = result.get("resources") or result.get("distribution") or []

    for resource in resources:
        fmt = resource.get("format") or resource.get("resourceFormat") or ""
        if str(fmt).strip().lower() == "csv":
            return resource
    return None


def count_csv_rows(text: str) -> int:
    """Number of data rows (header excluded) in a CSV payload."""
    if not text.strip():
        return 0
    return pl.read_csv(
        io.StringIO(text),
        infer_schema_length=0,
        truncate_ragged_lines=True,
        ignore_errors=True,
    ).height


class DataGovSource(BaseSource):
    """Fetcher for data.gov.tw datasets that publish a CSV resource."""

    name = "DataGovTW"

    def __init__(self, base_url: str | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._base_url = (base_url or settings.datagov_api_base).rstrip("/")

    def metadata_url(self, dataset_id: str) -> str:
        return f"{self._base_url}/{dataset_id}"

    async def _fetch(self, client: httpx.AsyncClient, dataset_id: str) -> FetchResult:
        meta_response = await self._get(client, self.metadata_url(dataset_id))
        if not meta_response.is_success:
            return FetchResult.fail(
                f"Failed to fetch metadata: {meta_response.status_code}"
            )

        resource = find_csv_resource(meta_response.json())
        download_url = None
        if resource is not None:
            download_url = resource.get("resourceDownloadUrl") or resource.get("url")
        if not download_url:
            return FetchResult.fail("No CSV resource found in dataset")

        self._log.info("resource_download", dataset_id=dataset_id, url=download_url)
        csv_response = await self._get(client, download_url)
        if not csv_response.is_success:
            return FetchResult.fail(f"Failed to fetch CSV: {csv_response.status_code}")

        text = self._decode(csv_response.content)
        return FetchResult.ok(text, count_csv_rows(text))
