"""
tests/test_pipelines/test_cli.py — heritage-pipeline CLI commands.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from heritage_pipeline.cli import main
from heritage_pipeline.enrichment.geocoder import GeocodingResult
from heritage_pipeline.pipelines.unclaimed_lands import CitySyncResult, SyncRunResult


def _invoke(*args: str):
    return CliRunner().invoke(main, ["--log-format", "console", *args])


def test_sources_lists_dispatch_table():
    result = _invoke("sources")

    assert result.exit_code == 0
    for city in ("台北市", "嘉義市", "嘉義縣", "彰化縣"):
        assert city in result.output
    assert "https://data.taipei/api/v1/dataset/134972" in result.output


def test_sync_passes_cities_and_dry_run():
    outcome = SyncRunResult(
        results=[CitySyncResult(city="台北市", success=True, records_added=5)]
    )
    with patch(
        "heritage_pipeline.pipelines.unclaimed_lands.run",
        new_callable=AsyncMock,
        return_value=outcome,
    ) as run:
        result = _invoke("sync", "--city", "台北市", "--dry-run")

    assert result.exit_code == 0
    run.assert_awaited_once_with(cities=["台北市"], dry_run=True)
    assert "Total: 5 added, 0 updated" in result.output


def test_sync_exit_code_on_city_failure():
    outcome = SyncRunResult(
        results=[CitySyncResult(city="嘉義市", success=False, error="No CSV resource found in dataset")]
    )
    with patch(
        "heritage_pipeline.pipelines.unclaimed_lands.run",
        new_callable=AsyncMock,
        return_value=outcome,
    ):
        result = _invoke("sync")

    assert result.exit_code == 1
    assert "No CSV resource found in dataset" in result.output


def test_sync_configuration_error():
    with patch(
        "heritage_pipeline.pipelines.unclaimed_lands.run",
        new_callable=AsyncMock,
        side_effect=RuntimeError("SUPABASE_SERVICE_KEY is not set."),
    ):
        result = _invoke("sync")

    assert result.exit_code == 2


def test_geocode_prints_coordinates():
    hit = GeocodingResult(lat=25.033, lng=121.5654, display_name="台北101", confidence="high")
    with patch(
        "heritage_pipeline.enrichment.geocoder.NominatimGeocoder.geocode",
        new_callable=AsyncMock,
        return_value=hit,
    ):
        result = _invoke("geocode", "信義路五段7號", "--city", "台北市")

    assert result.exit_code == 0
    assert "25.033000,121.565400" in result.output
