"""
pipelines/unclaimed_lands.py — Unclaimed-inheritance land sync.

For each requested city, in order:
  1. insert a 'running' sync_logs row
  2. resolve the city in CITY_SOURCES (unknown cities fail without network I/O)
  3. fetch the dataset (data.taipei pagination or data.gov.tw CSV resource)
  4. parse with the city's parser, normalize, collapse duplicate keys
  5. upsert into unclaimed_lands in batches on (source_city, district, land_number)
  6. complete or fail the sync log; stamp data_sources on success
One city's failure never stops the next city.

Usage:
    from heritage_pipeline.pipelines.unclaimed_lands import run
    result = await run()                                 # all cities
    result = await run(cities=["台北市", "彰化縣"])        # specific cities
    result = await run(dry_run=True)                     # no DB writes
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from heritage_shared.constants import CHANGHUA_COUNTY, CHIAYI_CITY, CHIAYI_COUNTY, TAIPEI
from heritage_shared.geo import normalize_city_name
from heritage_pipeline.loaders.supabase_loader import LoadResult, SupabaseLoader
from heritage_pipeline.parsers import ParserKind, get_parser
from heritage_pipeline.sources import BaseSource, DataGovSource, TaipeiSource
from heritage_pipeline.transforms.normalize import LandNormalizer, deduplicate_lands
from heritage_pipeline.utils.logging import configure_logging, get_logger

log = get_logger(__name__, pipeline="unclaimed_lands")


class FetchStrategy(str, Enum):
    DATAGOV_METADATA = "datagov_metadata"
    TAIPEI_PAGINATED = "taipei_paginated"


@dataclass(frozen=True)
class CitySource:
    """How one city's dataset is fetched and parsed."""

    city: str
    dataset_id: str
    api_url: str
    strategy: FetchStrategy
    parser: ParserKind


CITY_SOURCES: dict[str, CitySource] = {
    TAIPEI: CitySource(
        city=TAIPEI,
        dataset_id="134972",
        api_url="https://data.taipei/api/v1/dataset/134972",
        strategy=FetchStrategy.TAIPEI_PAGINATED,
        parser=ParserKind.TAIPEI,
    ),
    CHIAYI_CITY: CitySource(
        city=CHIAYI_CITY,
        dataset_id="52344",
        api_url="https://data.gov.tw/dataset/52344",
        strategy=FetchStrategy.DATAGOV_METADATA,
        parser=ParserKind.CHIAYI,
    ),
    CHIAYI_COUNTY: CitySource(
        city=CHIAYI_COUNTY,
        dataset_id="133739",
        api_url="https://data.gov.tw/dataset/133739",
        strategy=FetchStrategy.DATAGOV_METADATA,
        parser=ParserKind.CHIAYI,
    ),
    CHANGHUA_COUNTY: CitySource(
        city=CHANGHUA_COUNTY,
        dataset_id="28529",
        api_url="https://data.gov.tw/dataset/28529",
        strategy=FetchStrategy.DATAGOV_METADATA,
        parser=ParserKind.CHANGHUA,
    ),
}

ALL_CITIES: list[str] = list(CITY_SOURCES)


@dataclass
class CitySyncResult:
    city: str
    success: bool
    records_added: int = 0
    records_updated: int = 0
    records_failed: int = 0
    batches_failed: int = 0
    error: str | None = None

    @property
    def record_count(self) -> int:
        return self.records_added + self.records_updated

    def to_dict(self) -> dict[str, Any]:
        return {
            "city": self.city,
            "success": self.success,
            "records_added": self.records_added,
            "records_updated": self.records_updated,
            "records_failed": self.records_failed,
            "batches_failed": self.batches_failed,
            "error": self.error,
        }


@dataclass
class SyncRunResult:
    results: list[CitySyncResult] = field(default_factory=list)
    synced_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def success(self) -> bool:
        return all(r.success for r in self.results)

    @property
    def total_records_added(self) -> int:
        return sum(r.records_added for r in self.results)

    @property
    def total_records_updated(self) -> int:
        return sum(r.records_updated for r in self.results)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "synced_at": self.synced_at.isoformat(),
            "summary": {
                "total_records_added": self.total_records_added,
                "total_records_updated": self.total_records_updated,
            },
            "results": [r.to_dict() for r in self.results],
        }


def resolve_city(city: str) -> CitySource | None:
    """Look up a city (any known spelling) in the dispatch table."""
    return CITY_SOURCES.get(normalize_city_name(city))


def default_sources() -> dict[FetchStrategy, BaseSource]:
    return {
        FetchStrategy.DATAGOV_METADATA: DataGovSource(),
        FetchStrategy.TAIPEI_PAGINATED: TaipeiSource(),
    }


def _result_from_load(city: str, load: LoadResult) -> CitySyncResult:
    # Partial batch failures still count as a successful sync; the counts
    # expose the shortfall. Only a sync where every batch failed is a failure.
    all_failed = load.batches_total > 0 and load.batches_failed == load.batches_total
    return CitySyncResult(
        city=city,
        success=not all_failed,
        records_added=load.records_added,
        records_updated=load.records_updated,
        records_failed=load.records_failed,
        batches_failed=load.batches_failed,
        error="; ".join(load.errors) or None,
    )


async def sync_city(
    city: str,
    *,
    sources: dict[FetchStrategy, BaseSource],
    loader: SupabaseLoader | None,
    normalizer: LandNormalizer,
    dry_run: bool = False,
) -> CitySyncResult:
    """Fetch, parse, normalize and upsert one city's dataset."""
    source_def = resolve_city(city)
    if source_def is None:
        return CitySyncResult(city=city, success=False, error=f"Unknown city: {city}")

    city_log = log.bind(city=source_def.city, dataset_id=source_def.dataset_id)

    fetched = await sources[source_def.strategy].fetch(source_def.dataset_id)
    if not fetched.success or fetched.data is None:
        return CitySyncResult(
            city=source_def.city,
            success=False,
            error=fetched.error or "Failed to fetch data",
        )

    parser = get_parser(source_def.parser, source_def.city)
    raw = parser.parse(fetched.data)
    lands = deduplicate_lands(normalizer.normalize(raw, source_def.api_url))
    city_log.info(
        "records_prepared",
        fetched=fetched.record_count,
        parsed=len(raw),
        normalized=len(lands),
    )

    if dry_run or loader is None:
        return CitySyncResult(
            city=source_def.city, success=True, records_added=len(lands)
        )

    load = await loader.upsert_lands([land.to_insert_dict() for land in lands])
    return _result_from_load(source_def.city, load)


async def run(
    cities: list[str] | None = None,
    *,
    dry_run: bool = False,
    loader: SupabaseLoader | None = None,
    sources: dict[FetchStrategy, BaseSource] | None = None,
    normalizer: LandNormalizer | None = None,
) -> SyncRunResult:
    """
    Sync the given cities (default: all known) one at a time.

    Args:
        cities:     City identifiers; aliases such as "臺北市" are accepted.
        dry_run:    Fetch, parse and normalize but do not write to Supabase.
        loader:     Injected loader (default: service-role SupabaseLoader).
        sources:    Injected fetchers keyed by strategy.
        normalizer: Injected normalizer (default: bundled district table).

    Returns:
        SyncRunResult with one CitySyncResult per requested city.

    Raises:
        RuntimeError: if the Supabase client cannot be configured. Per-city
        errors never propagate.
    """
    configure_logging()
    targets = list(cities) if cities else list(ALL_CITIES)
    log.info("sync_run_start", cities=targets, dry_run=dry_run)

    if not dry_run and loader is None:
        loader = SupabaseLoader()
    sources = sources or default_sources()
    normalizer = normalizer or LandNormalizer()

    run_result = SyncRunResult()

    for city in targets:
        city_log = log.bind(city=city)
        city_log.info("city_sync_start")
        log_id: str | None = None

        try:
            if not dry_run:
                log_id = await loader.start_sync_log(normalize_city_name(city))
            result = await sync_city(
                city,
                sources=sources,
                loader=None if dry_run else loader,
                normalizer=normalizer,
                dry_run=dry_run,
            )
        except Exception as exc:
            city_log.error("city_sync_error", error=str(exc), exc_info=True)
            result = CitySyncResult(
                city=city, success=False, error=f"{type(exc).__name__}: {exc}"
            )

        run_result.results.append(result)

        if not dry_run and log_id is not None:
            await _record_outcome(loader, log_id, result)

        city_log.info(
            "city_sync_complete",
            success=result.success,
            records_added=result.records_added,
            records_updated=result.records_updated,
            error=result.error,
        )

    log.info(
        "sync_run_complete",
        success=run_result.success,
        total_records_added=run_result.total_records_added,
        total_records_updated=run_result.total_records_updated,
    )
    return run_result


async def _record_outcome(
    loader: SupabaseLoader, log_id: str, result: CitySyncResult
) -> None:
    """Close the city's sync log and stamp its data source; never raises."""
    try:
        if result.success:
            await loader.finish_sync_log(
                log_id,
                records_added=result.records_added,
                records_updated=result.records_updated,
            )
            await loader.mark_source_synced(result.city, result.record_count)
        else:
            await loader.fail_sync_log(
                log_id,
                result.error or "Sync failed",
                records_added=result.records_added,
                records_updated=result.records_updated,
            )
    except Exception as exc:
        log.error(
            "sync_log_update_failed",
            city=result.city,
            sync_log_id=log_id,
            error=str(exc),
        )
