"""
heritage_pipeline — sync workers for Taiwan's unclaimed-inheritance land lists.

Architecture:
  sources/     — data.gov.tw and data.taipei fetchers
  parsers/     — one CSV parser per county layout
  transforms/  — city-name folding, unit fill-in, district coordinates
  loaders/     — batched Supabase upserts and sync_logs bookkeeping
  enrichment/  — optional Nominatim geocoding
  pipelines/   — the per-city sync orchestrator
  utils/       — structlog configuration, exponential-backoff retry decorator

Quick start:
    from heritage_pipeline.pipelines.unclaimed_lands import run
    import asyncio
    result = asyncio.run(run(dry_run=True))

CLI:
    heritage-pipeline sync --city 台北市 --dry-run
    heritage-pipeline status

Shared code from heritage_shared:
    from heritage_shared.config import settings
    from heritage_shared.db import get_supabase_client
    from heritage_shared.models import NormalizedLand, SyncLog
    from heritage_shared.geo import DistrictLookup, normalize_city_name
"""

__version__ = "0.1.0"
