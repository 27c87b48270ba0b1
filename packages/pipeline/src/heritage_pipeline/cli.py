"""
cli.py — Click CLI entrypoint for the sync worker.

Usage:
    heritage-pipeline sync
    heritage-pipeline sync --city 台北市 --city 彰化縣 --dry-run
    heritage-pipeline status
    heritage-pipeline sources
    heritage-pipeline geocode 重慶南路一段122號 --city 台北市
"""

from __future__ import annotations

import asyncio
import sys

import click
import structlog

from heritage_shared.config import settings

log = structlog.get_logger(__name__)


@click.group()
@click.option(
    "--log-level",
    default=settings.log_level,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level",
)
@click.option(
    "--log-format",
    default=settings.log_format,
    type=click.Choice(["json", "console"]),
    help="Log output format",
)
def main(log_level: str, log_format: str) -> None:
    """Heritage Hunter unclaimed-land sync workers."""
    from heritage_pipeline.utils.logging import configure_logging

    configure_logging(log_level=log_level, log_format=log_format)


@main.command()
@click.option(
    "--city",
    "cities",
    multiple=True,
    help="City to sync (repeatable). Default: all known cities.",
)
@click.option("--dry-run", is_flag=True, help="Fetch and parse without writing to Supabase.")
def sync(cities: tuple[str, ...], dry_run: bool) -> None:
    """Sync unclaimed-land records for one or more cities."""
    from heritage_pipeline.pipelines.unclaimed_lands import run

    try:
        result = asyncio.run(run(cities=list(cities) or None, dry_run=dry_run))
    except RuntimeError as exc:
        click.echo(f"Sync failed: {exc}", err=True)
        sys.exit(2)

    for r in result.results:
        mark = "✓" if r.success else "✗"
        line = (
            f"  {mark} {r.city:6s} "
            f"added={r.records_added:<6d} updated={r.records_updated:<6d}"
        )
        if r.records_failed:
            line += f" failed={r.records_failed}"
        if r.error:
            line += f"  {r.error}"
        click.echo(line)

    click.echo(
        f"Total: {result.total_records_added} added, "
        f"{result.total_records_updated} updated"
    )
    if not result.success:
        sys.exit(1)


@main.command()
@click.option("--limit", default=20, show_default=True, help="Number of sync logs to show.")
def status(limit: int) -> None:
    """Show the most recent sync runs."""
    from heritage_pipeline.loaders.supabase_loader import SupabaseLoader

    click.echo("Sync status:")
    try:
        logs = asyncio.run(SupabaseLoader().recent_sync_logs(limit=limit))
    except Exception as exc:
        click.echo(f"  Error fetching status: {exc}", err=True)
        sys.exit(1)

    if not logs:
        click.echo("  No sync runs found.")
        return
    for entry in logs:
        status_mark = {"completed": "✓", "failed": "✗", "running": "⟳"}.get(entry.status, "?")
        started = entry.started_at.isoformat()[:19] if entry.started_at else ""
        click.echo(
            f"  {status_mark} {entry.source_city:6s} "
            f"{entry.status:10s} "
            f"+{entry.records_added} ~{entry.records_updated}  "
            f"{started}"
        )


@main.command()
def sources() -> None:
    """List the cities this worker knows how to sync."""
    from heritage_pipeline.pipelines.unclaimed_lands import CITY_SOURCES

    for source in CITY_SOURCES.values():
        click.echo(
            f"  {source.city:6s} {source.dataset_id:8s} "
            f"{source.strategy.value:18s} {source.api_url}"
        )


@main.command()
@click.argument("address")
@click.option("--city", default=None, help="City prefix for the address.")
def geocode(address: str, city: str | None) -> None:
    """Look up coordinates for a single address."""
    from heritage_pipeline.enrichment.geocoder import NominatimGeocoder

    hit = asyncio.run(NominatimGeocoder().geocode(address, city))
    if hit is None:
        click.echo("No result.")
        sys.exit(1)
    click.echo(f"{hit.lat:.6f},{hit.lng:.6f}  [{hit.confidence}]  {hit.display_name}")


if __name__ == "__main__":
    main()
