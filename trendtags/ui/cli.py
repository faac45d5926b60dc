from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import typer
import uvicorn

from ..api.app import create_app
from ..config import DEFAULT_SETTINGS_PATH, load_settings
from ..errors import InvalidTextError
from ..models import GenerateRequest
from ..pipeline.recommend import recommend
from ..pipeline.runner import interval_seconds, refresh_async, run_schedule
from ..pipeline.storage import DuckDBTrendStore, export_snapshots
from ..utils.logging import configure_logging

app = typer.Typer(add_completion=False, help="Trending hashtag scraper and recommendation API")

SettingsOption = typer.Option(DEFAULT_SETTINGS_PATH, "--settings", help="Path to runtime settings")


@app.command()
def serve(
    settings: Path = SettingsOption,
    host: Optional[str] = typer.Option(None, help="Override the configured bind address"),
    port: Optional[int] = typer.Option(None, help="Override the configured port"),
    log_level: str = typer.Option("INFO", help="Logging level"),
):
    """Run the HTTP API."""

    configure_logging(log_level)
    cfg = load_settings(settings)
    api = create_app(cfg)
    typer.echo(f"API listening on port {port or cfg.server.port}")
    uvicorn.run(api, host=host or cfg.server.host, port=port or cfg.server.port, log_level=log_level.lower())


@app.command()
def scrape(
    settings: Path = SettingsOption,
    country: Optional[List[str]] = typer.Option(None, help="Country to refresh; repeat for several"),
    log_level: str = typer.Option("INFO", help="Logging level"),
):
    """Scrape trending hashtags once and store a snapshot per country."""

    configure_logging(log_level)
    cfg = load_settings(settings)
    store = DuckDBTrendStore(cfg.storage)
    written = asyncio.run(refresh_async(cfg, store, countries=country or None))
    for snapshot in written:
        typer.echo(f"Saved {snapshot.count} hashtags for {snapshot.country}")
    if not written:
        typer.echo("No snapshots written")
        raise typer.Exit(code=1)


@app.command()
def schedule(
    settings: Path = SettingsOption,
    iterations: Optional[int] = typer.Option(None, min=1, help="Stop after N refreshes (default: run forever)"),
    log_level: str = typer.Option("INFO", help="Logging level"),
):
    """Scrape now, then again every configured interval."""

    configure_logging(log_level)
    cfg = load_settings(settings)
    store = DuckDBTrendStore(cfg.storage)
    typer.echo(f"Refreshing every {interval_seconds(cfg.scraper) // 60} minutes")
    asyncio.run(run_schedule(cfg, store, iterations=iterations))


@app.command()
def show(
    settings: Path = SettingsOption,
    country: str = typer.Option("global", help="Country snapshot to display"),
    limit: int = typer.Option(20, help="Number of hashtags to display"),
):
    """Preview the stored trend snapshot for a country."""

    cfg = load_settings(settings)
    snapshot = DuckDBTrendStore(cfg.storage).get(country)
    if not snapshot.hashtags:
        typer.echo(f"No trends stored for {snapshot.country}")
        return
    typer.echo(f"{snapshot.country} updated {snapshot.updated_at.isoformat() if snapshot.updated_at else '-'}")
    for rank, entry in enumerate(snapshot.hashtags[:limit], start=1):
        typer.echo(f"{rank:>3}. {entry.tag} ({entry.score})")


@app.command()
def generate(
    text: str = typer.Argument(..., help="Text to recommend hashtags for"),
    settings: Path = SettingsOption,
    country: Optional[str] = typer.Option(None, help="Country snapshot to match against"),
    limit: Optional[int] = typer.Option(None, min=0, help="Maximum hashtags returned"),
):
    """Recommend hashtags for TEXT using the stored snapshot."""

    cfg = load_settings(settings)
    store = DuckDBTrendStore(cfg.storage)
    try:
        result = recommend(GenerateRequest(text=text, country=country, limit=limit), store, cfg.recommend)
    except InvalidTextError as exc:
        typer.echo(exc.message, err=True)
        raise typer.Exit(code=2)
    typer.echo(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2))


@app.command()
def export(
    out: Path = typer.Argument(..., help="Destination file (csv, json, parquet)"),
    settings: Path = SettingsOption,
    country: Optional[List[str]] = typer.Option(None, help="Countries to export (default: all)"),
):
    """Export stored snapshots, one row per hashtag."""

    cfg = load_settings(settings)
    rows = export_snapshots(DuckDBTrendStore(cfg.storage), out, countries=country or None)
    typer.echo(f"Exported {rows} rows to {out}")


if __name__ == "__main__":  # pragma: no cover
    app()
