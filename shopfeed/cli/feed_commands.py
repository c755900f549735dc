"""
CLI commands for fetching the catalog and building the product feed
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from shopfeed.core.config import settings
from shopfeed.core.exceptions import BaseAPIException
from shopfeed.core.logging import setup_logging
from shopfeed.schemas.catalog import CatalogSnapshot
from shopfeed.schemas.feed import FeedSummary
from shopfeed.services.feed_service import FeedService
from shopfeed.services.snapshot_store import save_snapshot
from shopfeed.services.square_client import SquareClient

app = typer.Typer(help="Square catalog to Google Merchant Center feed")
console = Console()
err_console = Console(stderr=True)


@app.callback()
def main(log_level: Optional[str] = typer.Option(None, help="Log level (defaults to LOG_LEVEL)")):
    """Configure logging for every command"""
    setup_logging(log_level)


def _fail(exc: BaseAPIException) -> None:
    err_console.print(f"❌ {exc.detail}", style="red")
    raise typer.Exit(code=1)


def _print_summary(summary: FeedSummary) -> None:
    table = Table(title="Feed Summary")
    table.add_column("Stage", style="cyan")
    table.add_column("Count", style="green", justify="right")

    for object_type, count in sorted(summary.catalog_objects.items()):
        table.add_row(f"Catalog objects ({object_type})", str(count))
    table.add_row("Variations", str(summary.variations))
    table.add_row("Variations with stock", str(summary.variations_in_stock))
    table.add_row("Aggregated items", str(summary.aggregated_items))
    table.add_row("Published items", str(summary.published_items))

    console.print(table)
    if summary.fetched_at:
        console.print(f"Snapshot fetched at {summary.fetched_at.isoformat()}")


async def _fetch(environment: Optional[str]) -> CatalogSnapshot:
    async with SquareClient(environment=environment) as client:
        return await client.fetch_snapshot()


@app.command()
def fetch(
    output: Path = typer.Option(settings.snapshot_path, help="Snapshot file to write"),
    environment: str = typer.Option(settings.square_environment, help="Square environment: production, sandbox"),
):
    """Fetch catalog and inventory from Square into a snapshot file"""
    try:
        snapshot = asyncio.run(_fetch(environment))
        save_snapshot(snapshot, output)
        console.print(f"✅ Wrote {output}", style="green")
        _print_summary(FeedService(snapshot_path=output).summary())
    except BaseAPIException as exc:
        _fail(exc)


@app.command()
def generate(
    snapshot: Path = typer.Option(settings.snapshot_path, help="Snapshot file to read"),
    output: Optional[Path] = typer.Option(None, help="Write the feed here instead of stdout"),
    default_brand: Optional[str] = typer.Option(None, help="Fallback brand (defaults to DEFAULT_BRAND)"),
):
    """Generate the Google product feed from a snapshot"""
    try:
        content = FeedService(snapshot_path=snapshot).generate_feed(default_brand=default_brand)
    except BaseAPIException as exc:
        _fail(exc)

    if output is None:
        typer.echo(content, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")
    rows = content.count("\n")
    console.print(f"✅ Wrote {rows} products to {output}", style="green")


@app.command()
def summary(snapshot: Path = typer.Option(settings.snapshot_path, help="Snapshot file to read")):
    """Show counts for each stage of the feed pipeline"""
    try:
        _print_summary(FeedService(snapshot_path=snapshot).summary())
    except BaseAPIException as exc:
        _fail(exc)


if __name__ == "__main__":
    app()
