"""
CLI utility helpers: output formatting and feed loading.
"""

from __future__ import annotations

import json
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from portfolio_cms.content.experiences import Experience
from portfolio_cms.content.feed import FeedClient, TileCatalog, read_source
from portfolio_cms.content.filtering import FilterResult
from portfolio_cms.content.normalizer import Tile
from portfolio_cms.core.errors import PortfolioError, categorize_error, is_retryable
from portfolio_cms.core.settings import PortfolioSettings

console = Console()
err_console = Console(stderr=True)


# ── Feed helpers ─────────────────────────────────────────────────────────


def fail(error: Exception) -> typer.Exit:
    """Report an error by category and return the exit to raise."""
    message = error.message if isinstance(error, PortfolioError) else str(error)
    category = categorize_error(error).value
    err_console.print(f"[bold red]Error[/bold red] ({category}): {escape(message)}")
    if is_retryable(error):
        err_console.print("[dim]The feed may be temporarily unavailable; try again later.[/dim]")
    return typer.Exit(code=1)


def load_catalog(settings: PortfolioSettings, source: str | None = None) -> TileCatalog:
    """Read the tile feed (``--source`` or the configured sheet) into a catalog."""
    location = source or settings.sheet_csv_url
    client = FeedClient(timeout=settings.http_timeout)
    catalog = TileCatalog()
    try:
        catalog.refresh(lambda: read_source(location, client), max_tags=settings.max_tags, source=location)
    except PortfolioError as e:
        raise fail(e) from e
    return catalog


# ── Output helpers ───────────────────────────────────────────────────────


def tile_to_dict(tile: Tile) -> dict[str, Any]:
    return {
        "slug": tile.slug,
        "lane": tile.lane,
        "size": tile.size.value,
        "title": tile.title,
        "subtitle": tile.subtitle,
        "tags": list(tile.tags),
        "parent_slug": tile.parent_slug,
        "sort": tile.sort,
    }


def filter_result_to_list(result: FilterResult) -> list[dict[str, Any]]:
    return [
        {
            **tile_to_dict(entry.tile),
            "anchor": entry.is_anchor,
            "children": [tile_to_dict(child) for child in entry.children],
        }
        for entry in result.entries
    ]


def experience_to_dict(experience: Experience) -> dict[str, Any]:
    return experience.model_dump(mode="json")


def print_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, default=str))


def print_filter_result(result: FilterResult, title: str = "") -> None:
    if not result.entries:
        console.print("[dim]No tiles.[/dim]")
        return

    table = Table(title=escape(title) if title else None)
    table.add_column("Slug", style="cyan")
    table.add_column("Title")
    table.add_column("Size")
    table.add_column("Tags", style="dim")
    for entry in result.entries:
        tile = entry.tile
        label = f"{escape(tile.title)} [dim](anchor)[/dim]" if entry.is_anchor else escape(tile.title)
        table.add_row(escape(tile.slug), label, tile.size.value, escape(", ".join(tile.tags)))
        for child in entry.children:
            table.add_row(
                f"  └ {escape(child.slug)}", escape(child.title), child.size.value, escape(", ".join(child.tags))
            )
    console.print(table)
    console.print(f"[dim]{result.shown_count} shown[/dim]")
