"""
Root Typer application for the portfolio-cms CLI.

Every command reads a complete feed (``--source`` path/URL, or the configured
default), runs it through the content pipeline and prints the projection.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape
from typer import Typer

from portfolio_cms.cli.utils import (
    console,
    err_console,
    experience_to_dict,
    fail,
    filter_result_to_list,
    load_catalog,
    print_filter_result,
    print_json,
    tile_to_dict,
)
from portfolio_cms.content.experiences import (
    filter_experiences,
    lane_label,
    parse_experiences,
    results_summary,
)
from portfolio_cms.content.feed import FeedClient, read_source
from portfolio_cms.content.filtering import Query
from portfolio_cms.content.markdown import render_markdown_lite
from portfolio_cms.content.schema import EXPERIENCES_FEED
from portfolio_cms.core.errors import PortfolioError, ValidationError
from portfolio_cms.core.logging import configure_logging
from portfolio_cms.core.settings import get_settings

app = Typer(
    name="portfolio-cms",
    help="portfolio-cms: inspect the tile and experience feeds of the portfolio site.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from portfolio_cms import __version__

        typer.echo(f"portfolio-cms {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Override PORTFOLIO_LOG_LEVEL."),
) -> None:
    """portfolio-cms CLI: list, filter and inspect portfolio content."""
    try:
        settings = get_settings()
    except PortfolioError as e:
        raise fail(e) from e
    configure_logging(level=log_level or settings.log_level, json_format=settings.json_logs)


# ── Tiles ────────────────────────────────────────────────────────────────


@app.command("tiles")
def list_tiles(
    lane: str = typer.Argument(..., help="Lane to list (e.g. business, creative)"),
    source: str | None = typer.Option(None, "--source", "-s", help="CSV file or URL"),
    query: str = typer.Option("", "--query", "-q", help="Free-text filter"),
    tags: list[str] | None = typer.Option(None, "--tag", "-t", help="Selected tag (repeatable)"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List the visible tiles of a lane under a filter."""
    catalog = load_catalog(get_settings(), source)
    result = catalog.evaluate(lane, Query.build(query, tags))
    if json_out:
        print_json(filter_result_to_list(result))
        return
    print_filter_result(result, title=lane_label(lane))


@app.command("show")
def show_tile(
    slug: str = typer.Argument(..., help="Tile slug"),
    source: str | None = typer.Option(None, "--source", "-s", help="CSV file or URL"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show the detail view of one tile."""
    catalog = load_catalog(get_settings(), source)
    detail = catalog.detail(slug)
    if detail is None:
        err_console.print(f"[bold red]Error:[/bold red] No tile with slug '{escape(slug)}'")
        raise typer.Exit(code=1)

    if json_out:
        print_json(
            {
                **tile_to_dict(detail.tile),
                "meta": detail.meta_line,
                "body_html": detail.body_html,
                "hero_image": detail.hero_image,
                "actions": [{"label": a.label, "href": a.href} for a in detail.actions],
                "children": [tile_to_dict(c) for c in detail.children],
            }
        )
        return

    tile = detail.tile
    console.print(f"[bold]{escape(tile.title)}[/bold]")
    if tile.subtitle:
        console.print(escape(tile.subtitle))
    console.print(f"[dim]{escape(detail.meta_line)}[/dim]")
    if tile.tags:
        console.print(", ".join(escape(t) for t in tile.tags))
    if detail.body_html:
        console.print(escape(detail.body_html))
    for action in detail.actions:
        console.print(f"{escape(action.label)}: {escape(action.href)}")
    if detail.children:
        console.print("[bold]Included work[/bold]")
        for child in detail.children:
            console.print(f"  └ {escape(child.slug)}  {escape(child.title)}")


@app.command("tags")
def list_tags(
    lane: str = typer.Argument(..., help="Lane"),
    source: str | None = typer.Option(None, "--source", "-s", help="CSV file or URL"),
) -> None:
    """List the filter tags used in a lane."""
    catalog = load_catalog(get_settings(), source)
    for tag in catalog.tags(lane):
        typer.echo(tag)


# ── Markdown ─────────────────────────────────────────────────────────────


@app.command("markdown")
def render_markdown(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Markdown-lite file"),
) -> None:
    """Render a markdown-lite file to HTML on stdout."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise fail(e) from e
    typer.echo(render_markdown_lite(text))


# ── Experiences ──────────────────────────────────────────────────────────


@app.command("experiences")
def list_experiences(
    lane: str = typer.Argument(..., help="Lane (experience bucket)"),
    source: str | None = typer.Option(None, "--source", "-s", help="JSON file or URL"),
    query: str = typer.Option("", "--query", "-q", help="Free-text filter"),
    tags: list[str] | None = typer.Option(None, "--tag", "-t", help="Selected tag as group::value"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List experiences of a lane under a filter."""
    for tag in tags or ():
        group, sep, value = tag.partition("::")
        if not (sep and group.strip() and value.strip()):
            raise fail(ValidationError(f"Tag {tag!r} must be written as group::value", field="tag", value=tag))

    settings = get_settings()
    location = source or str(settings.experiences_path)
    try:
        feed = parse_experiences(read_source(location, FeedClient(settings.http_timeout), feed=EXPERIENCES_FEED))
    except PortfolioError as e:
        raise fail(e) from e

    results = filter_experiences(feed.experiences, lane, Query.build(query, tags))
    if json_out:
        print_json([experience_to_dict(e) for e in results])
        return

    for experience in results:
        console.print(f"[cyan]{escape(experience.slug)}[/cyan]  {escape(experience.title)}")
    console.print(f"[dim]{results_summary(len(results), lane)}[/dim]")
