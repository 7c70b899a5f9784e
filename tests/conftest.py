"""
Shared pytest fixtures for portfolio-cms tests.

This module provides:
- A sample tile sheet (two lanes, one large collection, one unpublished row,
  one row without a slug) as CSV text and as a file
- A sample experiences document
- Settings cache and structlog resets for test isolation
"""

import csv
import io
import json
from pathlib import Path
from typing import Any

import pytest
import structlog

from portfolio_cms.content.schema import TILE_COLUMNS
from portfolio_cms.core.settings import clear_settings_cache

SAMPLE_ROWS: list[dict[str, str]] = [
    {
        "slug": "acme",
        "lane": "business",
        "size": "large",
        "title": "Acme Growth",
        "subtitle": "Head of Growth",
        "tags": "Strategy, Growth",
        "image_url": "https://img.example/acme.png",
        "href": "https://acme.example",
        "body_md": "## Role\n- Led **growth**",
        "start_date": "2021",
        "is_current": "TRUE",
        "featured": "TRUE",
        "sort": "1",
    },
    {
        "slug": "acme-launch",
        "lane": "business",
        "size": "small",
        "parent_slug": "acme",
        "child_order": "2",
        "title": "Launch Campaign",
        "tags": "Marketing",
        "sort": "5",
    },
    {
        "slug": "acme-pricing",
        "lane": "business",
        "size": "small",
        "parent_slug": "acme",
        "child_order": "1",
        "title": "Pricing Study",
        "tags": "Strategy, Research",
        "sort": "6",
    },
    {
        "slug": "beta",
        "lane": "business",
        "size": "medium",
        "title": "Beta Advisory",
        "tags": "Research",
        "sort": "2",
    },
    {
        "slug": "draft",
        "lane": "business",
        "size": "small",
        "title": "Draft",
        "published": "FALSE",
        "sort": "3",
    },
    {
        "slug": "reel",
        "lane": "creative",
        "size": "medium",
        "title": "Showreel",
        "tags": "Video",
        "video_url": "https://www.youtube.com/watch?v=abc123XYZ",
        "sort": "1",
    },
    {
        "slug": "",
        "lane": "business",
        "size": "small",
        "title": "No Slug",
    },
]


def make_csv(rows: list[dict[str, str]], columns: tuple[str, ...] = TILE_COLUMNS) -> str:
    """Write rows as a spreadsheet-style CSV export (published defaults to TRUE)."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(columns)
    for row in rows:
        values = {"published": "TRUE", **row}
        writer.writerow([values.get(column, "") for column in columns])
    return buffer.getvalue()


SAMPLE_EXPERIENCES: dict[str, Any] = {
    "experiences": [
        {
            "slug": "acme-launch",
            "bucket": "business",
            "title": "Acme launch",
            "subtitle": "Growth lead",
            "timeframe": "2021 - 2023",
            "summary": "Took the product to market.",
            "tags": [
                {"group": "Skill", "value": "Strategy"},
                {"group": "Industry", "value": "Retail"},
            ],
            "content": {
                "paragraphs": ["Built the pricing model."],
                "links": [{"label": "Site", "url": "https://acme.example"}],
            },
            "detail_level": "M",
        },
        {
            "slug": "studio-reel",
            "bucket": "creative",
            "title": "Studio reel",
            "tags": [{"group": "Skill", "value": "Editing"}],
            "detail_level": "L",
        },
        {
            "slug": "beta-board",
            "bucket": "business",
            "title": "Beta board seat",
            "tags": [{"group": "Skill", "value": "Governance"}],
            "sub_experiences": [{"title": "Audit committee", "tags": [{"group": "Skill", "value": "Audit"}]}],
        },
        {
            "bucket": "business",
            "title": "Missing slug",
        },
    ]
}


@pytest.fixture(autouse=True)
def _isolate_settings_and_logging():
    """Each test starts with fresh settings and default structlog config."""
    clear_settings_cache()
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    yield
    clear_settings_cache()
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def sample_csv() -> str:
    return make_csv(SAMPLE_ROWS)


@pytest.fixture
def sample_csv_file(tmp_path: Path, sample_csv: str) -> Path:
    path = tmp_path / "tiles.csv"
    path.write_text(sample_csv, encoding="utf-8")
    return path


@pytest.fixture
def sample_experiences_file(tmp_path: Path) -> Path:
    path = tmp_path / "experiences.json"
    path.write_text(json.dumps(SAMPLE_EXPERIENCES), encoding="utf-8")
    return path


@pytest.fixture
def sample_tiles(sample_csv: str):
    from portfolio_cms.content.feed import load_tiles

    return load_tiles(sample_csv).tiles


@pytest.fixture
def csv_text():
    """Factory building a CSV document from row dicts."""
    return make_csv
