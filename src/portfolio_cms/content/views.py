"""
Presentation projections of tiles for cards and detail views.

These helpers turn a Tile into the plain values a renderer needs (date range
label, hero image, safe action links, child tiles). They do no templating.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import parse_qs, urlsplit

from portfolio_cms.content.hierarchy import HierarchyIndex
from portfolio_cms.content.markdown import render_markdown_lite, safe_href
from portfolio_cms.content.normalizer import Tile

_YOUTUBE_URL = re.compile(r"(^https?://)?(www\.)?(youtube\.com|youtu\.be)/", re.IGNORECASE)

# Used when the URL has no scheme/host to split on
_YOUTUBE_ID_PATTERNS = (
    re.compile(r"youtu\.be/([A-Za-z0-9_-]{6,})", re.IGNORECASE),
    re.compile(r"[?&]v=([A-Za-z0-9_-]{6,})", re.IGNORECASE),
    re.compile(r"/embed/([A-Za-z0-9_-]{6,})", re.IGNORECASE),
    re.compile(r"/shorts/([A-Za-z0-9_-]{6,})", re.IGNORECASE),
)

DATE_SEPARATOR = " — "
META_SEPARATOR = " • "


def format_dates(start: str, end: str, is_current: bool) -> str:
    """
    Human date range for a tile.

    Examples:
        ("2021", "2023", False) -> "2021 — 2023"
        ("2021", "", True)      -> "2021 — Present"
        ("", "", True)          -> "Present"
    """
    start, end = start.strip(), end.strip()
    if not start and not end and not is_current:
        return ""
    if start and (end or is_current):
        return f"{start}{DATE_SEPARATOR}{'Present' if is_current else end}"
    if start:
        return start
    if end:
        return end
    return "Present"


def is_youtube_url(url: str) -> bool:
    return bool(_YOUTUBE_URL.search(url or ""))


def youtube_id(url: str) -> str:
    """Extract a video id from watch, youtu.be, embed and shorts URLs."""
    url = (url or "").strip()
    parts = urlsplit(url)
    if not parts.netloc:
        for pattern in _YOUTUBE_ID_PATTERNS:
            match = pattern.search(url)
            if match:
                return match.group(1)
        return ""

    segments = [s for s in parts.path.split("/") if s]
    if "youtu.be" in parts.netloc.lower():
        return segments[0] if segments else ""

    video = parse_qs(parts.query).get("v")
    if video and video[0]:
        return video[0]

    for marker in ("embed", "shorts"):
        if marker in segments:
            position = segments.index(marker)
            if position + 1 < len(segments):
                return segments[position + 1]
    return ""


def youtube_thumb(url: str) -> str:
    video = youtube_id(url)
    if not video:
        return ""
    return f"https://img.youtube.com/vi/{video}/hqdefault.jpg"


def card_media_thumb(tile: Tile) -> str:
    """Cards only show an explicit image."""
    return tile.image_url


def modal_media_thumb(tile: Tile) -> str:
    """Detail hero: image, else the video's thumbnail (explicit or YouTube)."""
    if tile.image_url:
        return tile.image_url
    if not tile.video_url:
        return ""
    if tile.thumb_url:
        return tile.thumb_url
    if is_youtube_url(tile.video_url):
        return youtube_thumb(tile.video_url)
    return ""


@dataclass(frozen=True)
class DetailAction:
    label: str
    href: str
    kind: str  # "link" or "video"


@dataclass(frozen=True)
class TileDetail:
    """Everything a detail/modal view shows for one tile."""

    tile: Tile
    meta_line: str
    body_html: str
    hero_image: str
    actions: tuple[DetailAction, ...]
    children: tuple[Tile, ...]


def meta_line(tile: Tile) -> str:
    parts = [tile.lane.upper(), tile.size.value.upper()]
    dates = format_dates(tile.start_date, tile.end_date, tile.is_current)
    if dates:
        parts.append(dates)
    return META_SEPARATOR.join(p for p in parts if p)


def detail_actions(tile: Tile) -> tuple[DetailAction, ...]:
    """Outbound actions, only for http/https/mailto targets."""
    actions = []
    href = safe_href(tile.href)
    if href:
        actions.append(DetailAction(label="Open link", href=href, kind="link"))
    video = safe_href(tile.video_url)
    if video:
        actions.append(DetailAction(label="Watch video", href=video, kind="video"))
    return tuple(actions)


def tile_detail(index: HierarchyIndex, tile: Tile) -> TileDetail:
    """
    Project a tile for its detail view.

    ``index`` must be the index of the tile's lane. Children ("included
    work") are listed for large tiles only.
    """
    children = index.children_of(tile.slug) if tile.is_large else ()
    return TileDetail(
        tile=tile,
        meta_line=meta_line(tile),
        body_html=render_markdown_lite(tile.body_md),
        hero_image=modal_media_thumb(tile),
        actions=detail_actions(tile),
        children=children,
    )


def lane_tags(tiles: Iterable[Tile], lane: str) -> list[str]:
    """Sorted unique tags used by the tiles of a lane (filter chips)."""
    return sorted({tag for tile in tiles if tile.lane == lane for tag in tile.tags})
