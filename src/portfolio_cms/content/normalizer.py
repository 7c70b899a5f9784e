"""
Record normalization (rows -> Tiles).

This module maps a header row plus data rows onto typed, immutable ``Tile``
records. Cells are coerced with small total helpers that default instead of
failing, so a malformed cell never aborts the batch. Rows that cannot become
a displayable tile are rejected with a clear reason.

The normalizer enforces, in order:
- Non-empty slug, lane and size (else MISSING_REQUIRED)
- published == TRUE (else UNPUBLISHED)
- Stable ordering by (sort, title)
"""

import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from portfolio_cms.content.schema import (
    DEFAULT_CHILD_ORDER,
    DEFAULT_MAX_TAGS,
    DEFAULT_SORT,
    FALLBACK_SIZE,
    REASON_MISSING_REQUIRED,
    REASON_UNPUBLISHED,
    REQUIRED_COLUMNS,
    STAGE_NORMALIZE,
    TileSize,
)
from portfolio_cms.core.logging import get_logger
from portfolio_cms.core.rejects import Reject

logger = get_logger(__name__)

_URL_SPLIT = re.compile(r"[\n,]+")


@dataclass(frozen=True)
class Tile:
    """
    A validated portfolio tile.

    All retained tiles are guaranteed to have:
    - Non-empty slug and lane
    - A TileSize
    - published == True

    Tiles are never patched; a new feed produces new Tiles.
    """

    slug: str
    lane: str
    size: TileSize
    parent_slug: str = ""
    child_order: int = DEFAULT_CHILD_ORDER
    title: str = ""
    subtitle: str = ""
    tags: tuple[str, ...] = ()
    image_url: str = ""
    video_url: str = ""
    thumb_url: str = ""
    href: str = ""
    body_md: str = ""
    start_date: str = ""
    end_date: str = ""
    is_current: bool = False
    published: bool = True
    featured: bool = False
    sort: int = DEFAULT_SORT
    source_line: int = 0  # Physical line the row starts on (header is line 1)

    @property
    def is_large(self) -> bool:
        return self.size is TileSize.LARGE

    @property
    def search_text(self) -> str:
        """Lower-cased haystack for free-text queries."""
        return " ".join([self.title, self.subtitle, " ".join(self.tags), self.body_md]).lower()


@dataclass
class NormalizationResult:
    """Container for normalized tiles and rejections."""

    tiles: tuple[Tile, ...]
    rejected: list[Reject] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.tiles) + len(self.rejected)

    @property
    def accepted_count(self) -> int:
        return len(self.tiles)

    @property
    def rejected_count(self) -> int:
        return len(self.rejected)

    @property
    def rejection_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return len(self.rejected) / self.total


# =============================================================================
# FIELD HELPERS
# =============================================================================


def clean(value: Any) -> str:
    """Trim a cell; None becomes the empty string."""
    if value is None:
        return ""
    return str(value).strip()


def to_bool(value: Any) -> bool:
    """Only a case-insensitive ``TRUE`` is true."""
    return clean(value).upper() == "TRUE"


def split_tags(value: Any, limit: int = DEFAULT_MAX_TAGS) -> tuple[str, ...]:
    """
    Split a comma-delimited tag cell.

    Tags are trimmed and empties dropped; duplicates are kept. At most
    ``limit`` tags are returned.
    """
    tags = [t.strip() for t in clean(value).split(",")]
    return tuple(t for t in tags if t)[:limit]


def first_url(value: Any) -> str:
    """Return the first non-empty token of a comma/newline separated cell."""
    for token in _URL_SPLIT.split(clean(value)):
        token = token.strip()
        if token:
            return token
    return ""


def parse_int(value: Any, default: int) -> int:
    """
    Parse an integer cell, falling back to ``default``.

    Integral floats ("3.0", "1e2") are accepted. Empty, non-numeric and
    fractional values give ``default``.
    """
    text = clean(value)
    if not text:
        return default
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return default
    if not math.isfinite(number) or not number.is_integer():
        return default
    return int(number)


# =============================================================================
# RECORD BUILDING
# =============================================================================


def row_to_record(header: Sequence[str], row: Sequence[str]) -> dict[str, str]:
    """
    Zip a header with a data row.

    Missing trailing cells become "", cells beyond the header are ignored.
    """
    return {name: (row[i] if i < len(row) else "") for i, name in enumerate(header)}


def build_tile(record: Mapping[str, Any], line_number: int = 0, max_tags: int = DEFAULT_MAX_TAGS) -> Tile | None:
    """
    Build a Tile from a header-keyed record.

    Returns None when a required field is empty. Publication is carried on
    the tile and filtered by ``normalize_records``.
    """
    slug = clean(record.get("slug"))
    lane = clean(record.get("lane"))
    size_cell = clean(record.get("size"))
    if not (slug and lane and size_cell):
        return None

    size = TileSize.from_cell(size_cell)
    if size is None:
        logger.warning("tile_size_defaulted", slug=slug, size=size_cell, fallback=FALLBACK_SIZE.value)
        size = FALLBACK_SIZE

    return Tile(
        slug=slug,
        lane=lane,
        size=size,
        parent_slug=clean(record.get("parent_slug")),
        child_order=parse_int(record.get("child_order"), DEFAULT_CHILD_ORDER),
        title=clean(record.get("title")),
        subtitle=clean(record.get("subtitle")),
        tags=split_tags(record.get("tags"), max_tags),
        image_url=first_url(record.get("image_url")),
        video_url=first_url(record.get("video_url")),
        thumb_url=first_url(record.get("thumb_url")),
        href=first_url(record.get("href")),
        body_md=clean(record.get("body_md")),
        start_date=clean(record.get("start_date")),
        end_date=clean(record.get("end_date")),
        is_current=to_bool(record.get("is_current")),
        published=to_bool(record.get("published")),
        featured=to_bool(record.get("featured")),
        sort=parse_int(record.get("sort"), DEFAULT_SORT),
        source_line=line_number,
    )


def _missing_fields(record: Mapping[str, Any]) -> list[str]:
    return [name for name in REQUIRED_COLUMNS if not clean(record.get(name))]


def normalize_records(
    header: Sequence[str],
    data_rows: Sequence[Sequence[str]],
    max_tags: int = DEFAULT_MAX_TAGS,
    source_locator: str | None = None,
    line_numbers: Sequence[int] | None = None,
) -> NormalizationResult:
    """
    Validate and normalize data rows against a header.

    Args:
        header: Column names (cleaned before use)
        data_rows: Raw rows as produced by the tokenizer
        max_tags: Tag cap for this feed
        source_locator: Optional file path/URL recorded on rejects
        line_numbers: Source line of each data row; defaults to the row
            ordinal counted from 2 (row 1 is the header)

    Returns:
        NormalizationResult with tiles sorted by (sort, title) and rejects
    """
    columns = [clean(name) for name in header]
    built: list[Tile] = []
    rejected: list[Reject] = []

    for offset, row in enumerate(data_rows):
        line_number = line_numbers[offset] if line_numbers is not None else offset + 2
        record = row_to_record(columns, row)
        tile = build_tile(record, line_number, max_tags)

        if tile is None:
            missing = _missing_fields(record)
            rejected.append(
                Reject(
                    stage=STAGE_NORMALIZE,
                    reason_code=REASON_MISSING_REQUIRED,
                    reason_detail=f"Missing required field(s): {', '.join(missing)}",
                    raw_data=record,
                    source_locator=source_locator,
                    line_number=line_number,
                )
            )
            continue
        built.append(tile)

    published: list[Tile] = []
    for tile in built:
        if tile.published:
            published.append(tile)
            continue
        rejected.append(
            Reject(
                stage=STAGE_NORMALIZE,
                reason_code=REASON_UNPUBLISHED,
                reason_detail=f"Tile '{tile.slug}' is not published",
                raw_data={"slug": tile.slug, "lane": tile.lane},
                source_locator=source_locator,
                line_number=tile.source_line,
            )
        )

    for reject in rejected:
        logger.debug("tile_rejected", reason=reject.reason_code, line_number=reject.line_number)

    tiles = tuple(sorted(published, key=lambda t: (t.sort, t.title)))
    logger.info("tiles_normalized", accepted=len(tiles), rejected=len(rejected))
    return NormalizationResult(tiles=tiles, rejected=rejected)


def normalize_tiles(
    rows: Sequence[Sequence[str]],
    max_tags: int = DEFAULT_MAX_TAGS,
    source_locator: str | None = None,
    line_numbers: Sequence[int] | None = None,
) -> NormalizationResult:
    """
    Normalize tokenized rows where the first row is the header.

    ``line_numbers`` runs parallel to ``rows`` (header included).
    Fewer than two rows means there is no data and gives an empty result.
    """
    if len(rows) < 2:
        return NormalizationResult(tiles=())
    return normalize_records(
        rows[0],
        rows[1:],
        max_tags=max_tags,
        source_locator=source_locator,
        line_numbers=line_numbers[1:] if line_numbers is not None else None,
    )
