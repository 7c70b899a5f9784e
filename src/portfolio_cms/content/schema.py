"""
Portfolio content schema - columns, sizes, defaults and reject codes.

This is the only place that defines tile-feed constants.
All other modules in this package import from here.
"""

from enum import Enum

# Feed identifiers used in log and error context
TILES_FEED = "tiles"
EXPERIENCES_FEED = "experiences"


class TileSize(str, Enum):
    """
    Display size of a tile.

    LARGE tiles with children act as collections: their children are shown
    beneath them and can pull them into a filtered view.
    """

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    @classmethod
    def from_cell(cls, value: str) -> "TileSize | None":
        """
        Parse a size cell case-insensitively.

        Returns None for values that are not a known size.
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


# Size used when a non-empty size cell is not a known size
FALLBACK_SIZE = TileSize.MEDIUM

# =============================================================================
# COLUMNS
# =============================================================================

TILE_COLUMNS = (
    "slug",
    "lane",
    "size",
    "parent_slug",
    "child_order",
    "title",
    "subtitle",
    "tags",
    "image_url",
    "video_url",
    "thumb_url",
    "href",
    "body_md",
    "start_date",
    "end_date",
    "is_current",
    "published",
    "featured",
    "sort",
)

REQUIRED_COLUMNS = ("slug", "lane", "size")

# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_CHILD_ORDER = 0
# Un-sorted records sink to the end
DEFAULT_SORT = 9999
DEFAULT_MAX_TAGS = 8

# =============================================================================
# REJECT CODES
# =============================================================================

STAGE_NORMALIZE = "NORMALIZE"

REASON_MISSING_REQUIRED = "MISSING_REQUIRED"
REASON_UNPUBLISHED = "UNPUBLISHED"
REASON_INVALID_EXPERIENCE = "INVALID_EXPERIENCE"
