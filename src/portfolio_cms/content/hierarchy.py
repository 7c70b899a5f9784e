"""
Per-lane parent/child index over normalized tiles.

The index is a pure snapshot of one dataset: it is rebuilt whenever the
feed is reloaded and never patched.

Structure:
    by_slug    every tile of the dataset, all lanes (detail views look up across lanes)
    top_level  lane tiles without a resolvable parent, sorted by (sort, title)
    by_parent  parent slug -> children sorted by (child_order, sort)

Orphan promotion:
    A tile whose parent_slug does not resolve to a tile of the same lane is
    top-level. So is a tile that names itself as parent or sits on a parent
    cycle; such a tile could otherwise never be reached from the top level.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from portfolio_cms.content.normalizer import Tile
from portfolio_cms.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class HierarchyIndex:
    """Read-only lane index. Build with :func:`build_index`."""

    lane: str
    tiles: tuple[Tile, ...]
    top_level: tuple[Tile, ...]
    by_parent: Mapping[str, tuple[Tile, ...]]
    by_slug: Mapping[str, Tile]

    def children_of(self, slug: str) -> tuple[Tile, ...]:
        return self.by_parent.get(slug, ())

    def lookup(self, slug: str) -> Tile | None:
        return self.by_slug.get(slug)

    @property
    def lane_tiles(self) -> tuple[Tile, ...]:
        return tuple(t for t in self.tiles if t.lane == self.lane)


def index_by_slug(tiles: Iterable[Tile]) -> dict[str, Tile]:
    """Map slug -> tile; the first occurrence of a duplicated slug wins."""
    by_slug: dict[str, Tile] = {}
    for tile in tiles:
        if tile.slug in by_slug:
            logger.warning("duplicate_slug", slug=tile.slug, source_line=tile.source_line)
            continue
        by_slug[tile.slug] = tile
    return by_slug


def _cyclic_slugs(parents: Mapping[str, str]) -> set[str]:
    """Slugs whose parent chain leads back to themselves."""
    cyclic: set[str] = set()
    for start in parents:
        seen = {start}
        current = parents.get(start)
        while current is not None and current not in seen:
            seen.add(current)
            current = parents.get(current)
        if current == start:
            cyclic.add(start)
    return cyclic


def build_index(tiles: Sequence[Tile], lane: str) -> HierarchyIndex:
    """
    Build the hierarchy index of ``lane`` over the full dataset.

    Pure and total: the same tiles and lane always give the same index.
    Children keep their relative input order on (child_order, sort) ties.
    """
    tiles = tuple(tiles)
    by_slug = index_by_slug(tiles)

    lane_tiles = [t for t in tiles if t.lane == lane]
    lane_slugs = {t.slug for t in lane_tiles}

    # child slug -> parent slug, only for parents present in this lane
    parents = {
        t.slug: t.parent_slug
        for t in lane_tiles
        if t.parent_slug and t.parent_slug in lane_slugs and t.parent_slug != t.slug
    }
    promoted = _cyclic_slugs(parents)

    top_level: list[Tile] = []
    grouped: dict[str, list[Tile]] = {}
    for tile in lane_tiles:
        parent = tile.parent_slug
        if parent not in lane_slugs or parent == tile.slug or tile.slug in promoted:
            top_level.append(tile)
        else:
            grouped.setdefault(parent, []).append(tile)

    by_parent = {
        parent: tuple(sorted(children, key=lambda t: (t.child_order, t.sort)))
        for parent, children in grouped.items()
    }
    top_level.sort(key=lambda t: (t.sort, t.title))

    logger.debug(
        "index_built",
        lane=lane,
        top_level=len(top_level),
        parents=len(by_parent),
        promoted=len(promoted),
    )
    return HierarchyIndex(
        lane=lane,
        tiles=tiles,
        top_level=tuple(top_level),
        by_parent=MappingProxyType(by_parent),
        by_slug=MappingProxyType(by_slug),
    )
