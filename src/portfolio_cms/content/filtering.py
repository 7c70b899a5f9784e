"""
Query evaluation over a lane index.

A ``Query`` is an immutable value owned by the caller (free text plus the set
of selected tags). ``filter_index`` is a pure projection of an index under a
query; it never mutates the index and is order-stable.

Matching:
    A tile matches when (no tags selected OR it carries any selected tag)
    AND (no free text OR the free text occurs in its search text).

Large-parent coherence:
    A LARGE top-level tile with children is shown when it matches or any of
    its children match. A matching parent is shown with all its children;
    a parent kept only because of its children is shown as an anchor with
    just the matching children. Every other top-level tile is shown only
    when it matches itself, with nothing beneath it.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from portfolio_cms.content.hierarchy import HierarchyIndex
from portfolio_cms.content.normalizer import Tile


@dataclass(frozen=True)
class Query:
    """Live filter state: free text and selected tags."""

    free_text: str = ""
    selected_tags: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        if not isinstance(self.selected_tags, frozenset):
            object.__setattr__(self, "selected_tags", frozenset(self.selected_tags))

    @classmethod
    def build(cls, free_text: str | None = None, tags: Iterable[str] | None = None) -> "Query":
        """Normalize raw UI input (trimmed, lower-cased text; blank tags dropped)."""
        text = (free_text or "").strip().lower()
        selected = frozenset(t.strip() for t in (tags or ()) if t and t.strip())
        return cls(free_text=text, selected_tags=selected)

    @property
    def is_empty(self) -> bool:
        return not self.free_text and not self.selected_tags

    def toggle_tag(self, tag: str) -> "Query":
        """Return a new query with ``tag`` added or removed."""
        return Query(free_text=self.free_text, selected_tags=self.selected_tags ^ {tag})


def matches(tile: Tile, query: Query) -> bool:
    """Per-record match of a tile against a query."""
    if query.selected_tags and query.selected_tags.isdisjoint(tile.tags):
        return False
    if query.free_text and query.free_text.lower() not in tile.search_text:
        return False
    return True


@dataclass(frozen=True)
class VisibleEntry:
    """A top-level tile to display and the children rendered beneath it."""

    tile: Tile
    children: tuple[Tile, ...] = ()
    is_anchor: bool = False  # Shown only because a child matched


@dataclass(frozen=True)
class FilterResult:
    """Ordered display projection of a lane."""

    lane: str
    query: Query
    entries: tuple[VisibleEntry, ...]

    @property
    def shown_count(self) -> int:
        return len(self.entries)

    @property
    def tiles(self) -> tuple[Tile, ...]:
        """Flattened visible set: each entry followed by its children."""
        flat: list[Tile] = []
        for entry in self.entries:
            flat.append(entry.tile)
            flat.extend(entry.children)
        return tuple(flat)

    @property
    def slugs(self) -> tuple[str, ...]:
        return tuple(t.slug for t in self.tiles)


def _evaluate_parent(index: HierarchyIndex, parent: Tile, query: Query) -> VisibleEntry | None:
    parent_matches = matches(parent, query)
    children = index.children_of(parent.slug)

    if not (parent.is_large and children):
        return VisibleEntry(tile=parent) if parent_matches else None

    if parent_matches:
        return VisibleEntry(tile=parent, children=children)

    matching = tuple(c for c in children if matches(c, query))
    if not matching:
        return None
    return VisibleEntry(tile=parent, children=matching, is_anchor=True)


def filter_index(index: HierarchyIndex, query: Query | None = None) -> FilterResult:
    """Evaluate ``query`` against ``index`` in top-level order."""
    query = query or Query()
    entries = []
    for parent in index.top_level:
        entry = _evaluate_parent(index, parent, query)
        if entry is not None:
            entries.append(entry)
    return FilterResult(lane=index.lane, query=query, entries=tuple(entries))
