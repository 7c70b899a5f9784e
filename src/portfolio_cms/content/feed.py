"""
Feed access and the atomically replaced tile snapshot.

The parsing core never performs I/O. This module is the edge: it retrieves a
complete feed document (HTTP via httpx, or a local file), hands the text to
the core, and installs the resulting tiles and lane indexes as one unit.

Failure semantics:
    A fetch either yields the whole document or raises FeedUnavailableError.
    The core is never called with partial text, and a failed refresh leaves
    the previously installed snapshot in place.

Usage:
    catalog = TileCatalog()
    client = FeedClient(timeout=settings.http_timeout)
    catalog.refresh(lambda: client.fetch_text(settings.sheet_csv_url))
    result = catalog.evaluate("business", Query.build("beta"))
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

import httpx

from portfolio_cms.content.filtering import FilterResult, Query, filter_index
from portfolio_cms.content.hierarchy import HierarchyIndex, build_index
from portfolio_cms.content.normalizer import NormalizationResult, Tile, normalize_tiles
from portfolio_cms.content.schema import DEFAULT_MAX_TAGS, TILES_FEED
from portfolio_cms.content.tokenizer import decode_text, parse_csv_lines
from portfolio_cms.content.views import TileDetail, lane_tags, tile_detail
from portfolio_cms.core.errors import FeedUnavailableError, SourceNotFoundError
from portfolio_cms.core.logging import LogContext, get_logger
from portfolio_cms.core.rejects import Reject

logger = get_logger(__name__)


class FeedClient:
    """
    Fetch feed documents over HTTP.

    Args:
        timeout: Seconds before the request is abandoned
        http_client: Injected httpx.Client (tests, shared pools)
    """

    def __init__(self, timeout: float = 15.0, http_client: httpx.Client | None = None):
        self.timeout = timeout
        self._http_client = http_client

    def _get(self, url: str) -> httpx.Response:
        headers = {"Cache-Control": "no-cache"}
        if self._http_client is not None:
            return self._http_client.get(url, headers=headers)
        # Published sheets answer with a redirect to the CSV export
        with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
            return client.get(url, headers=headers)

    def fetch_text(self, url: str, feed: str = TILES_FEED) -> str:
        """
        Return the full body of ``url`` as text.

        Raises:
            FeedUnavailableError: transport failure or non-2xx status
        """
        try:
            response = self._get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error("feed_fetch_failed", feed=feed, url=url, http_status=status)
            raise FeedUnavailableError(f"Feed returned HTTP {status}", cause=e).with_context(
                feed=feed, url=url, http_status=status
            ) from e
        except httpx.HTTPError as e:
            logger.error("feed_fetch_failed", feed=feed, url=url, error=str(e))
            raise FeedUnavailableError(f"Feed request failed: {e}", cause=e).with_context(
                feed=feed, url=url
            ) from e

        return decode_text(response.content)


def is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def read_source(source: str | Path, client: FeedClient | None = None, feed: str = TILES_FEED) -> str:
    """
    Read a whole feed document from an http(s) URL or a local path.

    Raises:
        FeedUnavailableError: the URL could not be fetched, or the file could not be read
        SourceNotFoundError: the local file does not exist
    """
    source = str(source)
    if is_url(source):
        return (client or FeedClient()).fetch_text(source, feed=feed)

    path = Path(source)
    if not path.is_file():
        raise SourceNotFoundError(f"Feed file not found: {path}").with_context(feed=feed, source_name=source)
    try:
        return decode_text(path.read_bytes())
    except OSError as e:
        raise FeedUnavailableError(f"Could not read feed file: {e}", cause=e).with_context(
            feed=feed, source_name=source
        ) from e


def load_tiles(
    text: str | bytes,
    max_tags: int = DEFAULT_MAX_TAGS,
    source_locator: str | None = None,
) -> NormalizationResult:
    """Tokenize and normalize a complete CSV document."""
    numbered = parse_csv_lines(text)
    return normalize_tiles(
        [fields for _, fields in numbered],
        max_tags=max_tags,
        source_locator=source_locator,
        line_numbers=[line for line, _ in numbered],
    )


@dataclass(frozen=True)
class CatalogSnapshot:
    """One dataset: tiles, rejects, and an index per lane present in the data."""

    tiles: tuple[Tile, ...] = ()
    rejected: tuple[Reject, ...] = ()
    indexes: Mapping[str, HierarchyIndex] = field(default_factory=lambda: MappingProxyType({}))
    source: str | None = None

    @property
    def lanes(self) -> tuple[str, ...]:
        return tuple(self.indexes)

    @classmethod
    def build(cls, tiles: tuple[Tile, ...], rejected=(), source: str | None = None) -> "CatalogSnapshot":
        lanes = dict.fromkeys(t.lane for t in tiles)
        indexes = {lane: build_index(tiles, lane) for lane in lanes}
        return cls(
            tiles=tiles,
            rejected=tuple(rejected),
            indexes=MappingProxyType(indexes),
            source=source,
        )


class TileCatalog:
    """
    Holds the currently installed snapshot.

    ``refresh`` replaces the snapshot as a whole; readers always see either
    the previous dataset or the new one, never a mix.
    """

    def __init__(self, snapshot: CatalogSnapshot | None = None):
        self._snapshot = snapshot or CatalogSnapshot()

    @property
    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    @property
    def tiles(self) -> tuple[Tile, ...]:
        return self._snapshot.tiles

    def refresh(
        self,
        loader: Callable[[], str | bytes],
        max_tags: int = DEFAULT_MAX_TAGS,
        source: str | None = None,
    ) -> CatalogSnapshot:
        """
        Load a complete document with ``loader`` and install it.

        Errors raised by ``loader`` propagate and leave the current snapshot
        untouched.
        """
        with LogContext(feed=TILES_FEED, source_name=source):
            text = loader()
            result = load_tiles(text, max_tags=max_tags, source_locator=source)
            snapshot = CatalogSnapshot.build(result.tiles, result.rejected, source=source)
            self._snapshot = snapshot
            logger.info(
                "catalog_refreshed",
                tiles=len(snapshot.tiles),
                rejected=len(snapshot.rejected),
                lanes=list(snapshot.lanes),
            )
        return snapshot

    def index(self, lane: str) -> HierarchyIndex:
        existing = self._snapshot.indexes.get(lane)
        if existing is not None:
            return existing
        # Lane without tiles: empty structure, cross-lane lookups still work
        return build_index(self._snapshot.tiles, lane)

    def lookup(self, slug: str) -> Tile | None:
        for tile in self._snapshot.tiles:
            if tile.slug == slug:
                return tile
        return None

    def detail(self, slug: str) -> TileDetail | None:
        tile = self.lookup(slug)
        if tile is None:
            return None
        return tile_detail(self.index(tile.lane), tile)

    def evaluate(self, lane: str, query: Query | None = None) -> FilterResult:
        return filter_index(self.index(lane), query)

    def tags(self, lane: str) -> list[str]:
        return lane_tags(self._snapshot.tiles, lane)
