"""
Portfolio content pipeline.

raw CSV text -> parse_csv -> normalize_tiles -> build_index -> filter_index

Markdown bodies are rendered with render_markdown_lite; experiences come
from a JSON document via parse_experiences.
"""

from portfolio_cms.content.experiences import Experience, filter_experiences, parse_experiences
from portfolio_cms.content.filtering import FilterResult, Query, VisibleEntry, filter_index, matches
from portfolio_cms.content.hierarchy import HierarchyIndex, build_index
from portfolio_cms.content.markdown import render_markdown_lite, safe_href
from portfolio_cms.content.normalizer import NormalizationResult, Tile, normalize_records, normalize_tiles
from portfolio_cms.content.schema import TileSize
from portfolio_cms.content.tokenizer import CsvTokenizer, parse_csv, parse_csv_lines

__all__ = [
    "CsvTokenizer",
    "Experience",
    "FilterResult",
    "HierarchyIndex",
    "NormalizationResult",
    "Query",
    "Tile",
    "TileSize",
    "VisibleEntry",
    "build_index",
    "filter_experiences",
    "filter_index",
    "matches",
    "normalize_records",
    "normalize_tiles",
    "parse_csv",
    "parse_csv_lines",
    "parse_experiences",
    "render_markdown_lite",
    "safe_href",
]
