"""Tests for card and detail projections of tiles."""

import pytest

from portfolio_cms.content.hierarchy import build_index
from portfolio_cms.content.normalizer import Tile
from portfolio_cms.content.schema import TileSize
from portfolio_cms.content.views import (
    card_media_thumb,
    detail_actions,
    format_dates,
    is_youtube_url,
    lane_tags,
    meta_line,
    modal_media_thumb,
    tile_detail,
    youtube_id,
    youtube_thumb,
)


def make(**kwargs):
    fields = {"slug": "t", "lane": "biz", "size": TileSize.MEDIUM, **kwargs}
    return Tile(**fields)


class TestFormatDates:
    @pytest.mark.parametrize(
        ("start", "end", "current", "expected"),
        [
            ("2021", "2023", False, "2021 — 2023"),
            ("2021", "", True, "2021 — Present"),
            ("2021", "2023", True, "2021 — Present"),
            ("2021", "", False, "2021"),
            ("", "2023", False, "2023"),
            ("", "", True, "Present"),
            ("", "", False, ""),
            ("  ", " ", False, ""),
        ],
    )
    def test_format(self, start, end, current, expected):
        assert format_dates(start, end, current) == expected


class TestYoutube:
    @pytest.mark.parametrize(
        ("url", "video"),
        [
            ("https://www.youtube.com/watch?v=abc123XYZ", "abc123XYZ"),
            ("https://youtube.com/watch?feature=share&v=abc123XYZ", "abc123XYZ"),
            ("https://youtu.be/abc123XYZ?t=10", "abc123XYZ"),
            ("https://www.youtube.com/embed/abc123XYZ", "abc123XYZ"),
            ("https://www.youtube.com/shorts/abc123XYZ", "abc123XYZ"),
            ("youtu.be/abc123XYZ", "abc123XYZ"),
            ("https://www.youtube.com/channel/xyz", ""),
            ("", ""),
        ],
    )
    def test_youtube_id(self, url, video):
        assert youtube_id(url) == video

    def test_is_youtube_url(self):
        assert is_youtube_url("https://www.youtube.com/watch?v=x")
        assert is_youtube_url("youtu.be/x")
        assert not is_youtube_url("https://vimeo.com/1")
        assert not is_youtube_url("")

    def test_thumb(self):
        assert youtube_thumb("https://youtu.be/abc123XYZ") == "https://img.youtube.com/vi/abc123XYZ/hqdefault.jpg"
        assert youtube_thumb("https://vimeo.com/1") == ""


class TestMediaThumbs:
    def test_card_uses_image_only(self):
        assert card_media_thumb(make(image_url="https://i.example/a.png")) == "https://i.example/a.png"
        assert card_media_thumb(make(video_url="https://youtu.be/abc123XYZ")) == ""

    def test_modal_prefers_image(self):
        tile = make(image_url="https://i.example/a.png", video_url="https://youtu.be/abc123XYZ")
        assert modal_media_thumb(tile) == "https://i.example/a.png"

    def test_modal_uses_explicit_thumb_for_video(self):
        tile = make(video_url="https://vimeo.com/1", thumb_url="https://i.example/t.png")
        assert modal_media_thumb(tile) == "https://i.example/t.png"

    def test_modal_derives_youtube_thumb(self):
        tile = make(video_url="https://youtu.be/abc123XYZ")
        assert modal_media_thumb(tile) == "https://img.youtube.com/vi/abc123XYZ/hqdefault.jpg"

    def test_modal_without_media(self):
        assert modal_media_thumb(make(thumb_url="https://i.example/t.png")) == ""
        assert modal_media_thumb(make(video_url="https://vimeo.com/1")) == ""


class TestDetail:
    def test_meta_line(self):
        tile = make(lane="business", size=TileSize.LARGE, start_date="2021", is_current=True)
        assert meta_line(tile) == "BUSINESS • LARGE • 2021 — Present"
        assert meta_line(make()) == "BIZ • MEDIUM"

    def test_actions_only_for_safe_urls(self):
        tile = make(href="https://x.example", video_url="javascript:alert(1)")
        actions = detail_actions(tile)
        assert [(a.label, a.href, a.kind) for a in actions] == [("Open link", "https://x.example", "link")]

    def test_video_action(self):
        (action,) = detail_actions(make(video_url="https://youtu.be/abc123XYZ"))
        assert action.label == "Watch video"
        assert action.kind == "video"

    def test_large_tile_detail(self, sample_tiles):
        index = build_index(sample_tiles, "business")
        detail = tile_detail(index, index.lookup("acme"))

        assert detail.meta_line == "BUSINESS • LARGE • 2021 — Present"
        assert detail.body_html == "<h3>Role</h3><ul><li>Led <strong>growth</strong></li></ul>"
        assert detail.hero_image == "https://img.example/acme.png"
        assert [a.href for a in detail.actions] == ["https://acme.example"]
        assert [c.slug for c in detail.children] == ["acme-pricing", "acme-launch"]

    def test_non_large_detail_has_no_children(self):
        parent = make(slug="p", title="Parent")
        child = make(slug="c", parent_slug="p", size=TileSize.SMALL)
        index = build_index([parent, child], "biz")
        assert tile_detail(index, parent).children == ()

    def test_video_tile_detail(self, sample_tiles):
        index = build_index(sample_tiles, "creative")
        detail = tile_detail(index, index.lookup("reel"))
        assert detail.hero_image == "https://img.youtube.com/vi/abc123XYZ/hqdefault.jpg"
        assert detail.body_html == ""
        assert [a.kind for a in detail.actions] == ["video"]


class TestLaneTags:
    def test_sorted_unique(self, sample_tiles):
        assert lane_tags(sample_tiles, "business") == ["Growth", "Marketing", "Research", "Strategy"]
        assert lane_tags(sample_tiles, "creative") == ["Video"]
        assert lane_tags(sample_tiles, "none") == []
