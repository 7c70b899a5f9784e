"""
Experience feed (JSON document with a top-level ``experiences`` array).

Experiences are the hand-written counterpart of spreadsheet tiles: each has a
lane (``bucket``), grouped tags, structured content and a detail level that
decides how a card opens. The feed is validated record by record; one
malformed experience is rejected without losing the rest of the document.

Document shape::

    {
      "experiences": [
        {
          "slug": "acme-launch",
          "bucket": "business",
          "title": "Acme launch",
          "tags": [{"group": "Skill", "value": "Strategy"}],
          "content": {"paragraphs": ["..."], "links": [{"label": "Site", "url": "https://..."}]},
          "detail_level": "M",
          "sub_experiences": [{"title": "..."}]
        }
      ]
    }
"""

import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any
from urllib.parse import quote

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from portfolio_cms.content.filtering import Query
from portfolio_cms.content.schema import EXPERIENCES_FEED, REASON_INVALID_EXPERIENCE, STAGE_NORMALIZE
from portfolio_cms.core.errors import ParseError
from portfolio_cms.core.logging import get_logger
from portfolio_cms.core.rejects import Reject

logger = get_logger(__name__)


def _none_to_empty(value: Any) -> Any:
    return "" if value is None else value


Text = Annotated[str, BeforeValidator(_none_to_empty)]


class DetailLevel(str, Enum):
    """How much detail an experience card opens into."""

    LOW = "L"
    MEDIUM = "M"
    HIGH = "H"

    @property
    def interaction(self) -> str:
        return {"L": "expand", "M": "modal"}.get(self.value, "deep_dive")


def _coerce_detail_level(value: Any) -> Any:
    # Anything unrecognized opens as a deep dive
    text = str(value or "").strip().upper()
    return text if text in ("L", "M", "H") else "H"


class ExperienceTag(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    group: Text = ""
    value: Text = ""


class ExperienceLink(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    label: Text = ""
    url: Text = ""


class MediaItem(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    type: Text = ""  # image, embed or video
    url: Text = ""
    caption: Text = ""


class ExperienceContent(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    paragraphs: list[str] = Field(default_factory=list)
    links: list[ExperienceLink] = Field(default_factory=list)
    media: list[MediaItem] = Field(default_factory=list)


class SubExperience(BaseModel):
    """A card nested under an experience's deep-dive page."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    kicker: Text = ""
    title: Text = ""
    subtitle: Text = ""
    timeframe: Text = ""
    location: Text = ""
    summary: Text = ""
    tags: list[ExperienceTag] = Field(default_factory=list)
    content: ExperienceContent = Field(default_factory=ExperienceContent)

    @property
    def short_tags(self) -> str:
        """First three tag values, as shown on cards."""
        return " • ".join(t.value for t in self.tags[:3])


class Experience(SubExperience):
    slug: str = Field(min_length=1)
    bucket: str = Field(min_length=1)
    detail_level: Annotated[DetailLevel, BeforeValidator(_coerce_detail_level)] = DetailLevel.HIGH
    sub_experiences: list[SubExperience] = Field(default_factory=list)

    @property
    def search_text(self) -> str:
        parts = [self.title, self.subtitle, self.timeframe, self.location, self.summary]
        parts.extend(f"{t.group} {t.value}" for t in self.tags)
        parts.extend(self.content.paragraphs)
        return " ".join(parts).lower()

    @property
    def tag_keys(self) -> frozenset[str]:
        return frozenset(tag_key(t) for t in self.tags)


@dataclass
class ExperienceFeed:
    experiences: list[Experience]
    rejected: list[Reject] = field(default_factory=list)


def tag_key(tag: ExperienceTag) -> str:
    return f"{tag.group}::{tag.value}"


def parse_experiences(data: str | bytes | dict[str, Any]) -> ExperienceFeed:
    """
    Parse an experiences document.

    Raises:
        ParseError: the document is not JSON, or its shape is not an object
            with an ``experiences`` array
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ParseError("Experiences document is not valid JSON", cause=e).with_context(
                feed=EXPERIENCES_FEED
            ) from e

    if not isinstance(data, dict):
        raise ParseError("Experiences document must be a JSON object").with_context(feed=EXPERIENCES_FEED)

    items = data.get("experiences") or []
    if not isinstance(items, list):
        raise ParseError("'experiences' must be an array").with_context(feed=EXPERIENCES_FEED)

    experiences: list[Experience] = []
    rejected: list[Reject] = []
    for position, item in enumerate(items):
        try:
            experiences.append(Experience.model_validate(item))
        except PydanticValidationError as e:
            first = e.errors()[0]["msg"]
            rejected.append(
                Reject(
                    stage=STAGE_NORMALIZE,
                    reason_code=REASON_INVALID_EXPERIENCE,
                    reason_detail=f"experiences[{position}]: {e.error_count()} validation error(s), first: {first}",
                    raw_data=item,
                )
            )

    logger.info("experiences_parsed", accepted=len(experiences), rejected=len(rejected))
    return ExperienceFeed(experiences=experiences, rejected=rejected)


def experience_matches(experience: Experience, query: Query) -> bool:
    """Every selected tag key must be on the experience, unlike tiles where any one will do."""
    if query.selected_tags and not query.selected_tags <= experience.tag_keys:
        return False
    if query.free_text and query.free_text.lower() not in experience.search_text:
        return False
    return True


def filter_experiences(experiences: Iterable[Experience], lane: str, query: Query | None = None) -> list[Experience]:
    """Experiences of ``lane`` matching ``query``, in document order."""
    query = query or Query()
    return [e for e in experiences if e.bucket == lane and experience_matches(e, query)]


def lane_tag_facets(
    experiences: Iterable[Experience],
    lane: str,
    group: str | None = None,
) -> list[ExperienceTag]:
    """Unique tags of a lane sorted by (group, value), optionally one group only."""
    unique: dict[str, ExperienceTag] = {}
    for experience in experiences:
        if experience.bucket != lane:
            continue
        for tag in experience.tags:
            unique.setdefault(tag_key(tag), tag)
    tags = sorted(unique.values(), key=lambda t: (t.group, t.value))
    if group is not None:
        tags = [t for t in tags if t.group == group]
    return tags


def tag_groups(experiences: Iterable[Experience], lane: str) -> list[str]:
    groups: list[str] = []
    for tag in lane_tag_facets(experiences, lane):
        if tag.group not in groups:
            groups.append(tag.group)
    return groups


def find_experience(experiences: Sequence[Experience], slug: str) -> Experience | None:
    return next((e for e in experiences if e.slug == slug), None)


# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def deep_dive_href(slug: str) -> str:
    return f"deep-dive.html?slug={quote(slug, safe=_URI_COMPONENT_SAFE)}"


def lane_label(lane: str) -> str:
    return lane.strip().capitalize()


def results_summary(count: int, lane: str) -> str:
    """E.g. "1 result in Business", "3 results in Creative"."""
    noun = "result" if count == 1 else "results"
    return f"{count} {noun} in {lane_label(lane)}"
