"""
Uniform entity schema produced by every parser.

All parsers MUST output these exact structures, whatever the originating
site. Entities are immutable: enrichment (details, chapters) returns a
copy via ``copy_with``. ``id`` is derived from (source, url) by
``generate_uid`` and ``url`` is always relative to the source domain.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from catalog_parsers.sources.schemas import ContentSource

RATING_UNKNOWN = -1.0


class SortOrder(str, Enum):
    """Orders a listing can be requested in. Parsers declare a subset."""

    UPDATED = "updated"
    POPULARITY = "popularity"
    RATING = "rating"
    NEWEST = "newest"
    ALPHABETICAL = "alphabetical"


class ContentState(str, Enum):
    """Publication state of an item."""

    ONGOING = "ongoing"
    FINISHED = "finished"


class _Entity(BaseModel):
    model_config = ConfigDict(frozen=True)

    def copy_with(self, **changes: Any):
        """Return a validated copy with the given fields replaced."""
        return type(self).model_validate({**dict(self), **changes})


class ContentTag(_Entity):
    """
    A genre or category of a source.

    Identity is the (key, source) pair: ``title`` is display text and may
    vary in formatting between pages of the same site, so it takes no part
    in equality or hashing.
    """

    title: str = Field(..., description="User-readable title, in title case")
    key: str = Field(..., description="Identifier unique within the source, passed back to get_list")
    source: ContentSource

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContentTag):
            return NotImplemented
        return self.key == other.key and self.source == other.source

    def __hash__(self) -> int:
        return hash((self.key, self.source))


class ContentPage(_Entity):
    """A single page (image) of a chapter."""

    id: int
    url: str = Field(..., description="Relative url, or a link resolved later by get_page_url")
    referer: str | None = Field(default=None, description="Referer to send when downloading")
    preview: str | None = None
    source: ContentSource


class ContentChapter(_Entity):
    """A chapter of an item."""

    id: int
    name: str
    number: int = Field(..., ge=0)
    url: str
    scanlator: str | None = None
    upload_date: int = Field(default=0, ge=0, description="Epoch millis, 0 if unknown")
    branch: str | None = Field(default=None, description="Translation or edition the chapter belongs to")
    source: ContentSource


class ContentItem(_Entity):
    """
    CANONICAL ITEM SCHEMA

    Listing results carry what the catalog page shows; ``get_details``
    returns the same item (same id, url and source) with the remaining
    fields and ``chapters`` filled in.
    """

    # Identity
    id: int
    url: str = Field(..., description="Relative url, without domain")
    public_url: str = Field(..., description="Absolute url for a browser")
    source: ContentSource

    # Display
    title: str
    alt_title: str | None = None
    cover_url: str = ""
    large_cover_url: str | None = None
    description: str | None = None
    author: str | None = None

    # Classification
    rating: float = Field(default=RATING_UNKNOWN, description="0..1, or RATING_UNKNOWN")
    is_nsfw: bool = False
    state: ContentState | None = None
    tags: frozenset[ContentTag] = Field(default_factory=frozenset)

    chapters: tuple[ContentChapter, ...] | None = None

    @field_validator("rating")
    @classmethod
    def _check_rating(cls, value: float) -> float:
        if value != RATING_UNKNOWN and not 0.0 <= value <= 1.0:
            raise ValueError(f"rating must be within 0..1 or RATING_UNKNOWN, got {value}")
        return value

    @property
    def has_rating(self) -> bool:
        return self.rating != RATING_UNKNOWN
