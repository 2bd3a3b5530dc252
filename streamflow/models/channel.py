"""
Raw iptv-org records and the normalized catalog Channel.
Raw models map to the iptv-org API schema; Channel is what the rest of the
client works with.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(str, Enum):
    """Sidebar categories. All, Favorites and Hidden are view filters only."""
    ALL = "All"
    FAVORITES = "Favorites"
    HIDDEN = "Hidden"
    SPORTS = "Sports"
    NEWS = "News"
    MOVIES = "Movies"
    MUSIC = "Music"
    KIDS = "Kids"
    DOCUMENTARY = "Documentary"
    LIFESTYLE = "Lifestyle"
    OTHER = "Other"

    @property
    def is_view_filter(self) -> bool:
        return self in VIEW_CATEGORIES


VIEW_CATEGORIES = frozenset({Category.ALL, Category.FAVORITES, Category.HIDDEN})

STORED_CATEGORIES = tuple(c for c in Category if c not in VIEW_CATEGORIES)


class RawChannel(BaseModel):
    """Channel metadata record from channels.json."""
    id: str
    name: str
    alt_names: list[str] = Field(default_factory=list)
    network: Optional[str] = None
    owners: list[str] = Field(default_factory=list)
    country: str = ""
    categories: list[str] = Field(default_factory=list)
    is_nsfw: bool = False
    website: Optional[str] = None

    @field_validator("alt_names", "owners", "categories", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

    @field_validator("country", mode="before")
    @classmethod
    def _country_none_as_blank(cls, value):
        return "" if value is None else value


class RawStream(BaseModel):
    """Playable stream record from streams.json."""
    channel: Optional[str] = None
    feed: Optional[str] = None
    title: Optional[str] = None
    url: str = ""
    referrer: Optional[str] = None
    user_agent: Optional[str] = None
    quality: Optional[str] = None


class RawLogo(BaseModel):
    """Channel logo record from logos.json."""
    channel: str
    feed: Optional[str] = None
    url: str


class Channel(BaseModel):
    """A playable catalog entry.

    Built once per catalog refresh and never mutated afterwards; favorite and
    hidden state live in the preference store, keyed by ``id``.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = Field(min_length=1)
    logo: str
    category: Category
    url: str = Field(min_length=1)
    input_type: str = "m3u8"
    sport_type: Optional[str] = None
    description: Optional[str] = None
    country: Optional[str] = None
    country_name: Optional[str] = None
    region: Optional[str] = None

    @field_validator("category")
    @classmethod
    def _stored_category_only(cls, value: Category) -> Category:
        if value in VIEW_CATEGORIES:
            raise ValueError(f"{value.value} is a view filter, not a channel category")
        return value
