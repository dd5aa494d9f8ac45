# ABOUTME: Pydantic models for raw feed documents and published snapshots.
# ABOUTME: Defines RawFeed/RawItem input and the immutable Feed, Item and Snapshot.

from datetime import datetime
from types import MappingProxyType
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer


class RawImage(BaseModel):
    """Feed-level image as parsed from the feed document."""

    title: str = ""
    url: str = ""


class RawItem(BaseModel):
    """Entry from a parsed feed document, before flattening."""

    title: str = ""
    link: str = ""
    description: str = ""
    categories: list[str] = Field(default_factory=list)
    guid: str = ""
    published: str = ""
    published_parsed: datetime | None = None


class RawFeed(BaseModel):
    """Parsed feed document returned by the fetcher."""

    title: str = ""
    link: str = ""
    description: str = ""
    categories: list[str] = Field(default_factory=list)
    image: RawImage | None = None
    items: list[RawItem] = Field(default_factory=list)


class Image(BaseModel):
    """Image inherited from the owning feed."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    url: str = ""


class Item(BaseModel):
    """Flattened feed item as served to readers."""

    model_config = ConfigDict(frozen=True)

    title: str
    link: str
    description: str
    category: str = ""
    guid: str
    published: str = ""
    published_parsed: datetime | None = None
    image: Image = Image()


# Read-only views so a published snapshot cannot be changed in place
ItemMap = Annotated[
    dict[str, Item],
    AfterValidator(MappingProxyType),
    PlainSerializer(dict, return_type=dict[str, Item]),
]


class Feed(BaseModel):
    """Feed with its items keyed by guid."""

    model_config = ConfigDict(frozen=True)

    title: str
    link: str
    description: str
    categories: tuple[str, ...] = ()
    image: Image = Image()
    items: ItemMap = Field(default_factory=dict, validate_default=True)


FeedMap = Annotated[
    dict[str, Feed],
    AfterValidator(MappingProxyType),
    PlainSerializer(dict, return_type=dict[str, Feed]),
]


class Snapshot(BaseModel):
    """Result of one refresh cycle: feeds keyed by title plus derived sets.

    Never mutated after construction; a refresh publishes a new one. The
    feed and item mappings are read-only views.
    """

    model_config = ConfigDict(frozen=True)

    feeds: FeedMap = Field(default_factory=dict, validate_default=True)
    titles: frozenset[str] = frozenset()
    categories: frozenset[str] = frozenset()

    @classmethod
    def empty(cls) -> "Snapshot":
        return cls()

    @property
    def item_count(self) -> int:
        return sum(len(feed.items) for feed in self.feeds.values())
