# ABOUTME: Snapshot builder that flattens parsed feeds into a queryable snapshot.
# ABOUTME: Pure transform; duplicate guids and feed titles are last-write-wins.

from collections.abc import Iterable

from esqimo.models import Feed, Image, Item, RawFeed, RawItem, Snapshot


def extract_category(categories: list[str]) -> str:
    """Return the first category, or "" when there is none."""
    if not categories:
        return ""
    return categories[0]


def _convert_item(raw: RawItem, image: Image) -> Item:
    return Item(
        title=raw.title,
        link=raw.link,
        description=raw.description,
        category=extract_category(raw.categories),
        guid=raw.guid,
        published=raw.published,
        published_parsed=raw.published_parsed,
        # Items carry the feed image so each one can be displayed with it
        image=image,
    )


def build_snapshot(raw_feeds: Iterable[RawFeed]) -> Snapshot:
    """Build an immutable snapshot from parsed feed documents.

    Args:
        raw_feeds: Feeds in fetch order. A later feed with the same title
            replaces an earlier one; a later item with the same guid replaces
            an earlier one within its feed.

    Returns:
        Snapshot with feeds keyed by title, the set of feed titles and the
        set of non-empty item categories.
    """
    feeds: dict[str, Feed] = {}
    titles: set[str] = set()
    categories: set[str] = set()

    for raw in raw_feeds:
        raw_image = raw.image
        image = Image(title=raw_image.title, url=raw_image.url) if raw_image else Image()

        items: dict[str, Item] = {}
        for raw_item in raw.items:
            item = _convert_item(raw_item, image)
            items[item.guid] = item
            if item.category:
                categories.add(item.category)

        feed = Feed(
            title=raw.title,
            link=raw.link,
            description=raw.description,
            categories=tuple(raw.categories),
            image=image,
            items=items,
        )

        # Title is assumed unique across feeds
        feeds[feed.title] = feed
        titles.add(feed.title)

    return Snapshot(feeds=feeds, titles=frozenset(titles), categories=frozenset(categories))
