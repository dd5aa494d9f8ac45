# ABOUTME: Query engine that filters, sorts and limits items from one snapshot.
# ABOUTME: Empty filters select everything; uncategorised items pass the default filter.

from collections.abc import Iterable
from datetime import UTC, datetime

from esqimo.models import Item, Snapshot

# Sort key for items without a parseable date, so they end up last
_OLDEST = datetime.min.replace(tzinfo=UTC)


def _sort_key(item: Item) -> datetime:
    published = item.published_parsed
    if published is None:
        return _OLDEST
    if published.tzinfo is None:
        return published.replace(tzinfo=UTC)
    return published


def effective_titles(snapshot: Snapshot, titles: Iterable[str]) -> frozenset[str]:
    """Title filter actually applied: the requested titles, or every title."""
    requested = frozenset(titles)
    return requested or snapshot.titles


def effective_categories(snapshot: Snapshot, categories: Iterable[str]) -> frozenset[str]:
    """Category filter actually applied.

    Without an explicit filter every category matches, including "" so that
    uncategorised items are kept. An explicit filter is used as given.
    """
    requested = frozenset(categories)
    return requested or snapshot.categories | {""}


def select_items(
    snapshot: Snapshot,
    titles: Iterable[str] = (),
    categories: Iterable[str] = (),
    limit: int = 0,
) -> list[Item]:
    """Return matching items, most recently published first.

    Args:
        snapshot: Snapshot to read. The caller passes a single snapshot so the
            whole query sees one consistent version.
        titles: Feed titles to include; empty means all feeds.
        categories: Item categories to include; empty means all, including
            items without a category.
        limit: Maximum number of items; 0 (or less) means no limit.

    Returns:
        Items sorted by published date descending, undated items last.
    """
    title_filter = effective_titles(snapshot, titles)
    category_filter = effective_categories(snapshot, categories)

    items = [
        item
        for title, feed in snapshot.feeds.items()
        if title in title_filter
        for item in feed.items.values()
        if item.category in category_filter
    ]

    items.sort(key=_sort_key, reverse=True)

    if limit > 0:
        return items[:limit]
    return items
