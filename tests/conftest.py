# ABOUTME: Pytest fixtures and configuration for esqimo tests.
# ABOUTME: Provides test settings, raw feed documents and a fake fetcher.

from collections.abc import Callable
from datetime import UTC, datetime

import pytest
import structlog

from esqimo.config import Settings
from esqimo.errors import FetchError
from esqimo.models import RawFeed, RawImage, RawItem

T1 = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)
T2 = datetime(2024, 3, 2, 9, 0, tzinfo=UTC)
T3 = datetime(2024, 3, 3, 9, 0, tzinfo=UTC)


def make_item(
    guid: str,
    *,
    categories: list[str] | None = None,
    published_parsed: datetime | None = None,
    title: str | None = None,
) -> RawItem:
    """Create a RawItem with sensible defaults."""
    return RawItem(
        title=title or f"Item {guid}",
        link=f"https://example.com/{guid}",
        description=f"Description of {guid}",
        categories=categories or [],
        guid=guid,
        published=published_parsed.strftime("%a, %d %b %Y %H:%M:%S GMT") if published_parsed else "",
        published_parsed=published_parsed,
    )


def make_feed(title: str, items: list[RawItem], *, image: RawImage | None = None) -> RawFeed:
    """Create a RawFeed with sensible defaults."""
    return RawFeed(
        title=title,
        link=f"https://example.com/{title.lower()}",
        description=f"{title} feed",
        categories=["general"],
        image=image,
        items=items,
    )


class FakeFetcher:
    """Stand-in for FeedFetcher that replays scripted results."""

    def __init__(self, *results: list[RawFeed] | Exception) -> None:
        self._results = list(results)
        self.calls = 0
        self.closed = False

    def fetch(self, urls: list[str] | None = None) -> list[RawFeed]:
        result = self._results[min(self.calls, len(self._results) - 1)]
        self.calls += 1
        if isinstance(result, Exception):
            raise result
        return result

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def captured_logs():
    """Capture structlog events instead of printing them."""
    with structlog.testing.capture_logs() as logs:
        yield logs


@pytest.fixture
def mock_settings() -> Settings:
    """Create settings for testing."""
    return Settings(
        host="127.0.0.1",
        port=8080,
        feeds=["https://example.com/news.rss", "https://example.com/tech.rss"],
        refresh_interval=0.01,
        feed_timeout=5,
        log_level="DEBUG",
    )


@pytest.fixture
def news_feed() -> RawFeed:
    """One feed titled News: A without category at T1, B in tech at T2."""
    return make_feed(
        "News",
        [
            make_item("A", published_parsed=T1),
            make_item("B", categories=["tech"], published_parsed=T2),
        ],
        image=RawImage(title="News logo", url="https://example.com/logo.png"),
    )


@pytest.fixture
def sports_feed() -> RawFeed:
    """Feed titled Sports with multi-category and undated items."""
    return make_feed(
        "Sports",
        [
            make_item("S1", categories=["football", "europe"], published_parsed=T3),
            make_item("S2", categories=["tennis"]),
        ],
    )


@pytest.fixture
def fetch_error() -> Callable[[], FetchError]:
    """Factory for fetch errors."""
    return lambda: FetchError("https://example.com/news.rss", "connection refused")
