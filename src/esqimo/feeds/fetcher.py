# ABOUTME: RSS/Atom feed fetcher producing parsed feed documents.
# ABOUTME: Uses httpx for download and feedparser for parsing; all-or-nothing per call.

from datetime import UTC, datetime
from time import struct_time
from typing import Any

import feedparser
import httpx
import structlog

from esqimo.config import Settings, get_settings
from esqimo.errors import FetchError
from esqimo.models import RawFeed, RawImage, RawItem

log = structlog.get_logger()


def _to_datetime(parsed: struct_time | None) -> datetime | None:
    """Convert a feedparser UTC time tuple to an aware datetime."""
    if not parsed:
        return None
    try:
        return datetime(*parsed[:6], tzinfo=UTC)
    except (TypeError, ValueError):
        return None


def _terms(tags: list[dict[str, Any]] | None) -> list[str]:
    return [tag["term"] for tag in tags or [] if tag.get("term")]


def _parse_entry(entry: Any) -> RawItem:
    published = entry.get("published") or entry.get("updated") or ""
    published_parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    return RawItem(
        title=entry.get("title", ""),
        link=entry.get("link", ""),
        description=entry.get("summary", ""),
        categories=_terms(entry.get("tags")),
        guid=entry.get("id") or entry.get("link", ""),
        published=published,
        published_parsed=_to_datetime(published_parsed),
    )


def parse_feed(content: bytes | str) -> feedparser.FeedParserDict:
    """Parse a feed document with feedparser."""
    return feedparser.parse(content)


def to_raw_feed(parsed: feedparser.FeedParserDict) -> RawFeed:
    """Convert a feedparser result into a RawFeed."""
    channel = parsed.feed
    image = channel.get("image")
    return RawFeed(
        title=channel.get("title", ""),
        link=channel.get("link", ""),
        description=channel.get("subtitle", ""),
        categories=_terms(channel.get("tags")),
        image=RawImage(title=image.get("title", ""), url=image.get("href", "")) if image else None,
        items=[_parse_entry(entry) for entry in parsed.entries],
    )


class FeedFetcher:
    """Fetches and parses the configured feeds."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._client: httpx.Client | None = None

    @property
    def http_timeout(self) -> httpx.Timeout:
        """Per-request timeout, never longer than the whole refresh may take."""
        seconds: float = self.settings.feed_timeout
        if self.settings.refresh_timeout is not None:
            seconds = min(seconds, self.settings.refresh_timeout)
        return httpx.Timeout(seconds)

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialized HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.http_timeout,
                headers={"User-Agent": self.settings.feed_user_agent},
                follow_redirects=True,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "FeedFetcher":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def fetch_one(self, url: str) -> RawFeed:
        """Download and parse a single feed.

        Raises:
            FetchError: The download failed or the document is not a feed.
        """
        log.debug("fetching_feed", url=url)
        try:
            response = self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            log.error("feed_fetch_error", url=url, error=str(e))
            raise FetchError(url, str(e)) from e

        parsed = parse_feed(response.content)
        if parsed.bozo and not parsed.entries:
            log.error("feed_parse_error", url=url, error=str(parsed.bozo_exception))
            raise FetchError(url, f"parse error: {parsed.bozo_exception}")

        feed = to_raw_feed(parsed)
        log.debug("feed_fetched", url=url, title=feed.title, items=len(feed.items))
        return feed

    def fetch(self, urls: list[str] | None = None) -> list[RawFeed]:
        """Fetch every feed, in order.

        Args:
            urls: Feed URLs. Defaults to the configured feeds.

        Returns:
            Parsed feeds in the same order as the URLs.

        Raises:
            FetchError: Any single feed failed; no partial result is returned.
        """
        urls = self.settings.feeds if urls is None else urls
        return [self.fetch_one(url) for url in urls]
