# ABOUTME: Feed module for downloading and parsing syndication feeds.
# ABOUTME: Turns feed URLs into RawFeed documents for the snapshot builder.

from esqimo.feeds.fetcher import FeedFetcher

__all__ = ["FeedFetcher"]
