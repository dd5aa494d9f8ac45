# ABOUTME: Exception types raised by the feed fetcher and refresh scheduler.
# ABOUTME: Query operations define their boundary cases and raise nothing.


class EsqimoError(Exception):
    """Base class for esqimo errors."""


class FetchError(EsqimoError):
    """A configured feed could not be fetched or parsed."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"unable to fetch feed {url}: {reason}")


class StartupError(EsqimoError):
    """The first refresh cycle failed, so there is no snapshot to serve."""
