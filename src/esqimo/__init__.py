# ABOUTME: Main package for the esqimo feed aggregation service.
# ABOUTME: Exports configuration, the data model and the snapshot store.

__version__ = "0.1.0"

from esqimo.config import get_settings  # noqa: E402
from esqimo.models import Feed, Image, Item, RawFeed, RawImage, RawItem, Snapshot  # noqa: E402
from esqimo.store import MemoryStore, RefreshScheduler, build_snapshot, select_items  # noqa: E402

__all__ = [
    "__version__",
    "get_settings",
    "Feed",
    "Image",
    "Item",
    "RawFeed",
    "RawImage",
    "RawItem",
    "Snapshot",
    "MemoryStore",
    "RefreshScheduler",
    "build_snapshot",
    "select_items",
]
