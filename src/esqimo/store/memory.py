# ABOUTME: In-memory store holding the currently published feed snapshot.
# ABOUTME: Snapshots are swapped atomically; queries read one snapshot each.

import threading
from collections.abc import Iterable

import structlog

from esqimo.models import Item, Snapshot
from esqimo.store.query import select_items

log = structlog.get_logger()


class MemoryStore:
    """Holds the current snapshot and answers item, title and category queries.

    The refresh scheduler is the only writer and calls publish() with a fully
    built snapshot. Readers take the reference once per query and never lock
    the snapshot contents, which are immutable.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot = Snapshot.empty()
        self._ready = threading.Event()
        self._version = 0

    @property
    def snapshot(self) -> Snapshot:
        """The currently published snapshot."""
        with self._lock:
            return self._snapshot

    @property
    def version(self) -> int:
        """Number of snapshots published so far."""
        with self._lock:
            return self._version

    @property
    def ready(self) -> bool:
        """True once the first snapshot has been published."""
        return self._ready.is_set()

    def wait_ready(self, timeout: float | None = None) -> bool:
        """Block until the first snapshot is published or the timeout expires."""
        return self._ready.wait(timeout)

    def publish(self, snapshot: Snapshot) -> None:
        """Replace the current snapshot."""
        with self._lock:
            self._snapshot = snapshot
            self._version += 1
            version = self._version
        self._ready.set()
        log.info(
            "snapshot_published",
            version=version,
            feeds=len(snapshot.feeds),
            items=snapshot.item_count,
            categories=len(snapshot.categories),
        )

    def get_items(
        self,
        titles: Iterable[str] = (),
        categories: Iterable[str] = (),
        limit: int = 0,
    ) -> list[Item]:
        """Items matching the filters, most recent first."""
        return select_items(self.snapshot, titles, categories, limit)

    def get_titles(self) -> frozenset[str]:
        """Titles of all feeds in the current snapshot."""
        return self.snapshot.titles

    def get_categories(self) -> frozenset[str]:
        """Non-empty item categories in the current snapshot."""
        return self.snapshot.categories
