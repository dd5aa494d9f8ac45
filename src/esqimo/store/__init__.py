# ABOUTME: Snapshot store module: builder, query engine, memory store and scheduler.
# ABOUTME: Exports the pieces wired together by the web app and the CLI.

from esqimo.store.builder import build_snapshot
from esqimo.store.memory import MemoryStore
from esqimo.store.query import select_items
from esqimo.store.refresh import RefreshScheduler

__all__ = ["MemoryStore", "RefreshScheduler", "build_snapshot", "select_items"]
