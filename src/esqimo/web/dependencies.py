# ABOUTME: FastAPI dependency injection for the snapshot store.
# ABOUTME: Provides reusable dependencies for route handlers.

from typing import Annotated

from fastapi import Depends, Request

from esqimo.store.memory import MemoryStore


def get_store(request: Request) -> MemoryStore:
    """Get the snapshot store from app state."""
    return request.app.state.store


StoreDep = Annotated[MemoryStore, Depends(get_store)]
