# ABOUTME: Readiness endpoint for load balancers and orchestration.
# ABOUTME: Reports ready once the first snapshot has been published.

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from esqimo.web.dependencies import StoreDep

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    feeds: int
    items: int
    version: int


@router.get("/health", response_model=HealthResponse)
async def health_check(store: StoreDep):
    """Return 200 once a snapshot is being served, 503 before that."""
    snapshot = store.snapshot
    body = HealthResponse(
        status="ready" if store.ready else "starting",
        feeds=len(snapshot.feeds),
        items=snapshot.item_count,
        version=store.version,
    )
    if not store.ready:
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
