# ABOUTME: FastAPI application factory with refresh scheduler lifespan.
# ABOUTME: Main entry point for the esqimo HTTP API.

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from esqimo import __version__
from esqimo.config import Settings, get_settings
from esqimo.feeds.fetcher import FeedFetcher
from esqimo.store.memory import MemoryStore
from esqimo.store.refresh import RefreshScheduler
from esqimo.web.routes import feeds, health

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Publish the first snapshot before serving, refresh in the background after.

    A failed first refresh raises StartupError and the server does not start.
    """
    scheduler: RefreshScheduler = app.state.scheduler
    fetcher: FeedFetcher = app.state.fetcher
    logger.info("app_startup", feeds=len(app.state.settings.feeds))
    try:
        await scheduler.startup()
        scheduler.start()
        yield
        logger.info("app_shutdown")
        await scheduler.stop()
    finally:
        scheduler.close(wait=False)
        fetcher.close()


def create_app(
    settings: Settings | None = None,
    store: MemoryStore | None = None,
    fetcher: FeedFetcher | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    store = store or MemoryStore()
    fetcher = fetcher or FeedFetcher(settings)

    app = FastAPI(
        title="esqimo",
        description="Aggregated RSS feed items, refreshed on a fixed interval",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.store = store
    app.state.fetcher = fetcher
    app.state.scheduler = RefreshScheduler(
        fetch=fetcher.fetch,
        publish=store.publish,
        interval_seconds=settings.refresh_interval,
        timeout_seconds=settings.refresh_timeout,
    )

    app.include_router(health.router)
    app.include_router(feeds.router)

    return app
