# ABOUTME: CLI entry point for the esqimo feed aggregation service.
# ABOUTME: Provides subcommands: serve, snapshot.

import argparse
import asyncio
import json
import logging
import sys

import structlog

from esqimo.config import Settings, get_settings
from esqimo.errors import StartupError


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog for console or JSON output."""
    settings = settings or get_settings()

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "json":
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
        )
    else:
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
                structlog.processors.add_log_level,
                structlog.dev.ConsoleRenderer(colors=True),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
        )


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP API, refreshing feeds in the background.

    A failed first refresh aborts application startup and uvicorn exits
    with a non-zero status.
    """
    import uvicorn

    from esqimo.web.app import create_app

    log = structlog.get_logger()
    settings = get_settings()
    host = args.host or settings.host
    port = args.port or settings.port

    log.info("cmd_serve_start", host=host, port=port, feeds=settings.feeds)

    uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.log_level.lower())

    return 0


def cmd_snapshot(args: argparse.Namespace) -> int:
    """Run one refresh cycle and print the matching items as JSON."""
    from esqimo.feeds.fetcher import FeedFetcher
    from esqimo.store.memory import MemoryStore
    from esqimo.store.refresh import RefreshScheduler

    log = structlog.get_logger()
    settings = get_settings()
    store = MemoryStore()

    with FeedFetcher(settings) as fetcher:
        scheduler = RefreshScheduler(
            fetch=fetcher.fetch,
            publish=store.publish,
            timeout_seconds=settings.refresh_timeout,
        )
        try:
            asyncio.run(scheduler.startup())
        except StartupError:
            log.exception("cmd_snapshot_failed")
            return 1
        finally:
            scheduler.close(wait=False)

    items = store.get_items(args.title, args.category, args.limit)
    print(json.dumps([item.model_dump(mode="json") for item in items], indent=2))
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="esqimo",
        description="esqimo - aggregated RSS feeds served from an in-memory snapshot",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve the HTTP API and refresh feeds on an interval",
    )
    serve_parser.add_argument("--host", type=str, help="Listen address. Defaults to settings.")
    serve_parser.add_argument("--port", type=int, help="Listen port. Defaults to settings.")

    # snapshot command
    snapshot_parser = subparsers.add_parser(
        "snapshot",
        help="Fetch all feeds once and print the items as JSON",
    )
    snapshot_parser.add_argument(
        "--title",
        action="append",
        default=[],
        help="Only items from this feed title (repeatable)",
    )
    snapshot_parser.add_argument(
        "--category",
        action="append",
        default=[],
        help="Only items in this category (repeatable, empty string for uncategorised)",
    )
    snapshot_parser.add_argument(
        "--limit",
        type=int,
        default=0,
        help="Maximum number of items (default: 0, no limit)",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    configure_logging()

    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        # Default behavior: serve
        args.host = None
        args.port = None
        return cmd_serve(args)

    commands = {
        "serve": cmd_serve,
        "snapshot": cmd_snapshot,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
