# ABOUTME: Web module: FastAPI application serving the feed snapshot.
# ABOUTME: Exports the application factory.

from esqimo.web.app import create_app

__all__ = ["create_app"]
