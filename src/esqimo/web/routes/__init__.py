# ABOUTME: Routes module initialization.
# ABOUTME: Exports all route modules for FastAPI app.

from esqimo.web.routes import feeds, health

__all__ = ["feeds", "health"]
