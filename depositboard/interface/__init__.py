"""Mini README: Web interface for the deposit board.

Exports the FastAPI application factory serving the admin routes and the
live-update stream consumed by the browser dashboards.
"""

from .web_app import create_application

__all__ = ["create_application"]
