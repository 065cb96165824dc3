"""FastAPI application and routes."""

from subnetsearch.api.app import app, create_app

__all__ = [
    "app",
    "create_app",
]
