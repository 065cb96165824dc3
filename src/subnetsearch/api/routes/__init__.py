"""API route modules."""

from subnetsearch.api.routes.health import router as health_router
from subnetsearch.api.routes.search import router as search_router
from subnetsearch.api.routes.sync import router as sync_router

__all__ = [
    "health_router",
    "search_router",
    "sync_router",
]
