"""Service layer for orchestrating search and sync."""

from subnetsearch.services.search import SearchService
from subnetsearch.services.sync import SyncService

__all__ = [
    "SearchService",
    "SyncService",
]
