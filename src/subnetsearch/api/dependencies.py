"""FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, Request

from subnetsearch.config import SubnetSearchSettings, get_settings

if TYPE_CHECKING:
    from subnetsearch.cache.client import AsyncRedisClient
    from subnetsearch.ports import IndexClient, RecordSource
    from subnetsearch.services.search import SearchService
    from subnetsearch.services.sync import SyncService


async def get_cache_client(request: Request) -> AsyncRedisClient | None:
    """Get Redis cache client from app state."""
    return getattr(request.app.state, "cache_client", None)


async def get_index_client(request: Request) -> IndexClient:
    """Get the index client from app state."""
    return request.app.state.index_client


async def get_record_source(request: Request) -> RecordSource:
    """Get the record source from app state."""
    return request.app.state.record_source


async def get_search_service(
    settings: SubnetSearchSettings = Depends(get_settings),
    client: IndexClient = Depends(get_index_client),
    cache: AsyncRedisClient | None = Depends(get_cache_client),
) -> SearchService:
    """Get search service configured with the query limits from settings."""
    from subnetsearch.search.models import SearchLimits
    from subnetsearch.search.translator import QueryTranslator
    from subnetsearch.services.search import SearchService

    translator = QueryTranslator(
        SearchLimits(
            max_size=settings.search_max_size,
            max_autocomplete_size=settings.autocomplete_max_size,
            max_result_window=settings.max_result_window,
        ),
        strict_sort=settings.strict_sort_validation,
    )
    return SearchService(client, translator=translator, cache=cache, cache_ttl=settings.cache_ttl)


async def get_sync_service(
    settings: SubnetSearchSettings = Depends(get_settings),
    client: IndexClient = Depends(get_index_client),
    records: RecordSource = Depends(get_record_source),
    cache: AsyncRedisClient | None = Depends(get_cache_client),
) -> SyncService:
    """Get sync service."""
    from subnetsearch.services.sync import SyncService

    return SyncService(client, records, page_size=settings.reconcile_page_size, cache=cache)


# Type aliases for cleaner dependency injection
Settings = Annotated[SubnetSearchSettings, Depends(get_settings)]
CacheClient = Annotated["AsyncRedisClient | None", Depends(get_cache_client)]
SearchSvc = Annotated["SearchService", Depends(get_search_service)]
SyncSvc = Annotated["SyncService", Depends(get_sync_service)]
