"""Search service for querying the subnet index."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from subnetsearch.api.schemas import (
    AdvancedSearchResponse,
    AggregationBucketResponse,
    DocumentResponse,
    SearchHitResponse,
    SearchResponse,
    TotalResponse,
)
from subnetsearch.cache.decorators import cached
from subnetsearch.cache.keys import CacheKeys
from subnetsearch.search.models import (
    AdvancedSearchRequest,
    AutocompleteRequest,
    SearchRequest,
    SearchResult,
)
from subnetsearch.search.searcher import Searcher
from subnetsearch.search.translator import QueryTranslator

if TYPE_CHECKING:
    from subnetsearch.cache.client import AsyncRedisClient
    from subnetsearch.ports import IndexClient

logger = logging.getLogger(__name__)


class SearchService:
    """
    Service for searching subnet documents.

    Wraps the searcher and shapes its results into API responses.
    Autocomplete responses are cached when a cache client is configured.
    """

    def __init__(
        self,
        client: IndexClient,
        translator: QueryTranslator | None = None,
        cache: AsyncRedisClient | None = None,
        cache_ttl: int = 60,
    ) -> None:
        """
        Initialize the search service.

        Args:
            client: Index client for reads
            translator: Query translator carrying the configured limits
            cache: Optional Redis cache for autocomplete responses
            cache_ttl: Cache entry lifetime in seconds
        """
        self._client = client
        self._searcher = Searcher(client, translator)
        self._cache = cache
        self._cache_ttl = cache_ttl

    async def search(self, request: SearchRequest) -> SearchResponse:
        """Free-text or field-scoped search."""
        result = await self._searcher.search(request)
        return SearchResponse(total=self._total(result), hits=self._hits(result))

    async def search_advanced(self, request: AdvancedSearchRequest) -> AdvancedSearchResponse:
        """Filtered search with facet counts."""
        result = await self._searcher.search_advanced(request)
        aggregations = {
            name: [AggregationBucketResponse(key=bucket.key, count=bucket.count) for bucket in buckets]
            for name, buckets in (result.aggregations or {}).items()
        }
        return AdvancedSearchResponse(
            total=self._total(result),
            hits=self._hits(result),
            aggregations=aggregations,
        )

    @cached(lambda q, size=5, field=None: CacheKeys.autocomplete(q, size, field))
    async def autocomplete(self, q: str, size: int = 5, field: str | None = None) -> dict[str, Any]:
        """
        Suggestion lookup.

        Returns:
            ``{"query": ..., "suggestions": [{"text": ..., "type": ...}]}``
        """
        suggestions = await self._searcher.autocomplete(AutocompleteRequest(q=q, size=size, field=field))
        return {
            "query": q,
            "suggestions": [{"text": s.text, "type": s.type} for s in suggestions],
        }

    async def get_document(self, document_id: str) -> DocumentResponse:
        """
        Fetch one document by id.

        Raises:
            DocumentNotFoundError: If no document exists under the id
        """
        source = await self._client.get_document(document_id)
        return DocumentResponse(id=document_id, source=source)

    @staticmethod
    def _total(result: SearchResult) -> TotalResponse:
        return TotalResponse(value=result.total.value, relation=result.total.relation)

    @staticmethod
    def _hits(result: SearchResult) -> list[SearchHitResponse]:
        return [
            SearchHitResponse(id=hit.id, score=hit.score, source=hit.source, highlight=hit.highlight)
            for hit in result.hits
        ]
