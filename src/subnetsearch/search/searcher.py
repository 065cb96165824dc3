"""Search query service over the subnet index."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from subnetsearch.search.formatter import format_search_result, format_suggestions
from subnetsearch.search.models import (
    AdvancedSearchRequest,
    AutocompleteRequest,
    SearchRequest,
    SearchResult,
    Suggestion,
)
from subnetsearch.search.translator import QueryTranslator

if TYPE_CHECKING:
    from subnetsearch.ports import IndexClient

logger = logging.getLogger(__name__)


class Searcher:
    """
    Runs search requests against the index.

    Each call translates the request, executes it through the index client
    and normalizes the raw response.
    """

    def __init__(self, client: IndexClient, translator: QueryTranslator | None = None) -> None:
        """
        Initialize the searcher.

        Args:
            client: Index client used for reads
            translator: Query translator; a default one is built if omitted
        """
        self._client = client
        self._translator = translator or QueryTranslator()

    @property
    def translator(self) -> QueryTranslator:
        return self._translator

    async def search(self, request: SearchRequest) -> SearchResult:
        """
        Free-text or field-scoped search.

        Raises:
            ValidationError: If the request is invalid
            IndexNotFoundError: If the index has not been created
        """
        query = self._translator.translate(request)
        raw = await self._client.search(query)
        result = format_search_result(raw)
        logger.debug(f"Search q={request.q!r} field={request.field} returned {len(result.hits)} hits")
        return result

    async def search_advanced(self, request: AdvancedSearchRequest) -> SearchResult:
        """Filtered search returning facet aggregations."""
        query = self._translator.translate_advanced(request)
        raw = await self._client.search(query)
        return format_search_result(raw, include_aggregations=True)

    async def autocomplete(self, request: AutocompleteRequest) -> list[Suggestion]:
        """Suggestion lookup returning distinct matching field values."""
        query = self._translator.translate_autocomplete(request)
        raw = await self._client.search(query)
        result = format_search_result(raw)
        field = query.source_includes[0] if request.field and query.source_includes else None
        return format_suggestions(
            result.hits,
            request.q,
            field=field,
            limit=self._translator.limits.max_suggestions,
        )
