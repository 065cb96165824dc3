"""Search layer for Elasticsearch integration."""

from subnetsearch.search.client import AsyncIndexClient
from subnetsearch.search.models import (
    AdvancedSearchRequest,
    AggregationBucket,
    AutocompleteRequest,
    BulkItemError,
    BulkWriteResult,
    IndexDocument,
    SearchHit,
    SearchLimits,
    SearchRequest,
    SearchResult,
    SearchTotal,
    Suggestion,
    TranslatedQuery,
)
from subnetsearch.search.projector import project, project_many
from subnetsearch.search.searcher import Searcher
from subnetsearch.search.translator import QueryTranslator

__all__ = [
    # Client
    "AsyncIndexClient",
    # Models
    "AdvancedSearchRequest",
    "AggregationBucket",
    "AutocompleteRequest",
    "BulkItemError",
    "BulkWriteResult",
    "IndexDocument",
    "SearchHit",
    "SearchLimits",
    "SearchRequest",
    "SearchResult",
    "SearchTotal",
    "Suggestion",
    "TranslatedQuery",
    # Projection
    "project",
    "project_many",
    # Querying
    "QueryTranslator",
    "Searcher",
]
