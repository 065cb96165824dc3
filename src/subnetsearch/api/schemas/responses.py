"""Response schemas for API endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from subnetsearch.api.schemas.base import APIBaseSchema
from subnetsearch.core.types import TotalRelation


# Search schemas
class TotalResponse(APIBaseSchema):
    """Hit count; ``relation`` is ``gte`` when the count is a lower bound."""

    value: int
    relation: TotalRelation


class SearchHitResponse(APIBaseSchema):
    """A single scored match."""

    id: str
    score: float | None = None
    source: dict[str, Any]
    highlight: dict[str, list[str]] = Field(default_factory=dict)


class SearchResponse(APIBaseSchema):
    """Search results."""

    total: TotalResponse
    hits: list[SearchHitResponse]


class AggregationBucketResponse(APIBaseSchema):
    """Document count for one facet value."""

    key: str
    count: int


class AdvancedSearchResponse(SearchResponse):
    """Filtered search results with facet counts."""

    aggregations: dict[str, list[AggregationBucketResponse]] = Field(default_factory=dict)


class SuggestionResponse(APIBaseSchema):
    """Autocomplete suggestion and the field it came from."""

    text: str
    type: str


class AutocompleteResponse(APIBaseSchema):
    """Autocomplete suggestions."""

    query: str
    suggestions: list[SuggestionResponse]


class DocumentResponse(APIBaseSchema):
    """A single index document."""

    id: str
    source: dict[str, Any]


# Sync schemas
class BulkItemErrorResponse(APIBaseSchema):
    """A document rejected during reconciliation."""

    id: str
    status: int
    error_type: str | None = None
    reason: str | None = None


class SyncResultResponse(APIBaseSchema):
    """Outcome of a manual reconcile."""

    success: bool
    message: str
    documents_processed: int
    documents_indexed: int = 0
    orphans_removed: int = 0
    errors: list[BulkItemErrorResponse] | None = None
    timestamp: datetime


class SyncStatusResponse(APIBaseSchema):
    """Record store and index counts at one instant."""

    record_count: int
    index_count: int
    synced: bool
    difference: int
    index_name: str
    table_name: str
    timestamp: datetime


# Health check
class HealthResponse(APIBaseSchema):
    """Health check response."""

    status: Literal["healthy", "degraded", "unhealthy"]
    version: str
    services: dict[str, Literal["up", "down", "unknown"]]


class ReadinessResponse(APIBaseSchema):
    """Readiness check response."""

    ready: bool
