"""API schema definitions."""

from subnetsearch.api.schemas.base import (
    APIBaseSchema,
    APIError,
    ErrorDetail,
)
from subnetsearch.api.schemas.responses import (
    AdvancedSearchResponse,
    AggregationBucketResponse,
    AutocompleteResponse,
    BulkItemErrorResponse,
    DocumentResponse,
    HealthResponse,
    ReadinessResponse,
    SearchHitResponse,
    SearchResponse,
    SuggestionResponse,
    SyncResultResponse,
    SyncStatusResponse,
    TotalResponse,
)

__all__ = [
    # Base
    "APIBaseSchema",
    "APIError",
    "ErrorDetail",
    # Responses
    "AdvancedSearchResponse",
    "AggregationBucketResponse",
    "AutocompleteResponse",
    "BulkItemErrorResponse",
    "DocumentResponse",
    "HealthResponse",
    "ReadinessResponse",
    "SearchHitResponse",
    "SearchResponse",
    "SuggestionResponse",
    "SyncResultResponse",
    "SyncStatusResponse",
    "TotalResponse",
]
