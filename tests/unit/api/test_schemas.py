"""Tests for API response schemas."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from subnetsearch.api.schemas import (
    APIError,
    AdvancedSearchResponse,
    AggregationBucketResponse,
    ErrorDetail,
    HealthResponse,
    SearchHitResponse,
    SearchResponse,
    SyncResultResponse,
    SyncStatusResponse,
    TotalResponse,
)
from subnetsearch.api.schemas.base import to_camel_case
from subnetsearch.core.types import TotalRelation


@pytest.mark.parametrize(
    "name,expected",
    [
        ("documents_processed", "documentsProcessed"),
        ("index_name", "indexName"),
        ("id", "id"),
    ],
)
def test_to_camel_case(name: str, expected: str):
    assert to_camel_case(name) == expected


# ============================================================================
# Search Schema Tests
# ============================================================================


class TestSearchResponse:
    """Tests for SearchResponse schema."""

    def test_serializes_source_keys_unchanged(self):
        """Document sources keep their index field names."""
        response = SearchResponse(
            total=TotalResponse(value=1, relation=TotalRelation.EQ),
            hits=[SearchHitResponse(id="a", score=1.0, source={"CLUSTERID": "cluster-1"})],
        )
        data = response.model_dump(by_alias=True, mode="json")

        assert data == {
            "total": {"value": 1, "relation": "eq"},
            "hits": [{"id": "a", "score": 1.0, "source": {"CLUSTERID": "cluster-1"}, "highlight": {}}],
        }

    def test_score_optional(self):
        """Field-sorted hits may carry no score."""
        hit = SearchHitResponse(id="a", source={})
        assert hit.score is None

    def test_invalid_relation(self):
        with pytest.raises(ValidationError):
            TotalResponse(value=1, relation="about")

    def test_advanced_aggregations_default_empty(self):
        response = AdvancedSearchResponse(total=TotalResponse(value=0, relation="eq"), hits=[])
        assert response.aggregations == {}

    def test_advanced_aggregations(self):
        response = AdvancedSearchResponse(
            total=TotalResponse(value=0, relation="eq"),
            hits=[],
            aggregations={"sites": [AggregationBucketResponse(key="a", count=2)]},
        )
        assert response.model_dump(by_alias=True)["aggregations"]["sites"] == [{"key": "a", "count": 2}]


# ============================================================================
# Sync Schema Tests
# ============================================================================


class TestSyncSchemas:
    """Tests for sync schemas."""

    def test_result_camel_case(self):
        """Sync result should serialize with camelCase keys."""
        response = SyncResultResponse(
            success=True,
            message="Bulk sync completed successfully",
            documents_processed=3,
            documents_indexed=3,
            timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        data = response.model_dump(by_alias=True, exclude_none=True)

        assert data["documentsProcessed"] == 3
        assert data["documentsIndexed"] == 3
        assert data["orphansRemoved"] == 0
        assert "errors" not in data

    def test_status_accepts_aliases(self):
        """Schemas should accept both field names and aliases."""
        status = SyncStatusResponse.model_validate(
            {
                "recordCount": 2,
                "indexCount": 1,
                "synced": False,
                "difference": 1,
                "indexName": "subnet_search",
                "tableName": "subnet_records",
                "timestamp": "2024-01-01T00:00:00Z",
            }
        )
        assert status.record_count == 2
        assert status.index_name == "subnet_search"


# ============================================================================
# Error and Health Schema Tests
# ============================================================================


class TestErrorSchemas:
    """Tests for the error envelope."""

    def test_optional_members_dropped(self):
        error = APIError(error=ErrorDetail(code="not_found", message="Document not found: x"))
        assert error.model_dump(by_alias=True, exclude_none=True) == {
            "error": {"code": "not_found", "message": "Document not found: x"}
        }

    def test_field_included(self):
        error = APIError(error=ErrorDetail(code="invalid_parameter", message="bad", field="size"))
        assert error.model_dump(exclude_none=True)["error"]["field"] == "size"


class TestHealthResponse:
    """Tests for HealthResponse schema."""

    def test_valid_statuses(self):
        response = HealthResponse(status="degraded", version="0.1.0", services={"redis": "down"})
        assert response.services["redis"] == "down"

    def test_invalid_status(self):
        with pytest.raises(ValidationError):
            HealthResponse(status="fine", version="0.1.0", services={})
