"""Unit test fixtures with a mocked Elasticsearch client."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from elastic_transport import ApiResponseMeta, HttpHeaders, NodeConfig
from elasticsearch import NotFoundError

from subnetsearch.search.client import AsyncIndexClient


# ============================================================================
# Elasticsearch Mocking Fixtures
# ============================================================================


def api_meta(status: int) -> ApiResponseMeta:
    """Build response metadata for constructing engine exceptions."""
    return ApiResponseMeta(
        status=status,
        http_version="1.1",
        headers=HttpHeaders(),
        duration=0.0,
        node=NodeConfig("http", "localhost", 9200),
    )


def not_found(body: dict[str, Any]) -> NotFoundError:
    return NotFoundError("not found", meta=api_meta(404), body=body)


@pytest.fixture
def index_missing_error() -> NotFoundError:
    """404 raised when the index does not exist."""
    return not_found(
        {
            "error": {"type": "index_not_found_exception", "reason": "no such index [subnet_search_test]"},
            "status": 404,
        }
    )


@pytest.fixture
def document_missing_error() -> NotFoundError:
    """404 raised when a document does not exist."""
    return not_found({"_index": "subnet_search_test", "_id": "missing", "found": False})


@pytest.fixture
def mock_es() -> MagicMock:
    """
    Mocked AsyncElasticsearch.

    ``options()`` returns the same mock so per-call timeouts do not hide the
    configured method mocks.
    """
    es = MagicMock()
    es.options.return_value = es
    es.ping = AsyncMock(return_value=True)
    es.count = AsyncMock(return_value={"count": 0})
    es.index = AsyncMock(return_value={"result": "created"})
    es.delete = AsyncMock(return_value={"result": "deleted"})
    es.get = AsyncMock(return_value={"_id": "abc", "_source": {}})
    es.bulk = AsyncMock(return_value={"errors": False, "items": []})
    es.search = AsyncMock(return_value={"hits": {"total": {"value": 0, "relation": "eq"}, "hits": []}})
    es.close = AsyncMock()
    es.indices.exists = AsyncMock(return_value=False)
    es.indices.create = AsyncMock(return_value={"acknowledged": True})
    return es


@pytest.fixture
def index_client(mock_es: MagicMock) -> AsyncIndexClient:
    """Index client wired to the mocked engine."""
    return AsyncIndexClient(
        "http://localhost:9200",
        "subnet_search_test",
        request_timeout=5.0,
        status_timeout=1.0,
        bulk_timeout=60.0,
        client=mock_es,
    )
