"""API test fixtures: the real app wired to in-memory backing stores."""

from __future__ import annotations

from typing import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from subnetsearch.api.app import create_app
from subnetsearch.api.dependencies import get_cache_client, get_index_client, get_record_source
from subnetsearch.config import get_settings


@pytest.fixture
def test_app(fake_index, fake_records, mock_settings):
    """Create the application with backing stores overridden."""
    app = create_app(cors_origins=["http://test"])
    app.state.index_client = fake_index

    async def override_index_client():
        return fake_index

    async def override_record_source():
        return fake_records

    async def override_cache_client():
        return None

    app.dependency_overrides[get_settings] = lambda: mock_settings
    app.dependency_overrides[get_index_client] = override_index_client
    app.dependency_overrides[get_record_source] = override_record_source
    app.dependency_overrides[get_cache_client] = override_cache_client

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
async def test_client(test_app) -> AsyncIterator[AsyncClient]:
    """Create async HTTP test client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
