"""Tests for the Redis client wrapper."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from subnetsearch.cache.client import AsyncRedisClient
from subnetsearch.core.exceptions import CacheError


@pytest.fixture
def mock_redis() -> MagicMock:
    redis = MagicMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock()
    redis.delete = AsyncMock(return_value=1)
    redis.ping = AsyncMock(return_value=True)
    return redis


@pytest.fixture
def cache_client(mock_redis: MagicMock) -> AsyncRedisClient:
    client = AsyncRedisClient("redis://localhost:6379/15")
    client._redis = mock_redis
    return client


class TestReadsAndWrites:
    """Tests for get() and set()."""

    async def test_get_decodes_json(self, cache_client: AsyncRedisClient, mock_redis: MagicMock):
        mock_redis.get.return_value = '{"query": "clu", "suggestions": []}'
        assert await cache_client.get("k") == {"query": "clu", "suggestions": []}

    async def test_get_miss(self, cache_client: AsyncRedisClient):
        assert await cache_client.get("k") is None

    async def test_set_serializes_with_ttl(self, cache_client: AsyncRedisClient, mock_redis: MagicMock):
        await cache_client.set("k", {"a": 1}, ttl=30)
        mock_redis.set.assert_awaited_once_with("k", '{"a": 1}', ex=30)

    async def test_read_failure_raises_cache_error(self, cache_client: AsyncRedisClient, mock_redis: MagicMock):
        mock_redis.get.side_effect = RedisConnectionError("connection refused")
        with pytest.raises(CacheError):
            await cache_client.get("k")

    async def test_unconnected_client_is_inert(self):
        client = AsyncRedisClient("redis://localhost:6379/15")
        assert await client.get("k") is None
        assert await client.ping() is False
        assert await client.delete_prefix("subnetsearch:") == 0


async def test_delete_prefix_scans_matching_keys(cache_client: AsyncRedisClient, mock_redis: MagicMock):
    async def scan_iter(match, count):
        assert match == "subnetsearch:autocomplete:*"
        for key in ("subnetsearch:autocomplete:a", "subnetsearch:autocomplete:b"):
            yield key

    mock_redis.scan_iter = scan_iter

    assert await cache_client.delete_prefix("subnetsearch:autocomplete:") == 2
    assert mock_redis.delete.await_count == 2


async def test_ping_failure_is_false(cache_client: AsyncRedisClient, mock_redis: MagicMock):
    mock_redis.ping.side_effect = RedisConnectionError("down")
    assert await cache_client.ping() is False
