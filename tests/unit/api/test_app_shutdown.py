"""Tests for application shutdown."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI

from subnetsearch.api.app import shutdown_resources


@pytest.fixture
def app_with_resources() -> FastAPI:
    app = FastAPI()
    app.state.change_feed = MagicMock(stop=AsyncMock())
    app.state.change_feed_task = None
    app.state.index_client = MagicMock(close=AsyncMock())
    app.state.cache_client = MagicMock(close=AsyncMock())
    app.state.db_engine = MagicMock(dispose=AsyncMock())
    return app


def assert_released(app: FastAPI) -> None:
    app.state.index_client.close.assert_awaited_once()
    app.state.cache_client.close.assert_awaited_once()
    app.state.db_engine.dispose.assert_awaited_once()


async def test_clean_shutdown(app_with_resources: FastAPI):
    async def propagate():
        return None

    app_with_resources.state.change_feed_task = asyncio.create_task(propagate())

    await shutdown_resources(app_with_resources)

    app_with_resources.state.change_feed.stop.assert_awaited_once()
    assert_released(app_with_resources)


async def test_failed_propagator_still_releases_clients(app_with_resources: FastAPI):
    async def propagate():
        raise RuntimeError("index client closed underneath the propagator")

    app_with_resources.state.change_feed_task = asyncio.create_task(propagate())

    await shutdown_resources(app_with_resources)

    assert_released(app_with_resources)


async def test_stuck_propagator_cancelled(app_with_resources: FastAPI):
    task = asyncio.create_task(asyncio.sleep(60))
    app_with_resources.state.change_feed_task = task

    await shutdown_resources(app_with_resources, drain_timeout=0.01)

    assert task.cancelled()
    assert_released(app_with_resources)


async def test_feed_stop_error_still_releases_clients(app_with_resources: FastAPI):
    app_with_resources.state.change_feed.stop.side_effect = OSError("connection reset")

    with pytest.raises(OSError):
        await shutdown_resources(app_with_resources)

    assert_released(app_with_resources)


async def test_without_cache_or_feed(app_with_resources: FastAPI):
    app_with_resources.state.change_feed = None
    app_with_resources.state.cache_client = None

    await shutdown_resources(app_with_resources)

    app_with_resources.state.index_client.close.assert_awaited_once()
    app_with_resources.state.db_engine.dispose.assert_awaited_once()
