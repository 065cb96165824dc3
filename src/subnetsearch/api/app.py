"""FastAPI application factory."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from subnetsearch import __version__
from subnetsearch.api.errors import register_error_handlers
from subnetsearch.api.routes import health_router, search_router, sync_router
from subnetsearch.config import SubnetSearchSettings, get_settings
from subnetsearch.core.exceptions import SubnetSearchError

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger().setLevel(level.upper())


async def _start_change_feed(app: FastAPI, settings: SubnetSearchSettings) -> None:
    from subnetsearch.sync.feed import PostgresChangeFeed
    from subnetsearch.sync.propagator import ChangePropagator

    feed = PostgresChangeFeed(str(settings.database_url), channel=settings.change_feed_channel)
    try:
        await feed.start()
    except SubnetSearchError as e:
        logger.warning(f"Change feed disabled: {e.message}")
        return

    propagator = ChangePropagator(app.state.index_client, app.state.record_source)
    app.state.change_feed = feed
    app.state.change_feed_task = asyncio.create_task(propagator.run(feed), name="change-propagator")


async def shutdown_resources(app: FastAPI, drain_timeout: float = 5.0) -> None:
    """
    Stop change propagation and release backing-store clients.

    Clients are closed even when the propagator or the feed fails to stop.
    """
    try:
        if app.state.change_feed is not None:
            await app.state.change_feed.stop()
        if app.state.change_feed_task is not None:
            # Drain queued events, then give up on the rest
            try:
                await asyncio.wait_for(app.state.change_feed_task, timeout=drain_timeout)
            except asyncio.TimeoutError:
                logger.warning("Change propagator did not drain in time, cancelled")
            except Exception:
                logger.exception("Change propagator failed")
    finally:
        await app.state.index_client.close()

        if app.state.cache_client:
            await app.state.cache_client.close()

        await app.state.db_engine.dispose()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Handles startup and shutdown of resources.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    # Initialize database
    from subnetsearch.db.base import create_engine, create_session_factory
    from subnetsearch.db.repositories.record import SqlRecordSource

    logger.info("Initializing database connection...")
    app.state.db_engine = create_engine(str(settings.database_url), timeout=settings.database_timeout)
    app.state.db_session_factory = create_session_factory(app.state.db_engine)
    app.state.record_source = SqlRecordSource(app.state.db_session_factory)

    # Initialize Redis cache (optional)
    app.state.cache_client = None
    if settings.redis_url:
        from redis.exceptions import RedisError

        from subnetsearch.cache.client import AsyncRedisClient

        try:
            logger.info("Initializing Redis cache...")
            cache_client = AsyncRedisClient(str(settings.redis_url))
            await cache_client.connect()
            app.state.cache_client = cache_client
            logger.info("Redis cache initialized")
        except RedisError as e:
            logger.warning(f"Failed to initialize Redis: {e}")

    # Initialize Elasticsearch
    from subnetsearch.search.client import AsyncIndexClient

    logger.info("Initializing Elasticsearch...")
    app.state.index_client = AsyncIndexClient.from_settings(settings)
    try:
        if await app.state.index_client.setup_index():
            logger.info(f"Created index '{settings.index_name}'")
    except SubnetSearchError as e:
        logger.warning(f"Index setup deferred: {e.message}")

    # Start change propagation
    app.state.change_feed = None
    app.state.change_feed_task = None
    if settings.change_feed_enabled:
        await _start_change_feed(app, settings)

    logger.info("Application startup complete")

    yield

    # Cleanup
    logger.info("Shutting down application...")
    await shutdown_resources(app)
    logger.info("Application shutdown complete")


def create_app(
    *,
    title: str = "Subnet Search API",
    description: str = "Search over subnet records synchronized into Elasticsearch",
    version: str = __version__,
    cors_origins: list[str] | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        title: API title for OpenAPI docs
        description: API description for OpenAPI docs
        version: API version
        cors_origins: List of allowed CORS origins

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=title,
        description=description,
        version=version,
        lifespan=lifespan,
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    if cors_origins is None:
        cors_origins = get_settings().cors_origins

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Register routes
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(search_router, prefix="/api/v1")
    app.include_router(sync_router, prefix="/api/v1")

    return app


# For uvicorn direct execution
app = create_app()
