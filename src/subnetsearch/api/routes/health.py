"""Health check endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from subnetsearch import __version__
from subnetsearch.api.schemas import HealthResponse, ReadinessResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    operation_id="getHealth",
    summary="Health check",
    description="Check the health status of the API and its dependencies.",
)
async def health_check(request: Request) -> HealthResponse:
    """Check API health status."""
    services: dict[str, Literal["up", "down", "unknown"]] = {}
    overall_status: Literal["healthy", "degraded", "unhealthy"] = "healthy"

    # Check database
    db_factory = getattr(request.app.state, "db_session_factory", None)
    if db_factory:
        try:
            async with db_factory() as session:
                await session.execute(text("SELECT 1"))
            services["database"] = "up"
        except (SQLAlchemyError, OSError):
            services["database"] = "down"
            overall_status = "unhealthy"
    else:
        services["database"] = "unknown"

    # Check Elasticsearch
    index_client = getattr(request.app.state, "index_client", None)
    if index_client:
        if await index_client.health():
            services["elasticsearch"] = "up"
        else:
            services["elasticsearch"] = "down"
            overall_status = "unhealthy"
    else:
        services["elasticsearch"] = "unknown"

    # Check Redis
    cache_client = getattr(request.app.state, "cache_client", None)
    if cache_client:
        if await cache_client.ping():
            services["redis"] = "up"
        else:
            services["redis"] = "down"
            if overall_status == "healthy":
                overall_status = "degraded"
    else:
        services["redis"] = "unknown"

    return HealthResponse(
        status=overall_status,
        version=__version__,
        services=services,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    operation_id="getReady",
    summary="Readiness check",
    description="Check if the API is ready to serve traffic.",
)
async def readiness_check(request: Request) -> ReadinessResponse:
    """Check if API is ready to serve traffic."""
    db_factory = getattr(request.app.state, "db_session_factory", None)
    index_client = getattr(request.app.state, "index_client", None)

    return ReadinessResponse(ready=db_factory is not None and index_client is not None)
