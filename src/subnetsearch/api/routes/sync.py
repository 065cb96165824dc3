"""Sync administration endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from subnetsearch.api.dependencies import SyncSvc
from subnetsearch.api.schemas import SyncResultResponse, SyncStatusResponse

router = APIRouter(prefix="/sync", tags=["sync"])


@router.post(
    "/bulk",
    response_model=SyncResultResponse,
    response_model_exclude_none=True,
    operation_id="bulkSync",
    summary="Reconcile index",
    description="Re-project every record into the index and remove orphaned documents.",
)
async def bulk_sync(sync_service: SyncSvc) -> SyncResultResponse:
    """Trigger a full reconcile."""
    return await sync_service.reconcile()


@router.get(
    "/status",
    response_model=SyncStatusResponse,
    operation_id="getSyncStatus",
    summary="Sync status",
    description="Compare record store and index document counts.",
)
async def sync_status(sync_service: SyncSvc) -> SyncStatusResponse:
    """Get the consistency snapshot."""
    return await sync_service.status()
