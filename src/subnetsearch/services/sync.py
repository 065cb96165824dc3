"""Sync service for reconciling and inspecting index state."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from subnetsearch.api.schemas import BulkItemErrorResponse, SyncResultResponse, SyncStatusResponse
from subnetsearch.cache.decorators import cache_invalidate
from subnetsearch.cache.keys import CacheKeys
from subnetsearch.sync.reconciler import BulkReconciler
from subnetsearch.sync.tracker import ConsistencyTracker

if TYPE_CHECKING:
    from subnetsearch.cache.client import AsyncRedisClient
    from subnetsearch.ports import IndexClient, RecordSource

logger = logging.getLogger(__name__)


class SyncService:
    """Manual reconcile trigger and consistency status."""

    def __init__(
        self,
        client: IndexClient,
        records: RecordSource,
        page_size: int = 1000,
        cache: AsyncRedisClient | None = None,
    ) -> None:
        self._reconciler = BulkReconciler(client, records, page_size=page_size)
        self._tracker = ConsistencyTracker(client, records)
        self._cache = cache

    @cache_invalidate(lambda: CacheKeys.autocomplete_prefix())
    async def reconcile(self) -> SyncResultResponse:
        """
        Run a full reconcile.

        Per-document rejections are reported in ``errors``; connectivity
        failures propagate.
        """
        logger.info("Manual reconcile initiated")
        result = await self._reconciler.reconcile()
        now = datetime.now(timezone.utc)

        if result.documents_processed == 0:
            return SyncResultResponse(
                success=True,
                message="No records found in the record store to sync",
                documents_processed=0,
                timestamp=now,
            )

        errors = None
        message = "Bulk sync completed successfully"
        if result.errors:
            message = f"Bulk sync completed with {len(result.errors)} rejected documents"
            errors = [
                BulkItemErrorResponse(
                    id=error.id,
                    status=error.status,
                    error_type=error.error_type,
                    reason=error.reason,
                )
                for error in result.errors
            ]

        return SyncResultResponse(
            success=result.success,
            message=message,
            documents_processed=result.documents_processed,
            documents_indexed=result.documents_indexed,
            orphans_removed=result.orphans_removed,
            errors=errors,
            timestamp=now,
        )

    async def status(self) -> SyncStatusResponse:
        """Compare record store and index counts."""
        status = await self._tracker.status()
        return SyncStatusResponse(
            record_count=status.record_count,
            index_count=status.index_count,
            synced=status.synced,
            difference=status.difference,
            index_name=status.index_name,
            table_name=status.table_name,
            timestamp=status.checked_at,
        )
