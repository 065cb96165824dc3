"""Full reconciliation of the index against the record store."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from subnetsearch.search.models import BulkItemError, IndexDocument
from subnetsearch.search.projector import project_many

if TYPE_CHECKING:
    from subnetsearch.ports import IndexClient, RecordSource

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """Summary of one reconcile run."""

    documents_processed: int = 0
    documents_indexed: int = 0
    errors: list[BulkItemError] = field(default_factory=list)
    orphans_removed: int = 0

    @property
    def success(self) -> bool:
        return not self.errors


class BulkReconciler:
    """
    Rewrites every record into the index and prunes orphaned documents.

    Running it twice against an unchanged record store leaves the index in
    the same state. Per-document rejections are reported, not raised;
    connectivity failures propagate.
    """

    def __init__(
        self,
        client: IndexClient,
        records: RecordSource,
        page_size: int = 1000,
    ) -> None:
        """
        Initialize the reconciler.

        Args:
            client: Index client for writes
            records: Authoritative record source
            page_size: Records read from the store per page
        """
        self._client = client
        self._records = records
        self._page_size = page_size

    async def reconcile(self) -> ReconcileResult:
        """
        Project every record and write them in a single bulk request.

        Returns:
            Counts of processed and indexed documents, rejected documents
            and orphans removed
        """
        documents: list[IndexDocument] = []
        async for batch in self._records.iter_batches(self._page_size):
            documents.extend(project_many(batch))

        if not documents:
            logger.info("Record store is empty, nothing to reconcile")
            return ReconcileResult()

        logger.info(f"Reconciling {len(documents)} records into '{self._client.index_name}'")
        await self._client.setup_index()
        written = await self._client.bulk_index(documents, refresh=True)

        for error in written.errors:
            logger.warning(f"Document {error.id} rejected ({error.status} {error.error_type}): {error.reason}")

        removed = await self._prune_orphans({document.id for document in documents})
        if removed:
            logger.info(f"Removed {removed} orphaned documents")

        result = ReconcileResult(
            documents_processed=len(documents),
            documents_indexed=written.indexed,
            errors=written.errors,
            orphans_removed=removed,
        )
        logger.info(
            f"Reconcile complete: {result.documents_indexed}/{result.documents_processed} indexed, "
            f"{len(result.errors)} errors, {result.orphans_removed} orphans removed"
        )
        return result

    async def _prune_orphans(self, snapshot_ids: set[str]) -> int:
        """
        Delete index documents with no record in the store.

        Candidates absent from the snapshot are checked against a fresh read
        of the record ids, so records inserted during the bulk write survive.
        """
        candidates = [
            doc_id async for doc_id in self._client.iter_ids(self._page_size) if doc_id not in snapshot_ids
        ]
        if not candidates:
            return 0

        current_ids = {str(record_id) async for record_id in self._records.iter_ids(self._page_size)}
        orphans = [doc_id for doc_id in candidates if doc_id not in current_ids]
        if len(orphans) < len(candidates):
            logger.info(f"Keeping {len(candidates) - len(orphans)} documents for records created during reconcile")
        if not orphans:
            return 0
        return await self._client.delete_documents(orphans, refresh=True)
