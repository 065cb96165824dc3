"""Consistency snapshot between the record store and the index."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from subnetsearch.ports import IndexClient, RecordSource


@dataclass(frozen=True)
class SyncStatus:
    """
    Record and document counts at one instant.

    ``synced`` only says the counts agree; identical counts can still hide
    a missing document offset by an orphan.
    """

    record_count: int
    index_count: int
    index_name: str
    table_name: str
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def synced(self) -> bool:
        return self.record_count == self.index_count

    @property
    def difference(self) -> int:
        return self.record_count - self.index_count


@dataclass(frozen=True)
class SyncDiff:
    """Identifier-level divergence between the two stores."""

    missing_in_index: frozenset[str]
    orphaned_in_index: frozenset[str]

    @property
    def consistent(self) -> bool:
        return not self.missing_in_index and not self.orphaned_in_index


class ConsistencyTracker:
    """Read-only comparison of the record store and the index."""

    def __init__(self, client: IndexClient, records: RecordSource) -> None:
        self._client = client
        self._records = records

    async def status(self) -> SyncStatus:
        """Count both stores concurrently; a missing index counts as zero."""
        record_count, index_count = await asyncio.gather(
            self._records.count(),
            self._client.count(),
        )
        return SyncStatus(
            record_count=record_count,
            index_count=index_count,
            index_name=self._client.index_name,
            table_name=self._records.table_name,
        )

    async def diff(self, page_size: int = 1000) -> SyncDiff:
        """Compare identifier sets. Reads both stores in full."""
        record_ids = {str(record_id) async for record_id in self._records.iter_ids(page_size)}
        index_ids = {doc_id async for doc_id in self._client.iter_ids(page_size)}
        return SyncDiff(
            missing_in_index=frozenset(record_ids - index_ids),
            orphaned_in_index=frozenset(index_ids - record_ids),
        )
