"""Per-event propagation of record store changes into the index."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from subnetsearch.core.exceptions import SubnetSearchError
from subnetsearch.core.types import ChangeOperation
from subnetsearch.search.projector import project
from subnetsearch.sync.events import ChangeEvent, DeleteEvent, InsertEvent, UpdateEvent, event_operation

if TYPE_CHECKING:
    from subnetsearch.ports import IndexClient, RecordSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PropagationOutcome:
    """Result of applying one change event."""

    record_id: UUID
    operation: ChangeOperation
    success: bool
    error: str | None = None


@dataclass
class PropagationStats:
    """Running tally over a stream of events."""

    applied: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.applied + self.failed


class ChangePropagator:
    """
    Applies record store change events to the index, one at a time.

    A failed event is logged and reported in its outcome; it never stops the
    stream. There is no retry: the bulk reconciler repairs any divergence.
    """

    def __init__(self, client: IndexClient, records: RecordSource | None = None) -> None:
        """
        Initialize the propagator.

        Args:
            client: Index client for writes
            records: Record source used to resolve partial updates
        """
        self._client = client
        self._records = records

    async def apply(self, event: ChangeEvent) -> PropagationOutcome:
        """
        Apply a single change event.

        Returns:
            Outcome describing whether the index write succeeded
        """
        operation = event_operation(event)
        try:
            if isinstance(event, InsertEvent):
                await self._client.index_document(project(event.record))
            elif isinstance(event, UpdateEvent):
                await self._apply_update(event)
            elif isinstance(event, DeleteEvent):
                removed = await self._client.delete_document(str(event.record_id))
                if not removed:
                    logger.debug(f"Delete for {event.record_id}: document was not in the index")
        except SubnetSearchError as e:
            logger.error(f"Failed to propagate {operation} for {event.record_id}: {e.message}")
            return PropagationOutcome(event.record_id, operation, success=False, error=e.message)
        except Exception as e:
            logger.exception(f"Unexpected error propagating {operation} for {event.record_id}")
            return PropagationOutcome(event.record_id, operation, success=False, error=str(e))

        logger.debug(f"Propagated {operation} for {event.record_id}")
        return PropagationOutcome(event.record_id, operation, success=True)

    async def _apply_update(self, event: UpdateEvent) -> None:
        record = event.record
        if record is None:
            if self._records is None:
                raise SubnetSearchError(
                    f"Partial update for {event.record_id} cannot be resolved without a record source"
                )
            record = await self._records.get_record(event.record_id)
            if record is None:
                logger.info(f"Record {event.record_id} no longer exists, removing from index")
                await self._client.delete_document(str(event.record_id))
                return
        await self._client.index_document(project(record))

    async def run(self, events: AsyncIterable[ChangeEvent]) -> PropagationStats:
        """
        Apply events strictly in delivery order until the stream ends.

        Returns:
            Count of applied and failed events
        """
        stats = PropagationStats()
        async for event in events:
            outcome = await self.apply(event)
            if outcome.success:
                stats.applied += 1
            else:
                stats.failed += 1
        logger.info(f"Change stream ended: {stats.applied} applied, {stats.failed} failed")
        return stats
