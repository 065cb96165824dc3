"""PostgreSQL LISTEN/NOTIFY change feed."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Any

import asyncpg

from subnetsearch.core.exceptions import BackingStoreUnavailableError, ValidationError
from subnetsearch.db.models.record import CHANGE_CHANNEL
from subnetsearch.sync.events import ChangeEvent, parse_change_payload

logger = logging.getLogger(__name__)


def asyncpg_dsn(database_url: str) -> str:
    """Strip the SQLAlchemy driver suffix so asyncpg accepts the URL."""
    return database_url.replace("postgresql+asyncpg://", "postgresql://", 1)


class PostgresChangeFeed:
    """
    Async iterator over change events published by the ``subnet_records``
    trigger.

    Notifications arrive in commit order on a dedicated connection and are
    queued until consumed. Payloads that cannot be decoded are logged and
    dropped.
    """

    def __init__(
        self,
        database_url: str,
        channel: str = CHANGE_CHANNEL,
        max_queue: int = 10000,
    ) -> None:
        self._dsn = asyncpg_dsn(database_url)
        self.channel = channel
        self._queue: asyncio.Queue[ChangeEvent | None] = asyncio.Queue(maxsize=max_queue)
        self._connection: asyncpg.Connection | None = None
        self._closed = False

    async def start(self) -> None:
        """Open the listening connection."""
        if self._connection is not None:
            return
        try:
            self._connection = await asyncpg.connect(self._dsn)
        except (OSError, asyncpg.PostgresError) as e:
            raise BackingStoreUnavailableError(
                f"Could not open change feed connection: {e}",
                store="postgres",
            ) from e
        self._closed = False
        await self._connection.add_listener(self.channel, self._on_notify)
        logger.info(f"Listening for record changes on channel '{self.channel}'")

    async def stop(self) -> None:
        """Stop listening and end iteration once queued events are drained."""
        if self._connection is not None:
            try:
                await self._connection.remove_listener(self.channel, self._on_notify)
            finally:
                await self._connection.close()
                self._connection = None
        self._closed = True
        try:
            self._queue.put_nowait(None)
        except asyncio.QueueFull:
            # Iteration still ends once the queue drains
            pass

    def _on_notify(self, connection: Any, pid: int, channel: str, payload: str) -> None:
        try:
            event = parse_change_payload(payload)
        except ValidationError as e:
            logger.warning(f"Dropping undecodable change notification: {e.message}")
            return
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.error(f"Change feed queue full, dropping event for {event.record_id}")

    def publish(self, event: ChangeEvent) -> None:
        """Queue an event directly, bypassing the database."""
        self._queue.put_nowait(event)

    async def __aiter__(self) -> AsyncIterator[ChangeEvent]:
        while not (self._closed and self._queue.empty()):
            event = await self._queue.get()
            if event is None:
                return
            yield event

    async def __aenter__(self) -> PostgresChangeFeed:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()
