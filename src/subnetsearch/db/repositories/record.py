"""Subnet record repository and record source."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from subnetsearch.core.exceptions import BackingStoreUnavailableError, DatabaseError
from subnetsearch.core.models import SubnetRecord
from subnetsearch.db.models.record import SubnetRecordModel

logger = logging.getLogger(__name__)


class SubnetRecordRepository:
    """Repository for subnet records with paging queries for reconciliation."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def count(self) -> int:
        """Total number of records."""
        stmt = select(func.count()).select_from(SubnetRecordModel)
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    async def list_page(self, *, after: UUID | None = None, limit: int = 1000) -> Sequence[SubnetRecordModel]:
        """List records ordered by id, starting after ``after`` (keyset pagination)."""
        stmt = select(SubnetRecordModel).order_by(SubnetRecordModel.id).limit(limit)
        if after is not None:
            stmt = stmt.where(SubnetRecordModel.id > after)
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def iter_batches(self, batch_size: int = 1000) -> AsyncIterator[list[SubnetRecord]]:
        """Yield every record as domain models, one page at a time."""
        after: UUID | None = None
        while True:
            rows = await self.list_page(after=after, limit=batch_size)
            if not rows:
                return
            yield [SubnetRecord.model_validate(row) for row in rows]
            if len(rows) < batch_size:
                return
            after = rows[-1].id

    async def get_record(self, record_id: UUID) -> SubnetRecord | None:
        """Get a single record as a domain model."""
        row = await self._session.get(SubnetRecordModel, record_id)
        return SubnetRecord.model_validate(row) if row is not None else None

    async def list_ids(self, *, after: UUID | None = None, limit: int = 1000) -> Sequence[UUID]:
        """List record ids ordered by id, starting after ``after``."""
        stmt = select(SubnetRecordModel.id).order_by(SubnetRecordModel.id).limit(limit)
        if after is not None:
            stmt = stmt.where(SubnetRecordModel.id > after)
        result = await self._session.execute(stmt)
        return result.scalars().all()


class SqlRecordSource:
    """
    Record source backed by PostgreSQL.

    Each call opens its own session so the source can be shared between the
    request path and the background change feed.
    """

    table_name = SubnetRecordModel.__tablename__

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def count(self) -> int:
        try:
            async with self._session_factory() as session:
                return await SubnetRecordRepository(session).count()
        except (SQLAlchemyError, OSError) as e:
            raise self._wrap(e, "count") from e

    async def get_record(self, record_id: UUID) -> SubnetRecord | None:
        try:
            async with self._session_factory() as session:
                return await SubnetRecordRepository(session).get_record(record_id)
        except (SQLAlchemyError, OSError) as e:
            raise self._wrap(e, "get_record") from e

    async def iter_batches(self, batch_size: int = 1000) -> AsyncIterator[list[SubnetRecord]]:
        try:
            async with self._session_factory() as session:
                async for batch in SubnetRecordRepository(session).iter_batches(batch_size):
                    yield batch
        except (SQLAlchemyError, OSError) as e:
            raise self._wrap(e, "iter_batches") from e

    async def iter_ids(self, batch_size: int = 1000) -> AsyncIterator[UUID]:
        after: UUID | None = None
        try:
            async with self._session_factory() as session:
                repo = SubnetRecordRepository(session)
                while True:
                    ids = await repo.list_ids(after=after, limit=batch_size)
                    for record_id in ids:
                        yield record_id
                    if len(ids) < batch_size:
                        return
                    after = ids[-1]
        except (SQLAlchemyError, OSError) as e:
            raise self._wrap(e, "iter_ids") from e

    @staticmethod
    def _wrap(e: Exception, operation: str) -> Exception:
        logger.error(f"Record store error during {operation}: {e}")
        if isinstance(e, (OperationalError, OSError)):
            return BackingStoreUnavailableError(f"Record store unavailable: {e}", store="postgres")
        return DatabaseError(f"Record store operation '{operation}' failed: {e}")
