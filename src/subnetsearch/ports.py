"""
Interfaces between the sync and search components and their backing stores.

The index client and the record source are injected into every component
that needs them, so tests can substitute in-memory implementations.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from uuid import UUID

    from subnetsearch.core.models import SubnetRecord
    from subnetsearch.search.models import BulkWriteResult, IndexDocument, TranslatedQuery


@runtime_checkable
class IndexClient(Protocol):
    """Read and write access to the search index."""

    index_name: str

    async def setup_index(self) -> bool: ...

    async def health(self) -> bool: ...

    async def count(self) -> int:
        """Document count; zero when the index does not exist."""
        ...

    async def index_document(self, document: IndexDocument) -> None:
        """Write a document, overwriting any previous version."""
        ...

    async def delete_document(self, document_id: str) -> bool:
        """Remove a document; False when it was already absent."""
        ...

    async def bulk_index(self, documents: Sequence[IndexDocument], refresh: bool = True) -> BulkWriteResult: ...

    async def delete_documents(self, document_ids: Iterable[str], refresh: bool = True) -> int: ...

    async def get_document(self, document_id: str) -> dict[str, Any]: ...

    async def search(self, query: TranslatedQuery) -> Any: ...

    def iter_ids(self, page_size: int = 1000) -> AsyncIterator[str]: ...


@runtime_checkable
class RecordSource(Protocol):
    """Read access to the authoritative record store."""

    table_name: str

    async def count(self) -> int: ...

    def iter_batches(self, batch_size: int) -> AsyncIterator[list[SubnetRecord]]:
        """Yield every record, in pages of at most ``batch_size``."""
        ...

    async def get_record(self, record_id: UUID) -> SubnetRecord | None: ...

    def iter_ids(self, batch_size: int = 1000) -> AsyncIterator[UUID]: ...
