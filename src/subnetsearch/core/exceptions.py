"""Custom exception hierarchy for subnetsearch."""

from typing import Any


class SubnetSearchError(Exception):
    """Base exception for all subnetsearch errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(SubnetSearchError):
    """A request parameter is malformed or out of range."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.field = field


class NotFoundError(SubnetSearchError):
    """Resource not found."""

    pass


class DocumentNotFoundError(NotFoundError):
    """No index document exists for the requested identifier."""

    def __init__(self, document_id: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"Document not found: {document_id}", details)
        self.document_id = document_id


class IndexNotFoundError(NotFoundError):
    """The search index has not been created yet."""

    def __init__(self, index_name: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            f"Search index '{index_name}' not found. Run a reconcile first to create it.",
            details,
        )
        self.index_name = index_name


class BackingStoreError(SubnetSearchError):
    """The record store or the index engine returned an unexpected fault."""

    retryable: bool = False


class BackingStoreUnavailableError(BackingStoreError):
    """A backing store could not be reached or did not answer in time."""

    retryable = True

    def __init__(
        self,
        message: str,
        store: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.store = store


class SearchError(BackingStoreError):
    """Index engine operation failed."""

    pass


class DatabaseError(BackingStoreError):
    """Record store operation failed."""

    pass


class CacheError(SubnetSearchError):
    """Cache operation failed."""

    pass
