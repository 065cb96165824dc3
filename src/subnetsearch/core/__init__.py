"""Core types, models, and exceptions."""

from .exceptions import (
    BackingStoreError,
    BackingStoreUnavailableError,
    CacheError,
    DatabaseError,
    DocumentNotFoundError,
    IndexNotFoundError,
    NotFoundError,
    SearchError,
    SubnetSearchError,
    ValidationError,
)
from .models import SubnetRecord
from .types import (
    ChangeOperation,
    FieldKind,
    Fuzziness,
    MatchTier,
    SortOrder,
    TotalRelation,
)

__all__ = [
    # Types
    "ChangeOperation",
    "FieldKind",
    "Fuzziness",
    "MatchTier",
    "SortOrder",
    "TotalRelation",
    # Models
    "SubnetRecord",
    # Exceptions
    "BackingStoreError",
    "BackingStoreUnavailableError",
    "CacheError",
    "DatabaseError",
    "DocumentNotFoundError",
    "IndexNotFoundError",
    "NotFoundError",
    "SearchError",
    "SubnetSearchError",
    "ValidationError",
]
