"""subnetsearch - Search API over subnet records kept in sync with an Elasticsearch index."""

from subnetsearch.core.exceptions import (
    BackingStoreError,
    BackingStoreUnavailableError,
    NotFoundError,
    SubnetSearchError,
    ValidationError,
)
from subnetsearch.core.models import SubnetRecord

__version__ = "0.1.0"
__all__ = [
    # Models
    "SubnetRecord",
    # Exceptions
    "BackingStoreError",
    "BackingStoreUnavailableError",
    "NotFoundError",
    "SubnetSearchError",
    "ValidationError",
    # Version
    "__version__",
]
