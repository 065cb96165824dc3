"""Database layer."""

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin, create_engine, create_session_factory
from .models import CHANGE_CHANNEL, SubnetRecordModel
from .repositories import SqlRecordSource, SubnetRecordRepository

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "create_engine",
    "create_session_factory",
    # Models
    "CHANGE_CHANNEL",
    "SubnetRecordModel",
    # Repositories
    "SqlRecordSource",
    "SubnetRecordRepository",
]
