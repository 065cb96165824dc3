"""Repository implementations."""

from .record import SqlRecordSource, SubnetRecordRepository

__all__ = ["SqlRecordSource", "SubnetRecordRepository"]
