"""Database models."""

from .record import CHANGE_CHANNEL, SubnetRecordModel

__all__ = [
    "CHANGE_CHANNEL",
    "SubnetRecordModel",
]
