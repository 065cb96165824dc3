"""Subnet record database model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from subnetsearch.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

CHANGE_CHANNEL = "subnet_record_changes"


class SubnetRecordModel(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Authoritative row for one subnet allocation.

    Every insert, update and delete on this table is published on
    ``CHANGE_CHANNEL`` by a trigger installed in the initial migration.
    """

    __tablename__ = "subnet_records"

    cluster_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    cidr: Mapped[str | None] = mapped_column(String(64), nullable=True)
    cidr_ipv4: Mapped[str | None] = mapped_column(String(64), nullable=True)
    ipv4: Mapped[str | None] = mapped_column(String(45), nullable=True)
    ip: Mapped[str | None] = mapped_column(String(45), nullable=True)
    site: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(String(4000), nullable=True)
    timestamp: Mapped[datetime | None] = mapped_column(nullable=True)
    username: Mapped[str | None] = mapped_column(String(255), nullable=True)

    __table_args__ = (
        Index("ix_subnet_records_cluster_id", "cluster_id"),
        Index("ix_subnet_records_site", "site"),
    )

    def __repr__(self) -> str:
        return f"<SubnetRecord(id={self.id}, cluster_id={self.cluster_id!r}, site={self.site!r})>"
