"""Domain models for subnet records."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SubnetRecord(BaseModel):
    """
    A subnet record as owned by the record store.

    Built either from an ORM row (``from_attributes``) or from a change
    notification payload, so both synchronization paths see the same shape.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True, extra="ignore")

    id: UUID = Field(..., description="Record store identifier")
    cluster_id: str | None = Field(default=None, description="Cluster identifier")
    cidr: str | None = Field(default=None, description="CIDR block")
    cidr_ipv4: str | None = Field(default=None, description="IPv4 CIDR block")
    ipv4: str | None = Field(default=None, description="IPv4 address")
    ip: str | None = Field(default=None, description="IP address")
    site: str | None = Field(default=None, description="Site name")
    description: str | None = Field(default=None, description="Free-text description")
    timestamp: datetime | None = Field(default=None, description="Record timestamp")
    username: str | None = Field(default=None, description="Owning user")
