"""Record store change events."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from subnetsearch.core.exceptions import ValidationError
from subnetsearch.core.models import SubnetRecord
from subnetsearch.core.types import ChangeOperation


@dataclass(frozen=True)
class InsertEvent:
    """A record was created."""

    record: SubnetRecord

    @property
    def record_id(self) -> UUID:
        return self.record.id


@dataclass(frozen=True)
class UpdateEvent:
    """A record changed; ``record`` is None when the row was not delivered."""

    record_id: UUID
    record: SubnetRecord | None = None


@dataclass(frozen=True)
class DeleteEvent:
    """A record was removed."""

    record_id: UUID


ChangeEvent = InsertEvent | UpdateEvent | DeleteEvent


def event_operation(event: ChangeEvent) -> ChangeOperation:
    if isinstance(event, InsertEvent):
        return ChangeOperation.INSERT
    if isinstance(event, UpdateEvent):
        return ChangeOperation.UPDATE
    return ChangeOperation.DELETE


def parse_change_payload(payload: str | bytes | dict[str, Any]) -> ChangeEvent:
    """
    Decode a change notification into an event.

    The payload is ``{"op": "insert|update|delete", "id": "...", "record": {...}}``
    where ``record`` holds the row's columns. It is absent for deletes and for
    rows too large to fit in a notification; an insert without a record is
    returned as an ``UpdateEvent`` so the row is re-read by id.

    Raises:
        ValidationError: If the payload cannot be decoded
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Change payload is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise ValidationError("Change payload must be a JSON object")

    try:
        operation = ChangeOperation(str(payload.get("op", "")).lower())
    except ValueError:
        raise ValidationError(f"Unknown change operation: {payload.get('op')!r}", field="op") from None

    raw_record = payload.get("record")
    raw_id = payload.get("id") or (raw_record or {}).get("id")
    try:
        record_id = UUID(str(raw_id))
    except ValueError:
        raise ValidationError(f"Invalid record id in change payload: {raw_id!r}", field="id") from None

    record = None
    if raw_record:
        try:
            record = SubnetRecord.model_validate({**raw_record, "id": record_id})
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid record in change payload: {e}", field="record") from e

    if operation is ChangeOperation.INSERT and record is not None:
        return InsertEvent(record=record)
    if operation is not ChangeOperation.DELETE:
        return UpdateEvent(record_id=record_id, record=record)
    return DeleteEvent(record_id=record_id)
