"""Projection of record store rows into index documents."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from subnetsearch.core.models import SubnetRecord
from subnetsearch.search.models import IndexDocument
from subnetsearch.search.schema import INDEX_FIELDS, SUGGEST_FIELDS


def project(record: SubnetRecord) -> IndexDocument:
    """
    Project a record into its index document.

    The record identifier becomes the index identifier and is left out of the
    body. Null attributes are omitted. A ``suggest`` field is attached when at
    least one suggestion input is non-empty.

    Pure and deterministic: the per-event propagator and the bulk reconciler
    must produce identical bodies for the same record.
    """
    body: dict[str, Any] = {}
    for attribute, index_field in INDEX_FIELDS.items():
        value = getattr(record, attribute)
        if value is None:
            continue
        body[index_field] = _format_timestamp(value) if isinstance(value, datetime) else value

    inputs = suggest_inputs(body)
    if inputs:
        body["suggest"] = {"input": inputs}

    return IndexDocument(id=str(record.id), body=body)


def project_many(records: Iterable[SubnetRecord]) -> list[IndexDocument]:
    """Project several records, preserving order."""
    return [project(record) for record in records]


def suggest_inputs(body: dict[str, Any]) -> list[str]:
    """Collect non-empty suggestion inputs in field-priority order, without duplicates."""
    inputs: list[str] = []
    for index_field in SUGGEST_FIELDS:
        value = body.get(index_field)
        if not isinstance(value, str):
            continue
        value = value.strip()
        if value and value not in inputs:
            inputs.append(value)
    return inputs


def _format_timestamp(value: datetime) -> str:
    # Naive timestamps are taken as UTC so both sync paths serialize the same instant identically
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()
