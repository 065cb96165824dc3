"""Keeping the search index in step with the record store."""

from subnetsearch.sync.events import (
    ChangeEvent,
    DeleteEvent,
    InsertEvent,
    UpdateEvent,
    parse_change_payload,
)
from subnetsearch.sync.propagator import ChangePropagator, PropagationOutcome, PropagationStats
from subnetsearch.sync.reconciler import BulkReconciler, ReconcileResult
from subnetsearch.sync.tracker import ConsistencyTracker, SyncDiff, SyncStatus

__all__ = [
    # Events
    "ChangeEvent",
    "DeleteEvent",
    "InsertEvent",
    "UpdateEvent",
    "parse_change_payload",
    # Propagation
    "ChangePropagator",
    "PropagationOutcome",
    "PropagationStats",
    # Reconciliation
    "BulkReconciler",
    "ReconcileResult",
    # Tracking
    "ConsistencyTracker",
    "SyncDiff",
    "SyncStatus",
]
