"""Reconciliation of a user-edited copy list against the stored collection.

Layered flow per run:
1) load the stored snapshot for the scope
2) resolve each draft to a stored record (id first, title key second)
3) classify pairs into create/update/preserve/delete and guard duplicates
4) execute the plan against the storage port
"""

from __future__ import annotations

from .contracts import (
    ExecutionReport,
    IdentityKey,
    MatchKind,
    ReconciliationPlan,
    ResolvedPair,
    Snapshot,
    UpdateInstruction,
)
from .engine import (
    PARTIAL_FAILURE_NOTICE,
    PlanHook,
    ReconciliationEngine,
    ReconciliationOutcome,
    SyncResult,
    sync_copy_items,
)
from .errors import (
    DuplicateTitleError,
    InvalidScopeError,
    PartialApplicationError,
    ReconciliationError,
    StoreError,
    ValidationError,
)
from .execute import execute_plan
from .resolve import identity_key, resolve_drafts
from .snapshot import ensure_scope, load_snapshot

__all__ = [
    "PARTIAL_FAILURE_NOTICE",
    "DuplicateTitleError",
    "ExecutionReport",
    "IdentityKey",
    "InvalidScopeError",
    "MatchKind",
    "PartialApplicationError",
    "PlanHook",
    "ReconciliationEngine",
    "ReconciliationError",
    "ReconciliationOutcome",
    "ReconciliationPlan",
    "ResolvedPair",
    "Snapshot",
    "StoreError",
    "SyncResult",
    "UpdateInstruction",
    "ValidationError",
    "ensure_scope",
    "execute_plan",
    "identity_key",
    "load_snapshot",
    "resolve_drafts",
    "sync_copy_items",
]
