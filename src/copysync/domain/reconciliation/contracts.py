"""Shared reconciliation contract components.

This module holds only the value types passed between stages:
- identity keys and resolved draft/record pairs
- the reconciliation plan and the executor's report
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from copysync.domain.model import CopyDraft, CopyRecord


type IdentityKey = tuple[str, str, str]
type Snapshot = tuple[CopyRecord, ...]


class MatchKind(StrEnum):
    """How the resolver paired a draft with a stored record."""

    ID = "id"
    TITLE = "title"
    NONE = "none"


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolvedPair:
    draft: CopyDraft
    matched: CopyRecord | None = None
    match_kind: MatchKind = MatchKind.NONE


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateInstruction:
    record_id: str
    draft: CopyDraft


@dataclass(slots=True)
class ReconciliationPlan:
    """Aggregate plan for one reconciliation run.

    The four lists are disjoint. ``to_update`` follows input draft order and
    ``to_delete`` follows snapshot order.
    """

    to_create: list[CopyDraft] = field(default_factory=list["CopyDraft"])
    to_update: list[UpdateInstruction] = field(default_factory=list[UpdateInstruction])
    to_preserve: list[str] = field(default_factory=list[str])
    to_delete: list[str] = field(default_factory=list[str])

    @property
    def is_noop(self) -> bool:
        """True when executing the plan would not issue any storage request."""

        return not (self.to_create or self.to_update or self.to_delete)

    @property
    def write_count(self) -> int:
        return len(self.to_create) + len(self.to_update) + len(self.to_delete)

    def summary(self) -> str:
        return (
            f"create={len(self.to_create)}, update={len(self.to_update)}, "
            f"preserve={len(self.to_preserve)}, delete={len(self.to_delete)}"
        )


@dataclass(slots=True)
class ExecutionReport:
    """Summary of storage writes performed by the executor."""

    created: int = 0
    updated: int = 0
    preserved: int = 0
    deleted: int = 0

    @property
    def applied(self) -> int:
        return self.created + self.updated + self.deleted
