"""Ports for persisting copy items."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from copysync.domain.model import CopyPatch, CopyRecord, NewCopyRecord, Scope


@runtime_checkable
class CopyItemStore(Protocol):
    """Persistence contract for the copy collection of a scope.

    Every method is a suspension point. Implementations raise
    ``copysync.domain.reconciliation.errors.StoreError`` on transport,
    permission or database failures.
    """

    async def fetch_all(self, scope: Scope) -> list[CopyRecord]: ...

    async def insert_many(self, records: Sequence[NewCopyRecord]) -> list[CopyRecord]: ...

    async def update_one(self, record_id: str, patch: CopyPatch) -> None: ...

    async def delete_many(self, record_ids: Sequence[str]) -> None: ...
