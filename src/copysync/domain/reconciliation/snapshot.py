"""Snapshot loading: the first, read-only stage of a reconciliation run."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from .errors import InvalidScopeError

if TYPE_CHECKING:
    from copysync.domain.model import Scope
    from copysync.domain.ports import CopyItemStore

    from .contracts import Snapshot

log = getLogger(__name__)


class LoadSnapshot(Protocol):
    """Fetch every stored record owned by ``scope``."""

    async def __call__(self, store: CopyItemStore, scope: Scope) -> Snapshot: ...


def ensure_scope(scope: Scope) -> None:
    if not scope.is_complete:
        raise InvalidScopeError


async def load_snapshot(store: CopyItemStore, scope: Scope) -> Snapshot:
    """Return all records of ``scope`` in storage order.

    ``StoreError`` from the store propagates unchanged and aborts the run
    before any resolution work.
    """

    ensure_scope(scope)
    records = await store.fetch_all(scope)
    log.debug("Loaded %s stored copy items for %s", len(records), scope)
    return tuple(records)
