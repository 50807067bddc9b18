"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from logging import getLogger
from typing import TYPE_CHECKING

from copysync.adapters.postgrest import PostgrestCopyItemStore
from copysync.adapters.sqlalchemy import SqlAlchemyCopyItemStore, is_started, shutdown, startup
from copysync.config import StorageBackend, get_sync_config
from copysync.domain.copy_items import (
    delete_copy_item,
    list_copy_items,
    set_copy_item_status,
)
from copysync.domain.reconciliation import sync_copy_items

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

    from copysync.config import SyncConfig
    from copysync.domain.model import CopyDraft, CopyRecord, CopyStatus, CopyType, Scope
    from copysync.domain.ports import CopyItemStore
    from copysync.domain.reconciliation import PlanHook, SyncResult

log = getLogger(__name__)


@asynccontextmanager
async def open_store(
    config: SyncConfig | None = None,
    *,
    store: CopyItemStore | None = None,
) -> AsyncIterator[CopyItemStore]:
    """Yield the configured store, starting and disposing the SQL engine as needed."""

    if store is not None:
        yield store
        return

    effective = config or get_sync_config()
    if effective.backend is StorageBackend.POSTGREST:
        yield PostgrestCopyItemStore()
        return

    started_here = not is_started()
    if started_here:
        await startup()
    try:
        yield SqlAlchemyCopyItemStore()
    finally:
        if started_here:
            await shutdown()


def run_copy_sync(
    scope: Scope,
    drafts: Sequence[CopyDraft],
    *,
    scope_is_authoritative: bool,
    dry_run: bool = False,
    title_fallback: bool | None = None,
    store: CopyItemStore | None = None,
    on_plan: PlanHook | None = None,
) -> SyncResult:
    """Synchronise ``drafts`` for ``scope`` using the configured backend."""

    config = get_sync_config()
    fallback = config.title_fallback if title_fallback is None else title_fallback
    log.info(
        "Running copy sync: backend=%s, title_fallback=%s",
        "custom" if store is not None else config.backend,
        fallback,
    )

    async def run() -> SyncResult:
        async with open_store(config, store=store) as resolved:
            return await sync_copy_items(
                resolved,
                scope,
                drafts,
                scope_is_authoritative=scope_is_authoritative,
                title_fallback=fallback,
                dry_run=dry_run,
                on_plan=on_plan,
            )

    return asyncio.run(run())


def list_items(
    scope: Scope,
    *,
    category: CopyType | None = None,
    status: CopyStatus | None = None,
    store: CopyItemStore | None = None,
) -> list[CopyRecord]:
    async def run() -> list[CopyRecord]:
        async with open_store(store=store) as resolved:
            return await list_copy_items(resolved, scope, category=category, status=status)

    return asyncio.run(run())


def set_item_status(
    record_id: str,
    status: CopyStatus,
    *,
    store: CopyItemStore | None = None,
) -> None:
    async def run() -> None:
        async with open_store(store=store) as resolved:
            await set_copy_item_status(resolved, record_id, status)

    asyncio.run(run())


def delete_item(record_id: str, *, store: CopyItemStore | None = None) -> None:
    async def run() -> None:
        async with open_store(store=store) as resolved:
            await delete_copy_item(resolved, record_id)

    asyncio.run(run())
