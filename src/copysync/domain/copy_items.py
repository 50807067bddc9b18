"""Application services for individual copy items.

These complement the reconciliation engine for callers that edit one item at a
time (status toggles, quick edits, single deletes).
"""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from copysync.domain.model import (
    CopyPatch,
    CopyStatus,
    NewCopyRecord,
    blank_to_none,
    normalize_labels,
)
from copysync.domain.reconciliation.errors import StoreError, ValidationError
from copysync.domain.reconciliation.snapshot import ensure_scope

if TYPE_CHECKING:
    from copysync.domain.model import CopyDraft, CopyRecord, CopyType, Scope
    from copysync.domain.ports import CopyItemStore

log = getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


async def list_copy_items(
    store: CopyItemStore,
    scope: Scope,
    *,
    category: CopyType | None = None,
    status: CopyStatus | None = None,
) -> list[CopyRecord]:
    """Return the stored items of ``scope``, newest first, optionally filtered."""

    ensure_scope(scope)
    records = await store.fetch_all(scope)
    if category is not None:
        records = [record for record in records if record.category == category]
    if status is not None:
        records = [record for record in records if record.status == status]
    return sorted(records, key=_created_at, reverse=True)


async def get_copy_item(store: CopyItemStore, scope: Scope, record_id: str) -> CopyRecord | None:
    ensure_scope(scope)
    for record in await store.fetch_all(scope):
        if record.id == record_id:
            return record
    return None


async def create_copy_item(store: CopyItemStore, scope: Scope, draft: CopyDraft) -> CopyRecord:
    """Store ``draft`` as a new item; empty drafts are rejected."""

    ensure_scope(scope)
    if draft.is_empty:
        raise ValidationError("Copy item needs a title or a body")
    created = await store.insert_many([NewCopyRecord(scope=scope, fields=draft.fields())])
    if len(created) != 1:
        raise StoreError(f"Expected one created copy item, got {len(created)}")
    log.info("Created copy item %s for %s", created[0].id, scope)
    return created[0]


async def update_copy_item(store: CopyItemStore, record_id: str, patch: CopyPatch) -> None:
    """Apply a partial update, normalising optional text and labels."""

    normalized = _normalize_patch(patch)
    if not normalized:
        log.debug("Skipping empty update for %s", record_id)
        return
    await store.update_one(record_id, normalized)


async def set_copy_item_status(store: CopyItemStore, record_id: str, status: CopyStatus) -> None:
    await store.update_one(record_id, CopyPatch(status=CopyStatus(status)))


async def delete_copy_item(store: CopyItemStore, record_id: str) -> None:
    await store.delete_many([record_id])
    log.info("Deleted copy item %s", record_id)


def _normalize_patch(patch: CopyPatch) -> CopyPatch:
    normalized = CopyPatch(**patch)
    for key in ("audience", "use_case", "notes"):
        if key in normalized:
            normalized[key] = blank_to_none(normalized[key])
    if "labels" in normalized:
        normalized["labels"] = normalize_labels(normalized["labels"])
    return normalized


def _created_at(record: CopyRecord) -> datetime:
    created = record.created_at
    if created is None:
        return _EPOCH
    return created if created.tzinfo else created.replace(tzinfo=UTC)
