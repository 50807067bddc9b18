"""Plan execution against the storage port.

Requests are issued in a fixed order: one batch insert, then one update per
item in plan order, then one batch delete. There is no compensating rollback:
a failure after an earlier request succeeded is raised as
``PartialApplicationError`` and the applied writes stay applied.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from copysync.domain.model import NewCopyRecord

from .contracts import ExecutionReport
from .errors import PartialApplicationError, StoreError

if TYPE_CHECKING:
    from copysync.domain.model import Scope
    from copysync.domain.ports import CopyItemStore

    from .contracts import ReconciliationPlan

log = getLogger(__name__)


class ExecutePlan(Protocol):
    async def __call__(
        self,
        plan: ReconciliationPlan,
        *,
        scope: Scope,
        store: CopyItemStore,
    ) -> ExecutionReport: ...


async def execute_plan(
    plan: ReconciliationPlan,
    *,
    scope: Scope,
    store: CopyItemStore,
) -> ExecutionReport:
    """Apply ``plan`` sequentially and report what was written."""

    report = ExecutionReport(preserved=len(plan.to_preserve))
    try:
        if plan.to_create:
            records = [NewCopyRecord(scope=scope, fields=draft.fields()) for draft in plan.to_create]
            await store.insert_many(records)
            report.created = len(records)
            log.info("Created %s copy items", report.created)

        for instruction in plan.to_update:
            await store.update_one(instruction.record_id, instruction.draft.fields().as_patch())
            report.updated += 1
        if plan.to_update:
            log.info("Updated %s copy items", report.updated)

        if plan.to_delete:
            await store.delete_many(list(plan.to_delete))
            report.deleted = len(plan.to_delete)
            log.info("Deleted %s copy items", report.deleted)
    except StoreError as exc:
        if report.applied == 0:
            raise
        log.error("Storage failed after %s applied writes: %s", report.applied, exc)
        raise PartialApplicationError(exc, applied=report.applied) from exc

    return report
