"""Orchestrator for the reconciliation subsystem.

The engine composes the four stage interfaces and runs them as one sequential
pipeline per call: load snapshot, resolve identities, classify, execute.
Every storage request is awaited before the next stage starts. The engine
takes no lock: two runs against one scope may interleave at the storage layer
and the last write wins per record.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from .classify import classify
from .contracts import ExecutionReport
from .errors import PartialApplicationError, StoreError, ValidationError
from .execute import execute_plan
from .resolve import resolve_drafts
from .snapshot import load_snapshot

if TYPE_CHECKING:
    from collections.abc import Sequence

    from copysync.domain.model import CopyDraft, Scope
    from copysync.domain.ports import CopyItemStore

    from .classify import ClassifyPairs
    from .contracts import ReconciliationPlan
    from .execute import ExecutePlan
    from .resolve import ResolveDrafts
    from .snapshot import LoadSnapshot

log = getLogger(__name__)

PARTIAL_FAILURE_NOTICE = "some changes may have been saved"

type PlanHook = Callable[[Scope, ReconciliationPlan], None]


@dataclass(frozen=True, slots=True)
class ReconciliationOutcome:
    plan: ReconciliationPlan
    report: ExecutionReport
    executed: bool = True


@dataclass(slots=True, kw_only=True)
class SyncResult:
    """Caller-facing result of ``ReconciliationEngine.sync``."""

    success: bool
    error: str | None = None
    plan: ReconciliationPlan | None = None
    report: ExecutionReport | None = None


@dataclass(slots=True)
class ReconciliationEngine:
    """Run full reconciliation of a draft list against one scope."""

    store: CopyItemStore
    title_fallback: bool = True
    on_plan: PlanHook | None = None
    loader: LoadSnapshot = load_snapshot
    resolver: ResolveDrafts = resolve_drafts
    classifier: ClassifyPairs = classify
    executor: ExecutePlan = execute_plan

    async def reconcile(
        self,
        scope: Scope,
        drafts: Sequence[CopyDraft],
        *,
        scope_is_authoritative: bool,
        dry_run: bool = False,
    ) -> ReconciliationOutcome:
        """Run all stages, raising ``ValidationError`` or ``StoreError`` on failure."""

        snapshot = await self.loader(self.store, scope)
        pairs = self.resolver(drafts, snapshot, scope=scope, title_fallback=self.title_fallback)
        plan = self.classifier(
            pairs,
            snapshot,
            scope=scope,
            scope_is_authoritative=scope_is_authoritative,
        )
        if self.on_plan is not None:
            self.on_plan(scope, plan)

        if dry_run:
            return ReconciliationOutcome(
                plan=plan,
                report=ExecutionReport(preserved=len(plan.to_preserve)),
                executed=False,
            )
        report = await self.executor(plan, scope=scope, store=self.store)
        return ReconciliationOutcome(plan=plan, report=report)

    async def sync(
        self,
        scope: Scope,
        drafts: Sequence[CopyDraft],
        *,
        scope_is_authoritative: bool,
        dry_run: bool = False,
    ) -> SyncResult:
        """Reconcile and convert the first failure into a ``SyncResult``.

        ``scope_is_authoritative`` has no default: callers must state whether
        ``drafts`` is the complete state of ``scope`` (records missing from it
        are deleted) or an upsert-only batch.
        """

        log.info(
            "Starting copy sync for %s: drafts=%s, authoritative=%s, dry_run=%s",
            scope,
            len(drafts),
            scope_is_authoritative,
            dry_run,
        )
        try:
            outcome = await self.reconcile(
                scope,
                drafts,
                scope_is_authoritative=scope_is_authoritative,
                dry_run=dry_run,
            )
        except ValidationError as exc:
            log.warning("Copy sync rejected for %s: %s", scope, exc)
            return SyncResult(success=False, error=str(exc))
        except PartialApplicationError as exc:
            log.error("Copy sync partially applied for %s: %s", scope, exc)
            return SyncResult(success=False, error=f"{exc} ({PARTIAL_FAILURE_NOTICE})")
        except StoreError as exc:
            log.error("Copy sync failed for %s: %s", scope, exc)
            return SyncResult(success=False, error=str(exc))

        log.info(
            "Finished copy sync for %s: created=%s, updated=%s, preserved=%s, deleted=%s",
            scope,
            outcome.report.created,
            outcome.report.updated,
            outcome.report.preserved,
            outcome.report.deleted,
        )
        return SyncResult(success=True, plan=outcome.plan, report=outcome.report)


async def sync_copy_items(
    store: CopyItemStore,
    scope: Scope,
    drafts: Sequence[CopyDraft],
    *,
    scope_is_authoritative: bool,
    title_fallback: bool = True,
    dry_run: bool = False,
    on_plan: PlanHook | None = None,
) -> SyncResult:
    """Synchronise ``drafts`` into ``store`` for ``scope``."""

    engine = ReconciliationEngine(store=store, title_fallback=title_fallback, on_plan=on_plan)
    return await engine.sync(
        scope,
        drafts,
        scope_is_authoritative=scope_is_authoritative,
        dry_run=dry_run,
    )
