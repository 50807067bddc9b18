from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from copysync.domain.model import CopyDraft, Scope
from copysync.domain.reconciliation import (
    PARTIAL_FAILURE_NOTICE,
    ExecutionReport,
    ReconciliationEngine,
    ReconciliationPlan,
    sync_copy_items,
)
from tests.support.copy_items import SCOPE, FakeCopyItemStore, make_record

if TYPE_CHECKING:
    from collections.abc import Sequence

    from copysync.domain.ports import CopyItemStore
    from copysync.domain.reconciliation import ResolvedPair, Snapshot, SyncResult


def _sync(
    store: FakeCopyItemStore,
    drafts: Sequence[CopyDraft],
    *,
    authoritative: bool = True,
    scope: Scope = SCOPE,
    **kwargs: object,
) -> SyncResult:
    return asyncio.run(
        sync_copy_items(
            store,
            scope,
            drafts,
            scope_is_authoritative=authoritative,
            **kwargs,  # type: ignore[arg-type]
        )
    )


def test_sync_is_idempotent_for_its_own_output() -> None:
    store = FakeCopyItemStore()
    drafts = [CopyDraft(title="Launch Tweet", body="We are live"), CopyDraft(title="Teaser")]

    first = _sync(store, drafts)
    reloaded = [CopyDraft.from_record(record) for record in store.records.values()]
    store.calls.clear()
    second = _sync(store, reloaded)

    assert first.success
    assert second.success
    assert store.write_calls == []
    assert second.plan is not None
    assert second.plan.is_noop


def test_sync_resubmitting_unchanged_drafts_without_ids_writes_nothing() -> None:
    store = FakeCopyItemStore()
    drafts = [CopyDraft(title="Launch Tweet", body="We are live"), CopyDraft(title="Teaser")]

    _sync(store, drafts)
    stored_ids = set(store.records)
    store.calls.clear()
    second = _sync(store, drafts)

    assert second.success
    assert store.write_calls == []
    assert set(store.records) == stored_ids


def test_sync_body_only_draft_twice_keeps_its_record() -> None:
    store = FakeCopyItemStore()
    drafts = [CopyDraft(title="", body="Body only copy")]

    _sync(store, drafts)
    (record_id,) = store.records
    store.calls.clear()
    second = _sync(store, drafts)

    assert second.success
    assert store.write_calls == []
    assert list(store.records) == [record_id]
    assert second.plan is not None
    assert second.plan.to_preserve == [record_id]


def test_sync_edited_body_only_draft_updates_in_place() -> None:
    store = FakeCopyItemStore()
    _sync(store, [CopyDraft(body="v1")])
    (record_id,) = store.records
    store.calls.clear()

    result = _sync(store, [CopyDraft(body="v2")])

    assert result.success
    assert store.call_names == ["fetch_all", "update_one"]
    assert store.records[record_id].body == "v2"


def test_sync_resubmitting_without_ids_updates_by_title() -> None:
    store = FakeCopyItemStore()
    _sync(store, [CopyDraft(title="Launch Tweet", body="v1")])
    store.calls.clear()

    result = _sync(store, [CopyDraft(title="Launch Tweet", body="v2")])

    assert result.success
    assert store.call_names == ["fetch_all", "update_one"]
    assert len(store.records) == 1
    (record,) = store.records.values()
    assert record.body == "v2"


def test_sync_rename_keeps_the_record() -> None:
    store = FakeCopyItemStore([make_record("a", "Old", "body")])

    result = _sync(store, [CopyDraft(id="a", title="New", body="body")])

    assert result.success
    assert store.call_names == ["fetch_all", "update_one"]
    assert store.records["a"].title == "New"


def test_sync_creates_new_item() -> None:
    store = FakeCopyItemStore()

    result = _sync(store, [CopyDraft(title="Fresh", body="copy")])

    assert result.success
    assert result.report == ExecutionReport(created=1)
    (record,) = store.records.values()
    assert record.scope == SCOPE


def test_sync_never_writes_empty_drafts() -> None:
    store = FakeCopyItemStore()

    result = _sync(store, [CopyDraft(title="", body="")])

    assert result.success
    assert store.call_names == ["fetch_all"]


def test_sync_deletes_items_missing_from_authoritative_list() -> None:
    store = FakeCopyItemStore([make_record("a", "A"), make_record("b", "B")])

    result = _sync(store, [CopyDraft(id="a", title="A")])

    assert result.success
    assert ("delete_many", ["b"]) in store.calls
    assert set(store.records) == {"a"}


def test_sync_duplicate_titles_fail_without_writes() -> None:
    store = FakeCopyItemStore()

    result = _sync(store, [CopyDraft(title="Launch Tweet"), CopyDraft(title="Launch Tweet")])

    assert not result.success
    assert result.error == 'Duplicate title: "Launch Tweet"'
    assert store.write_calls == []


def test_sync_preserves_record_when_matched_draft_is_cleared() -> None:
    store = FakeCopyItemStore([make_record("a", "Keep", "content")])

    result = _sync(store, [CopyDraft(id="a", title="", body="")])

    assert result.success
    assert store.write_calls == []
    assert store.records["a"].title == "Keep"
    assert store.records["a"].body == "content"


def test_sync_reports_partial_application() -> None:
    store = FakeCopyItemStore(
        [make_record("a", "A")], fail_on="update_one", failure_message="timeout"
    )

    result = _sync(
        store,
        [CopyDraft(title="New"), CopyDraft(id="a", title="A", body="changed")],
    )

    assert not result.success
    assert result.error == f"timeout ({PARTIAL_FAILURE_NOTICE})"
    assert len(store.records) == 2


def test_sync_passes_store_errors_through() -> None:
    store = FakeCopyItemStore(fail_on="fetch_all", failure_message="JWT expired")

    result = _sync(store, [CopyDraft(title="New")])

    assert not result.success
    assert result.error == "JWT expired"


def test_sync_non_authoritative_empty_list_is_a_noop() -> None:
    store = FakeCopyItemStore([make_record("a", "A"), make_record("b", "B")])

    result = _sync(store, [], authoritative=False)

    assert result.success
    assert store.write_calls == []
    assert set(store.records) == {"a", "b"}


def test_sync_non_authoritative_still_upserts() -> None:
    store = FakeCopyItemStore([make_record("a", "A"), make_record("b", "B")])

    result = _sync(store, [CopyDraft(title="C")], authoritative=False)

    assert result.success
    assert store.call_names == ["fetch_all", "insert_many"]


def test_sync_rejects_incomplete_scope() -> None:
    store = FakeCopyItemStore()

    result = _sync(store, [CopyDraft(title="New")], scope=Scope(site_id="site", user_id=""))

    assert not result.success
    assert result.error == "Scope requires a site id and a user id"
    assert store.calls == []


def test_sync_dry_run_computes_plan_without_writing() -> None:
    store = FakeCopyItemStore([make_record("a", "A")])

    result = _sync(store, [CopyDraft(title="B")], dry_run=True)

    assert result.success
    assert result.plan is not None
    assert result.plan.summary() == "create=1, update=0, preserve=0, delete=1"
    assert store.write_calls == []


def test_sync_reports_plan_to_hook() -> None:
    store = FakeCopyItemStore()
    observed: list[tuple[Scope, ReconciliationPlan]] = []

    _sync(store, [CopyDraft(title="B")], on_plan=lambda scope, plan: observed.append((scope, plan)))

    assert len(observed) == 1
    scope, plan = observed[0]
    assert scope == SCOPE
    assert len(plan.to_create) == 1


def test_engine_runs_injected_stages_in_order() -> None:
    store = FakeCopyItemStore([make_record("a", "A")])
    observed: list[str] = []

    class _Resolver:
        def __call__(
            self,
            drafts: Sequence[CopyDraft],
            snapshot: Snapshot,
            *,
            scope: Scope,
            title_fallback: bool = True,
        ) -> tuple[ResolvedPair, ...]:
            observed.append(f"resolve:{len(snapshot)}:{title_fallback}")
            return ()

    class _Classifier:
        def __call__(
            self,
            pairs: Sequence[ResolvedPair],
            snapshot: Snapshot,
            *,
            scope: Scope,
            scope_is_authoritative: bool,
        ) -> ReconciliationPlan:
            observed.append(f"classify:{len(pairs)}:{scope_is_authoritative}")
            return ReconciliationPlan(to_delete=["a"])

    class _Executor:
        async def __call__(
            self,
            plan: ReconciliationPlan,
            *,
            scope: Scope,
            store: CopyItemStore,
        ) -> ExecutionReport:
            observed.append(f"execute:{plan.to_delete}")
            return ExecutionReport(deleted=len(plan.to_delete))

    engine = ReconciliationEngine(
        store=store,
        title_fallback=False,
        resolver=_Resolver(),
        classifier=_Classifier(),
        executor=_Executor(),
    )

    outcome = asyncio.run(engine.reconcile(SCOPE, [], scope_is_authoritative=True))

    assert observed == ["resolve:1:False", "classify:0:True", "execute:['a']"]
    assert outcome.executed
    assert outcome.report.deleted == 1
    assert store.write_calls == []
