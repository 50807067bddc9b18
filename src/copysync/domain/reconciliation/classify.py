"""Classification of resolved pairs into an executable plan.

Responsibilities of this stage:
- bucket pairs into create/update/preserve and derive implicit deletes
- keep empty drafts from ever being written
- reject plans that would leave two records with one identity key

This stage is pure: a ``DuplicateTitleError`` here means no write was issued.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from .contracts import ReconciliationPlan, UpdateInstruction
from .errors import DuplicateTitleError
from .resolve import identity_key

if TYPE_CHECKING:
    from collections.abc import Sequence

    from copysync.domain.model import Scope

    from .contracts import IdentityKey, ResolvedPair, Snapshot

log = getLogger(__name__)


class ClassifyPairs(Protocol):
    def __call__(
        self,
        pairs: Sequence[ResolvedPair],
        snapshot: Snapshot,
        *,
        scope: Scope,
        scope_is_authoritative: bool,
    ) -> ReconciliationPlan: ...


def classify(
    pairs: Sequence[ResolvedPair],
    snapshot: Snapshot,
    *,
    scope: Scope,
    scope_is_authoritative: bool,
) -> ReconciliationPlan:
    """Build the plan for ``pairs``.

    Unclaimed snapshot records are deleted only when the caller declares the
    draft list authoritative for ``scope``; otherwise the run only upserts.
    """

    plan = ReconciliationPlan()
    claimed = {pair.matched.id for pair in pairs if pair.matched is not None}
    unclaimed_keys = _keys_of_unclaimed(snapshot, claimed)
    new_keys: set[IdentityKey] = set()

    for pair in pairs:
        draft = pair.draft
        if pair.matched is None:
            if draft.is_empty:
                log.debug("Dropping empty new draft")
                continue
            key = identity_key(scope, draft.title)
            if key in new_keys or key in unclaimed_keys:
                raise DuplicateTitleError(draft.title.strip())
            new_keys.add(key)
            plan.to_create.append(draft)
            continue

        record = pair.matched
        if draft.is_empty:
            log.debug("Preserving %s: draft is currently empty", record.id)
            plan.to_preserve.append(record.id)
        elif draft.fields() == record.fields():
            plan.to_preserve.append(record.id)
        else:
            plan.to_update.append(UpdateInstruction(record_id=record.id, draft=draft))

    if scope_is_authoritative:
        plan.to_delete.extend(record.id for record in snapshot if record.id not in claimed)

    log.info("Reconciliation plan for %s: %s", scope, plan.summary())
    return plan


def _keys_of_unclaimed(snapshot: Snapshot, claimed: set[str]) -> set[IdentityKey]:
    return {
        identity_key(record.scope, record.title)
        for record in snapshot
        if record.id not in claimed
    }
