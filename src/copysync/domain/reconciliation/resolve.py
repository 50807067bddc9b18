"""Identity resolution of drafts against a stored snapshot.

Responsibilities of this stage:
- pair each draft with at most one stored record
- never let two drafts claim the same record
- produce ``ResolvedPair`` values without touching storage

Matching precedence:
1) explicit record id, resolved for every draft before any title match
2) identity key ``(site_id, user_id, trimmed title)`` against unclaimed records
3) otherwise the draft is new

A blank title is a key like any other. Empty drafts only ever match by id.
A draft that keeps its id across a rename therefore stays an update even though
its title key no longer matches anything.
"""

from __future__ import annotations

from collections import defaultdict
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from .contracts import MatchKind, ResolvedPair

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from copysync.domain.model import CopyDraft, CopyRecord, Scope

    from .contracts import IdentityKey, Snapshot

log = getLogger(__name__)


class ResolveDrafts(Protocol):
    def __call__(
        self,
        drafts: Sequence[CopyDraft],
        snapshot: Snapshot,
        *,
        scope: Scope,
        title_fallback: bool = True,
    ) -> tuple[ResolvedPair, ...]: ...


def identity_key(scope: Scope, title: str | None) -> IdentityKey:
    """Return the fallback identity key; a blank title is the empty-string key."""

    return (scope.site_id, scope.user_id, (title or "").strip())


def resolve_drafts(
    drafts: Sequence[CopyDraft],
    snapshot: Snapshot,
    *,
    scope: Scope,
    title_fallback: bool = True,
) -> tuple[ResolvedPair, ...]:
    """Resolve ``drafts`` against ``snapshot``, preserving draft order."""

    claimed: set[str] = set()
    matches: dict[int, tuple[CopyRecord, MatchKind]] = {}

    by_id = {record.id: record for record in snapshot}
    for index, draft in enumerate(drafts):
        if draft.id is None:
            continue
        record = by_id.get(draft.id)
        if record is None:
            log.debug("Draft id %s is no longer stored, trying title match", draft.id)
            continue
        if record.id in claimed:
            log.warning("Record %s is referenced by more than one draft", record.id)
            continue
        claimed.add(record.id)
        matches[index] = (record, MatchKind.ID)

    if title_fallback:
        candidates = _candidates_by_key(snapshot)
        for index, draft in enumerate(drafts):
            if index in matches or draft.is_empty:
                continue
            key = identity_key(scope, draft.title)
            record = _first_unclaimed(candidates.get(key, ()), claimed)
            if record is None:
                continue
            claimed.add(record.id)
            matches[index] = (record, MatchKind.TITLE)

    pairs: list[ResolvedPair] = []
    for index, draft in enumerate(drafts):
        match = matches.get(index)
        if match is None:
            pairs.append(ResolvedPair(draft=draft))
            continue
        record, kind = match
        pairs.append(ResolvedPair(draft=draft, matched=record, match_kind=kind))

    log.debug(
        "Resolved %s drafts: %s by id, %s by title",
        len(pairs),
        sum(1 for pair in pairs if pair.match_kind is MatchKind.ID),
        sum(1 for pair in pairs if pair.match_kind is MatchKind.TITLE),
    )
    return tuple(pairs)


def _candidates_by_key(snapshot: Snapshot) -> dict[IdentityKey, list[CopyRecord]]:
    candidates: defaultdict[IdentityKey, list[CopyRecord]] = defaultdict(list)
    for _, record in sorted(enumerate(snapshot), key=_creation_order):
        candidates[identity_key(record.scope, record.title)].append(record)
    return dict(candidates)


def _creation_order(indexed: tuple[int, CopyRecord]) -> tuple[bool, float, int]:
    # earliest created first; undated records keep snapshot order at the end
    index, record = indexed
    if record.created_at is None:
        return (True, 0.0, index)
    return (False, record.created_at.timestamp(), index)


def _first_unclaimed(records: Iterable[CopyRecord], claimed: set[str]) -> CopyRecord | None:
    for record in records:
        if record.id not in claimed:
            return record
    return None
