"""Copy items: persisted records, user-edited drafts and their shared content."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypedDict

from copysync.domain.model.enums import CopyStatus, CopyType

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime


@dataclass(frozen=True, slots=True)
class Scope:
    """Owning site and user of a copy collection."""

    site_id: str
    user_id: str

    @property
    def is_complete(self) -> bool:
        return bool(self.site_id.strip()) and bool(self.user_id.strip())


class CopyPatch(TypedDict, total=False):
    """Partial set of writable fields, as accepted by ``CopyItemStore.update_one``."""

    title: str
    body: str
    category: CopyType
    audience: str | None
    use_case: str | None
    notes: str | None
    labels: frozenset[str]
    status: CopyStatus


def blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    return value if value.strip() else None


def normalize_labels(labels: Iterable[str] | None) -> frozenset[str]:
    if not labels:
        return frozenset()
    return frozenset(stripped for label in labels if (stripped := label.strip()))


@dataclass(frozen=True, slots=True, kw_only=True)
class CopyFields:
    """Writable content of a copy item, compared to detect unchanged drafts."""

    title: str = ""
    body: str = ""
    category: CopyType = CopyType.OTHER
    audience: str | None = None
    use_case: str | None = None
    notes: str | None = None
    labels: frozenset[str] = frozenset()
    status: CopyStatus = CopyStatus.DRAFT

    @classmethod
    def normalized(
        cls,
        *,
        title: str | None,
        body: str | None,
        category: CopyType | str | None,
        audience: str | None,
        use_case: str | None,
        notes: str | None,
        labels: Iterable[str] | None,
        status: CopyStatus | str | None,
    ) -> CopyFields:
        return cls(
            title=title or "",
            body=body or "",
            category=CopyType(category) if category else CopyType.OTHER,
            audience=blank_to_none(audience),
            use_case=blank_to_none(use_case),
            notes=blank_to_none(notes),
            labels=normalize_labels(labels),
            status=CopyStatus(status) if status else CopyStatus.DRAFT,
        )

    @property
    def is_empty(self) -> bool:
        return not self.title.strip() and not self.body.strip()

    def as_patch(self) -> CopyPatch:
        return CopyPatch(
            title=self.title,
            body=self.body,
            category=self.category,
            audience=self.audience,
            use_case=self.use_case,
            notes=self.notes,
            labels=self.labels,
            status=self.status,
        )


@dataclass(eq=False, kw_only=True)
class CopyRecord:
    """A copy item already stored for a scope.

    Instances are owned by the storage adapter. Reconciliation reads them but
    only ever changes stored state through ``CopyItemStore`` calls.
    """

    id: str
    scope: Scope
    title: str = ""
    body: str = ""
    category: CopyType = CopyType.OTHER
    audience: str | None = None
    use_case: str | None = None
    notes: str | None = None
    labels: frozenset[str] = frozenset()
    status: CopyStatus = CopyStatus.DRAFT

    created_at: datetime | None = None
    updated_at: datetime | None = None

    def fields(self) -> CopyFields:
        return CopyFields.normalized(
            title=self.title,
            body=self.body,
            category=self.category,
            audience=self.audience,
            use_case=self.use_case,
            notes=self.notes,
            labels=self.labels,
            status=self.status,
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class CopyDraft:
    """User-edited, client-held counterpart of a copy item.

    ``id`` is only present while the draft still points at the record it was
    loaded from.
    """

    id: str | None = None
    title: str = ""
    body: str = ""
    category: CopyType = CopyType.OTHER
    audience: str | None = None
    use_case: str | None = None
    notes: str | None = None
    labels: frozenset[str] = field(default_factory=frozenset[str])
    status: CopyStatus = CopyStatus.DRAFT

    @property
    def is_empty(self) -> bool:
        return not self.title.strip() and not self.body.strip()

    def fields(self) -> CopyFields:
        return CopyFields.normalized(
            title=self.title,
            body=self.body,
            category=self.category,
            audience=self.audience,
            use_case=self.use_case,
            notes=self.notes,
            labels=self.labels,
            status=self.status,
        )

    @classmethod
    def from_record(cls, record: CopyRecord) -> CopyDraft:
        return cls(
            id=record.id,
            title=record.title,
            body=record.body,
            category=record.category,
            audience=record.audience,
            use_case=record.use_case,
            notes=record.notes,
            labels=record.labels,
            status=record.status,
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class NewCopyRecord:
    """Insert payload: content plus the scope stamped onto it."""

    scope: Scope
    fields: CopyFields
