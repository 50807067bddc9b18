"""Translate between PostgREST rows and copy item domain objects."""

from __future__ import annotations

from typing import TYPE_CHECKING

from copysync.domain.model import CopyRecord, Scope

if TYPE_CHECKING:
    from copysync.domain.model import CopyFields, CopyPatch, NewCopyRecord

    from .schema import CopyItemRow

# domain attribute -> table column
COLUMN_BY_FIELD: dict[str, str] = {
    "title": "title",
    "body": "content",
    "category": "copy_type",
    "audience": "target_audience",
    "use_case": "use_case",
    "notes": "notes",
    "labels": "tags",
    "status": "status",
}


def row_to_record(row: CopyItemRow) -> CopyRecord:
    return CopyRecord(
        id=row.id,
        scope=Scope(site_id=row.site_id, user_id=row.user_id),
        title=row.title,
        body=row.content,
        category=row.copy_type,
        audience=row.target_audience,
        use_case=row.use_case,
        notes=row.notes,
        labels=frozenset(row.tags),
        status=row.status,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def insert_payload(record: NewCopyRecord) -> dict[str, object]:
    payload: dict[str, object] = {
        "site_id": record.scope.site_id,
        "user_id": record.scope.user_id,
    }
    payload.update(_fields_payload(record.fields))
    return payload


def patch_payload(patch: CopyPatch) -> dict[str, object]:
    payload: dict[str, object] = {}
    for key, value in patch.items():
        column = COLUMN_BY_FIELD[key]
        payload[column] = _column_value(key, value)
    return payload


def _fields_payload(fields: CopyFields) -> dict[str, object]:
    return patch_payload(fields.as_patch())


def _column_value(key: str, value: object) -> object:
    if key == "labels":
        return sorted(value) if isinstance(value, frozenset | set | list | tuple) else []
    return value
