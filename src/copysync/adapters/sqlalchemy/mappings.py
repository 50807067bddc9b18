"""SQLAlchemy mapping metadata for the copy item model."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any, cast

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Enum,
    Index,
    String,
    Table,
    Text,
    TypeDecorator,
    orm,
)
from sqlalchemy.orm import composite
from sqlalchemy.orm.exc import UnmappedClassError

from copysync.domain.model import CopyRecord, CopyStatus, CopyType, Scope

log = logging.getLogger(__name__)

COPY_TABLE_NAME = "copywriting"


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class LabelSetType(TypeDecorator[frozenset[str]]):
    """Stores labels as a sorted JSON array."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: frozenset[str] | None, dialect: Dialect) -> str:
        _ = dialect
        if not value:
            return "[]"
        return json.dumps(sorted(value))

    def process_result_value(self, value: str | None, dialect: Dialect) -> frozenset[str]:
        _ = dialect
        if value is None:
            return frozenset()
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return frozenset()
        items = cast(list[Any], loaded)
        return frozenset(item for item in items if isinstance(item, str))


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

copy_item_table = Table(
    COPY_TABLE_NAME,
    mapper_registry.metadata,
    Column("id", String(36), primary_key=True),
    Column("site_id", String(255), nullable=False),
    Column("user_id", String(255), nullable=False),
    Column("title", Text, nullable=False, default=""),
    Column("content", Text, nullable=False, default=""),
    Column(
        "copy_type",
        Enum(CopyType, native_enum=False, length=32, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    ),
    Column("target_audience", Text, nullable=True),
    Column("use_case", Text, nullable=True),
    Column("notes", Text, nullable=True),
    Column("tags", LabelSetType, nullable=False),
    Column(
        "status",
        Enum(
            CopyStatus, native_enum=False, length=16, values_callable=lambda e: [m.value for m in e]
        ),
        nullable=False,
    ),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
    Index("ix_copywriting_scope", "site_id", "user_id"),
)


def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model (idempotent)."""

    try:
        orm.class_mapper(CopyRecord)
    except UnmappedClassError:
        log.info("Starting SQLAlchemy mappers")
        mapper_registry.map_imperatively(
            CopyRecord,
            copy_item_table,
            properties={
                "scope": composite(Scope, copy_item_table.c.site_id, copy_item_table.c.user_id),
                "body": copy_item_table.c.content,
                "category": copy_item_table.c.copy_type,
                "audience": copy_item_table.c.target_audience,
                "labels": copy_item_table.c.tags,
            },
        )
    return mapper_registry
