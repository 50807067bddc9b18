"""SQLAlchemy adapter package for copysync."""

from __future__ import annotations

from .mappings import (
    LabelSetType,
    UTCDateTime,
    copy_item_table,
    mapper_registry,
    start_mappers,
)
from .store import (
    SqlAlchemyCopyItemStore,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "LabelSetType",
    "SqlAlchemyCopyItemStore",
    "StartupError",
    "UTCDateTime",
    "copy_item_table",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
