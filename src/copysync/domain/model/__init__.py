"""Copy item domain model."""

from __future__ import annotations

from .copy_item import (
    CopyDraft,
    CopyFields,
    CopyPatch,
    CopyRecord,
    NewCopyRecord,
    Scope,
    blank_to_none,
    normalize_labels,
)
from .enums import CopyStatus, CopyType

__all__ = [
    "CopyDraft",
    "CopyFields",
    "CopyPatch",
    "CopyRecord",
    "CopyStatus",
    "CopyType",
    "NewCopyRecord",
    "Scope",
    "blank_to_none",
    "normalize_labels",
]
