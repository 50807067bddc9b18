"""Public interface for the PostgREST adapter."""

from __future__ import annotations

from .client import PostgrestCopyItemStore
from .schema import COPY_ITEM_ROWS, CopyItemRow, ErrorPayload
from .translator import insert_payload, patch_payload, row_to_record

__all__ = [
    "COPY_ITEM_ROWS",
    "CopyItemRow",
    "ErrorPayload",
    "PostgrestCopyItemStore",
    "insert_payload",
    "patch_payload",
    "row_to_record",
]
