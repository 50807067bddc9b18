"""Domain ports implemented by adapters."""

from __future__ import annotations

from .persistence import CopyItemStore

__all__ = ["CopyItemStore"]
