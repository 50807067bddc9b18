"""Defaults for copy synchronisation runs."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import StrEnum

from .env import env_flag
from .errors import ConfigurationError


class StorageBackend(StrEnum):
    SQLALCHEMY = "sqlalchemy"
    POSTGREST = "postgrest"


DEFAULT_BACKEND = StorageBackend.SQLALCHEMY


@dataclass(frozen=True, slots=True)
class SyncConfig:
    backend: StorageBackend = DEFAULT_BACKEND
    title_fallback: bool = True


def get_sync_config() -> SyncConfig:
    raw_backend = os.getenv("COPYSYNC_BACKEND", "").strip().lower()
    try:
        backend = StorageBackend(raw_backend) if raw_backend else DEFAULT_BACKEND
    except ValueError as exc:
        raise ConfigurationError(f"Unsupported storage backend: {raw_backend}") from exc
    return SyncConfig(
        backend=backend,
        title_fallback=env_flag("COPYSYNC_TITLE_FALLBACK", default=True),
    )
