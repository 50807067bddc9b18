"""Application configuration helpers."""

from __future__ import annotations

from .env import env_flag, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .postgrest import PostgrestConfig, get_postgrest_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .sync import StorageBackend, SyncConfig, get_sync_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "PostgrestConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageBackend",
    "StorageConfig",
    "SyncConfig",
    "configure_logging",
    "env_flag",
    "get_database_config",
    "get_postgrest_config",
    "get_storage_config",
    "get_sync_config",
    "require_env_var",
    "require_env_vars",
]
