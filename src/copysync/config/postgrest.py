"""PostgREST (Supabase) connection settings."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

POSTGREST_REST_PATH = "/rest/v1/"
POSTGREST_TIMEOUT_SECONDS = 15.0
DEFAULT_COPY_TABLE = "copywriting"
# Supabase default for max-rows; larger pages would be cut short by the server
DEFAULT_PAGE_SIZE = 1000


@dataclass(frozen=True)
class PostgrestConfig:
    """Holds the REST endpoint, API key and table used for copy items."""

    api_key: str
    resilience: ResilienceConfig
    table: str = DEFAULT_COPY_TABLE
    page_size: int = DEFAULT_PAGE_SIZE


def rest_base_url(project_url: str) -> str:
    return project_url.rstrip("/") + POSTGREST_REST_PATH


def get_postgrest_config(*, table: str = DEFAULT_COPY_TABLE) -> PostgrestConfig:
    """Read ``SUPABASE_URL`` and ``SUPABASE_KEY``; the key is sent as apikey and bearer token."""

    values = require_env_vars(("SUPABASE_URL", "SUPABASE_KEY"))
    api_key = values["SUPABASE_KEY"]
    return PostgrestConfig(
        api_key=api_key,
        table=table,
        resilience=ResilienceConfig(
            base_url=rest_base_url(values["SUPABASE_URL"]),
            headers={"apikey": api_key, "Authorization": f"Bearer {api_key}"},
            timeout_seconds=POSTGREST_TIMEOUT_SECONDS,
            rate_limit=RateLimit(max_calls=10, per_seconds=1.0),
        ),
    )
