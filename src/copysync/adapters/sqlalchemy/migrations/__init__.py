"""Alembic migrations for the copy item table."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection
    from sqlalchemy.ext.asyncio import AsyncEngine

MIGRATIONS_PATH: Final[Path] = Path(__file__).resolve().parent


def build_config(*, database_uri: str | None = None) -> Config:
    """Return an Alembic config pointing at the revisions bundled with the package.

    No ini file is involved, so installed copies migrate without a checkout.
    """

    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_PATH))
    if database_uri is not None:
        config.set_main_option("sqlalchemy.url", database_uri)
    return config


def _upgrade(connection: Connection, config: Config, revision: str) -> None:
    config.attributes["connection"] = connection
    command.upgrade(config, revision)


async def upgrade_head(*, engine: AsyncEngine) -> None:
    """Upgrade the schema behind ``engine`` to the latest revision in one transaction."""

    config = build_config()
    async with engine.begin() as connection:
        await connection.run_sync(_upgrade, config, "head")
