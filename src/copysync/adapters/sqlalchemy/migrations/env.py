"""Alembic environment: migrate on the caller's connection or open an async engine."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from alembic import context
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from copysync.adapters.sqlalchemy.mappings import mapper_registry, start_mappers
from copysync.config import configure_logging, get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

start_mappers()

target_metadata = mapper_registry.metadata


def _database_uri() -> str:
    return context.config.get_main_option("sqlalchemy.url") or get_database_config().uri


def _configure(**options: object) -> None:
    context.configure(
        target_metadata=target_metadata,
        render_as_batch=True,
        compare_type=True,
        **options,
    )


def _run(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def _run_with_new_engine() -> None:
    engine = create_async_engine(_database_uri(), poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    _configure(url=_database_uri(), literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()
elif (existing := context.config.attributes.get("connection")) is not None:
    _run(existing)
else:
    # invoked from the alembic command line
    configure_logging()
    asyncio.run(_run_with_new_engine())
