from __future__ import annotations

import asyncio
import os
from typing import TYPE_CHECKING, Protocol

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from copysync.adapters.sqlalchemy import SqlAlchemyCopyItemStore, shutdown, startup

os.environ.setdefault("DATABASE_URI", "sqlite+aiosqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sqlalchemy.ext.asyncio import AsyncEngine


class SqliteRunner(Protocol):
    def __call__[T](self, scenario: Callable[[SqlAlchemyCopyItemStore], Awaitable[T]]) -> T: ...


def memory_engine() -> AsyncEngine:
    return create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


@pytest.fixture
def run_with_sqlite() -> SqliteRunner:
    """Run an async scenario against a migrated in-memory database.

    Engine startup, the scenario and engine disposal share one event loop.
    """

    def run[T](scenario: Callable[[SqlAlchemyCopyItemStore], Awaitable[T]]) -> T:
        async def main() -> T:
            await startup(engine=memory_engine(), force=True)
            try:
                return await scenario(SqlAlchemyCopyItemStore())
            finally:
                await shutdown()

        return asyncio.run(main())

    return run
