"""SQLAlchemy-backed copy item store and adapter lifecycle."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from copysync.config import DatabaseConfig, get_database_config
from copysync.domain.model import CopyRecord
from copysync.domain.reconciliation.errors import StoreError

from .mappings import copy_item_table, start_mappers
from .migrations import upgrade_head

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    from sqlalchemy.ext.asyncio import AsyncEngine

    from copysync.domain.model import CopyPatch, NewCopyRecord, Scope

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the SQLAlchemy store is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: AsyncEngine | None = None
    _session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine | None:
        return self._engine

    @engine.setter
    def engine(self, value: AsyncEngine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Await copysync.adapters.sqlalchemy."
                "store.startup() before creating a store."
            )
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


async def startup(
    *,
    engine: AsyncEngine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the async engine, mappers, schema and session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    if engine is None:
        database = get_database_config() if database_uri is None else DatabaseConfig(database_uri)
        engine = create_async_engine(database.uri, echo=database.echo)
    start_mappers()
    await upgrade_head(engine=engine)
    _STATE.engine = engine


def is_started() -> bool:
    return _STATE.engine is not None


async def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        await _STATE.engine.dispose()
    _STATE.engine = None


def _utcnow() -> datetime:
    return datetime.now(UTC)


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        log.exception("Copy item %s failed", operation)
        raise StoreError(str(exc)) from exc


class SqlAlchemyCopyItemStore:
    """Copy item store with one session (and transaction) per call."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.session_factory = session_factory or _STATE.session_factory
        self._clock = clock

    async def fetch_all(self, scope: Scope) -> list[CopyRecord]:
        stmt = (
            select(CopyRecord)
            .where(copy_item_table.c.site_id == scope.site_id)
            .where(copy_item_table.c.user_id == scope.user_id)
            .order_by(copy_item_table.c.created_at, copy_item_table.c.id)
        )
        with _store_errors("fetch"):
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())

    async def insert_many(self, records: Sequence[NewCopyRecord]) -> list[CopyRecord]:
        if not records:
            return []
        now = self._clock()
        created = [
            CopyRecord(
                id=str(uuid4()),
                scope=record.scope,
                title=record.fields.title,
                body=record.fields.body,
                category=record.fields.category,
                audience=record.fields.audience,
                use_case=record.fields.use_case,
                notes=record.fields.notes,
                labels=record.fields.labels,
                status=record.fields.status,
                created_at=now,
                updated_at=now,
            )
            for record in records
        ]
        with _store_errors("insert"):
            async with self.session_factory() as session, session.begin():
                session.add_all(created)
        return created

    async def update_one(self, record_id: str, patch: CopyPatch) -> None:
        stmt = (
            update(CopyRecord)
            .where(copy_item_table.c.id == record_id)
            .values(**patch, updated_at=self._clock())
            .execution_options(synchronize_session=False)
        )
        with _store_errors("update"):
            async with self.session_factory() as session, session.begin():
                result = await session.execute(stmt)
        if result.rowcount == 0:
            log.warning("Copy item %s no longer exists; update skipped", record_id)

    async def delete_many(self, record_ids: Sequence[str]) -> None:
        if not record_ids:
            return
        stmt = (
            delete(CopyRecord)
            .where(copy_item_table.c.id.in_(list(record_ids)))
            .execution_options(synchronize_session=False)
        )
        with _store_errors("delete"):
            async with self.session_factory() as session, session.begin():
                await session.execute(stmt)


if TYPE_CHECKING:
    from copysync.domain.ports import CopyItemStore

    _store_check: CopyItemStore = SqlAlchemyCopyItemStore()
