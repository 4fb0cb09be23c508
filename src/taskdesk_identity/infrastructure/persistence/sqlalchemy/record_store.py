"""Durable key-value record store over SQLAlchemy's asyncio extension.

Two logical tables are exposed:

- ``users``  keyed by normalized email (``AccountModel``)
- ``tokens`` keyed by token string (``RememberTokenModel``)

Records cross this boundary as plain dicts keyed by column name, so the
repositories above can map them to domain objects without depending on
ORM state. Every operation runs in its own short session and commits on
exit, one unit of work per call.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import delete, func, inspect, select
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from taskdesk_identity.exceptions import StoreUnavailableError
from taskdesk_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase
from taskdesk_identity.infrastructure.persistence.sqlalchemy.models import (
    AccountModel,
    RememberTokenModel,
)
from taskdesk_identity.schemas import StoreStatus

logger = logging.getLogger(__name__)

Record = dict[str, Any]

USERS = "users"
TOKENS = "tokens"

_TABLES: dict[str, type[IdentityBase]] = {
    USERS: AccountModel,
    TOKENS: RememberTokenModel,
}


class RecordStore:
    """
    Key-value persistence for accounts and remember-me tokens.

    The store is an explicit instance with an initialize/ready lifecycle.
    ``initialize`` is idempotent and safe to await from several tasks at
    once; every data operation awaits it first, so calls made before the
    store is ready re-attempt initialization instead of failing.

    Parameters
    ----------
    database_url
        Any async SQLAlchemy URL, e.g. ``sqlite+aiosqlite:///./taskdesk.db``
    echo
        Log emitted SQL
    engine_kwargs
        Passed through to ``create_async_engine`` (pool settings etc.)
    """

    def __init__(self, database_url: str, echo: bool = False, **engine_kwargs: Any):
        self._database_url = database_url
        self._echo = echo
        self._engine_kwargs = engine_kwargs
        self._engine: AsyncEngine | None = None
        self._session_maker: async_sessionmaker[AsyncSession] | None = None
        self._init_lock = asyncio.Lock()

    @property
    def is_ready(self) -> bool:
        return self._session_maker is not None

    @property
    def engine(self) -> AsyncEngine | None:
        return self._engine

    async def initialize(self) -> None:
        """Open the database and create missing tables.

        Raises
        ------
        StoreUnavailableError
            If the engine cannot be created or the database cannot be
            reached or written
        """
        if self._session_maker is not None:
            return

        async with self._init_lock:
            # Another task may have finished while we waited for the lock
            if self._session_maker is not None:
                return

            try:
                engine = create_async_engine(
                    self._database_url,
                    echo=self._echo,
                    **self._engine_kwargs,
                )
            except (SQLAlchemyError, ImportError) as e:
                logger.error("Cannot create record store engine: %s", e)
                msg = f"Persistent storage is unavailable: {e}"
                raise StoreUnavailableError(msg) from e

            try:
                async with engine.begin() as conn:
                    await conn.run_sync(IdentityBase.metadata.create_all)
            except (OSError, SQLAlchemyError) as e:
                await engine.dispose()
                logger.error("Cannot open record store: %s", e)
                msg = f"Persistent storage is unavailable: {e}"
                raise StoreUnavailableError(msg) from e

            self._engine = engine
            self._session_maker = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
            logger.info("Record store initialized (tables: %s)", ", ".join(_TABLES))

    async def close(self) -> None:
        """Dispose the engine. A later operation re-initializes the store."""
        async with self._init_lock:
            if self._engine is not None:
                await self._engine.dispose()
            self._engine = None
            self._session_maker = None

    async def get_by_key(self, table: str, key: str) -> Record | None:
        model = _model_for(table)
        async with self._session() as session:
            instance = await session.get(model, key)
            return _to_record(instance) if instance is not None else None

    async def get_all(self, table: str) -> list[Record]:
        model = _model_for(table)
        async with self._session() as session:
            result = await session.execute(select(model))
            records = [_to_record(instance) for instance in result.scalars().all()]
        logger.debug("Retrieved %d records from %s", len(records), table)
        return records

    async def get_by_index(self, table: str, field: str, value: Any) -> list[Record]:
        model = _model_for(table)
        column = _column_for(model, field)
        async with self._session() as session:
            result = await session.execute(select(model).where(column == value))
            return [_to_record(instance) for instance in result.scalars().all()]

    async def insert(self, table: str, record: Record) -> Record:
        """Insert a new record without overwriting.

        Raises
        ------
        sqlalchemy.exc.IntegrityError
            If the primary key or a unique field is already taken
        """
        model = _model_for(table)
        _check_fields(model, record)

        async with self._session() as session:
            instance = model(**record)
            session.add(instance)
            await session.flush()
            stored = _to_record(instance)
        logger.debug("Inserted record into %s", table)
        return stored

    async def put(self, table: str, record: Record) -> Record:
        """Insert or overwrite a record keyed by the table's primary key."""
        model = _model_for(table)
        _check_fields(model, record)

        async with self._session() as session:
            merged = await session.merge(model(**record))
            await session.flush()
            stored = _to_record(merged)
        logger.debug("Stored record in %s", table)
        return stored

    async def delete_by_key(self, table: str, key: str) -> bool:
        model = _model_for(table)
        pk = _primary_key(model)
        async with self._session() as session:
            result = await session.execute(delete(model).where(pk == key))
            deleted = (result.rowcount or 0) > 0  # type: ignore[attr-defined]
        logger.debug("Deleted record from %s: %s", table, deleted)
        return deleted

    async def delete_by_index(self, table: str, field: str, value: Any) -> int:
        model = _model_for(table)
        column = _column_for(model, field)
        async with self._session() as session:
            result = await session.execute(delete(model).where(column == value))
            return result.rowcount or 0  # type: ignore[attr-defined]

    async def delete_where_before(self, table: str, field: str, moment: Any) -> int:
        """Delete records whose ``field`` is strictly earlier than ``moment``."""
        model = _model_for(table)
        column = _column_for(model, field)
        async with self._session() as session:
            result = await session.execute(delete(model).where(column < moment))
            return result.rowcount or 0  # type: ignore[attr-defined]

    async def count(self, table: str) -> int:
        model = _model_for(table)
        async with self._session() as session:
            result = await session.execute(select(func.count()).select_from(model))
            return result.scalar_one()

    async def clear(self, table: str) -> None:
        """Remove every record from a table (destructive reset flows only)."""
        model = _model_for(table)
        async with self._session() as session:
            await session.execute(delete(model))
        logger.warning("Cleared all records from %s", table)

    async def status(self) -> StoreStatus:
        await self.initialize()
        assert self._engine is not None

        async with self._engine.connect() as conn:
            tables = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).get_table_names(),
            )

        user_count = await self.count(USERS) if USERS in tables else 0
        return StoreStatus(exists=True, tables=sorted(tables), user_count=user_count)

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        await self.initialize()
        assert self._session_maker is not None

        try:
            async with self._session_maker() as session, session.begin():
                yield session
        except OperationalError as e:
            logger.error("Record store operation failed: %s", e)
            msg = f"Persistent storage is unavailable: {e}"
            raise StoreUnavailableError(msg) from e


def _model_for(table: str) -> type[IdentityBase]:
    try:
        return _TABLES[table]
    except KeyError:
        msg = f"Unknown table: {table}"
        raise ValueError(msg) from None


def _column_names(model: type[IdentityBase]) -> set[str]:
    return {attr.key for attr in inspect(model).column_attrs}


def _check_fields(model: type[IdentityBase], record: Record) -> None:
    unknown = set(record) - _column_names(model)
    if unknown:
        table = model.__tablename__
        msg = f"Unknown fields for table {table}: {', '.join(sorted(unknown))}"
        raise ValueError(msg)


def _column_for(model: type[IdentityBase], field: str) -> Any:
    if field not in _column_names(model):
        msg = f"Unknown field for table {model.__tablename__}: {field}"
        raise ValueError(msg)
    return getattr(model, field)


def _primary_key(model: type[IdentityBase]) -> Any:
    return inspect(model).primary_key[0]


def _to_record(instance: IdentityBase) -> Record:
    return {
        attr.key: getattr(instance, attr.key)
        for attr in inspect(type(instance)).column_attrs
    }
