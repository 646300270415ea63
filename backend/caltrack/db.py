import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from .errors import StoreUnavailableError

log = logging.getLogger(__name__)

# Define the base class that all models should inherit from
class Base(DeclarativeBase):
    pass


def _install_sqlite_transactions(engine: AsyncEngine) -> None:
    # pysqlite only opens a transaction before DML; take over BEGIN so that
    # read-only multi-statement work runs in one transaction as well.
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        # readers keep their snapshot while the single writer commits
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


class Store:
    """Handle on one SQLite database file.

    Constructed explicitly and passed to every component; the caller owns the
    ``open()`` / ``close()`` lifecycle.
    """

    def __init__(self, db_path: Path | str, *, echo: bool = False):
        self.db_path = Path(db_path)
        self.echo = echo
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None
        # Single writer per store: serializes every write transaction
        self._write_lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise StoreUnavailableError("store is not open")
        return self._engine

    async def open(self) -> "Store":
        if self._engine is not None:
            return self
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreUnavailableError(f"cannot create {self.db_path.parent}: {e}") from e

        engine = create_async_engine(f"sqlite+aiosqlite:///{self.db_path}", echo=self.echo)
        _install_sqlite_transactions(engine)
        self._engine = engine
        self._sessionmaker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        log.info("Opened store %s", self.db_path)
        return self

    async def close(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        log.info("Closed store %s", self.db_path)

    async def __aenter__(self) -> "Store":
        return await self.open()

    async def __aexit__(self, *exc) -> None:
        await self.close()

    def _sessions(self) -> async_sessionmaker[AsyncSession]:
        if self._sessionmaker is None:
            raise StoreUnavailableError("store is not open")
        return self._sessionmaker

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """One write transaction: commits on success, rolls back on any error."""
        sessions = self._sessions()
        async with self._write_lock:
            async with sessions.begin() as db:
                yield db

    @asynccontextmanager
    async def snapshot(self) -> AsyncIterator[AsyncSession]:
        """One read transaction; every query inside sees the same committed state."""
        sessions = self._sessions()
        async with sessions() as db:
            async with db.begin():
                yield db

    async def ping(self) -> bool:
        async with self.snapshot() as db:
            await db.execute(text("SELECT 1"))
        return True


async def ensure_schema(store: Store) -> None:
    """Create the five tables if absent. Never drops, alters or seeds."""
    from . import models  # noqa: F401  # registers every table on Base.metadata

    try:
        await store.open()
        async with store.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except (OSError, SQLAlchemyError) as e:
        raise StoreUnavailableError(f"cannot open store at {store.db_path}: {e}") from e
    log.info("Schema ready at %s", store.db_path)
