"""SQLAlchemy async engine, connection pool lifecycle and session dependency."""

from typing import AsyncIterator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from vidshare.config import Settings
from vidshare.db.base import Base


class Database:
    """
    Owns the process-wide engine and its connection pool.

    Created once in the application lifespan and disposed on shutdown;
    request handlers reach it through ``app.state.db``.
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 10,
        max_overflow: int = 20,
        pool_timeout: float = 30.0,
        echo: bool = False,
    ):
        self.url = make_url(url)
        engine_kwargs: dict = {"echo": echo, "pool_pre_ping": True}
        if self.url.get_backend_name() != "sqlite":
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
            )
        self.engine: AsyncEngine = create_async_engine(self.url, **engine_kwargs)
        if self.url.get_backend_name() == "sqlite":
            _configure_sqlite(self.engine)

        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.DATABASE_URL,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
        )

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


def _configure_sqlite(engine: AsyncEngine) -> None:
    # SQLite needs foreign keys switched on per connection, and the driver's
    # implicit BEGIN handling replaced so SAVEPOINT works. It has no row locks
    # either: BEGIN IMMEDIATE takes the write lock up front, so concurrent
    # writers wait for each other instead of failing with "database is locked".
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """Dependency that yields a request-scoped async DB session."""
    database: Database = request.app.state.db
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except BaseException:
            await session.rollback()
            raise
