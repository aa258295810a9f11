"""Database engine and session configuration."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

import supplyhub.models  # noqa: F401  # Register all models with SQLModel metadata
from supplyhub.config import settings


def _engine_options(database_url: str) -> dict[str, Any]:
    """Pool and isolation options; SQLite gets neither."""
    if database_url.startswith("sqlite"):
        return {}
    return {
        "isolation_level": settings.db_isolation_level,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_pre_ping": True,  # Verify connections before use
        "pool_recycle": 300,  # Recycle connections after 5 minutes
    }


def _configure_sqlite(engine: AsyncEngine) -> None:
    """Make SQLite transactions isolated and enforce foreign keys.

    pysqlite defers BEGIN until the first write, so a read at the start of a
    transaction would see data that can change before the write. Driver-level
    transaction handling is switched off and every transaction takes the write
    lock up front with BEGIN IMMEDIATE; concurrent writers wait for it (busy
    timeout) and then report "database is locked".
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(database_url: str) -> AsyncEngine:
    """Create an async engine for the given URL."""
    engine = create_async_engine(
        database_url,
        echo=False,  # SQL logging controlled via structlog configuration
        future=True,
        **_engine_options(database_url),
    )
    if database_url.startswith("sqlite"):
        _configure_sqlite(engine)
    return engine


def build_session_maker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.database_url)
async_session_maker = build_session_maker(engine)


async def get_session() -> AsyncGenerator[AsyncSession]:
    """Dependency that provides an async database session."""
    async with async_session_maker() as session:
        yield session


async def dispose_engine() -> None:
    """Dispose of the engine and release all connections.

    Should be called during application shutdown.
    """
    await engine.dispose()
