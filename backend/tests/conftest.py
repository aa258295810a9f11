from collections.abc import AsyncIterator

import pytest
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel

from supplyhub.db.session import build_engine, build_session_maker
from supplyhub.models.request import RequestHeader


@pytest.fixture
async def engine(tmp_path) -> AsyncIterator[AsyncEngine]:
    """File-backed SQLite so several sessions can run side by side."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_maker(engine)


@pytest.fixture
async def session(session_maker: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_maker() as session:
        yield session


@pytest.fixture
def mark_exported(session_maker: async_sessionmaker[AsyncSession]):
    """Flag a header as exported, the way the downstream export job does."""

    async def _mark(header_id: int) -> None:
        async with session_maker() as other:
            await other.execute(
                update(RequestHeader).where(RequestHeader.id == header_id).values(exported_downstream=True)
            )
            await other.commit()

    return _mark
