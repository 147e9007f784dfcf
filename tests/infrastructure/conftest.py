"""Infrastructure fixtures — SQLite-backed SqlRecordStore.

Invariants:
    - Every test gets a fresh in-memory SQLite database with all tables created
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

import orderdocs.models  # noqa: F401
from orderdocs.db.base import Base
from orderdocs.infrastructure.record_store import SqlRecordStore


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def sql_store(test_engine):
    return SqlRecordStore(
        async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False),
    )
