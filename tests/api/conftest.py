"""API test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database and storage root under tmp_path
    - db_manager patched so the real get_store → SqlRecordStore wiring is exercised
    - get_settings overridden: tiny retry/visibility budgets, PDF_BASE_PATH = tmp storage

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific behavior is not exercised here)
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

import orderdocs.infrastructure.database as db_module
import orderdocs.models  # noqa: F401
from orderdocs.config import Settings, get_settings
from orderdocs.db.base import Base
from orderdocs.infrastructure.database import DatabaseSessionManager
from orderdocs.infrastructure.record_store import SqlRecordStore
from orderdocs.main import app


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
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
def sql_store(test_session_factory):
    return SqlRecordStore(test_session_factory)


@pytest.fixture
def storage_root(tmp_path):
    root = tmp_path / "storage"
    root.mkdir()
    return root


@pytest.fixture
def test_settings(storage_root):
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        pdf_base_path=str(storage_root),
        allocation_max_attempts=5,
        allocation_base_delay_ms=1,
        local_verify_attempts=1,
        local_verify_base_delay_ms=1,
        cloud_verify_attempts=1,
        cloud_verify_base_delay_ms=1,
    )


@pytest.fixture
async def client(test_engine, test_session_factory, test_settings):
    """FastAPI test client with settings and db_manager swapped for test doubles."""
    app.dependency_overrides[get_settings] = lambda: test_settings

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
