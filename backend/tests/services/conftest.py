"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database with FK enforcement on
    - get_db dependency overridden to use the test session factory
    - app.state.db_manager points at the test engine (readiness probe, lifespan-free client)

Design Decisions:
    - SQLite in-memory: fast, no external dependency; FOR UPDATE is a no-op
      there, so lock behavior is covered by design, not by these tests
    - StaticPool: one shared connection, so every session sees the same memory DB
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from app.db.base import Base
from app.infrastructure.database import (
    DatabaseSessionManager, enable_sqlite_foreign_keys, get_db,
)
from app.main import app
from app.models.category import Category
from app.models.technology import Feature, Technology


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
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
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory

    # Route-level injection goes through the manager's rollback/mapping logic
    async def override_get_db():
        async with fake_manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.state.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    app.state.db_manager = None


@pytest.fixture
async def seed_vocabulary(test_db):
    """Categories web/mobile and a handful of technologies and features."""
    test_db.add_all([
        Category(id="web", label="Web Apps", count=0),
        Category(id="mobile", label="Mobile Apps", count=0),
        Technology(name="React"),
        Technology(name="Vue"),
        Technology(name="Go"),
        Feature(name="Responsive Design"),
        Feature(name="Offline Mode"),
    ])
    await test_db.commit()
