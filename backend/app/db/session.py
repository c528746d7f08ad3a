"""Async Session Factory — provides async DB sessions for direct usage outside FastAPI.

Invariants:
    - Same engine configuration rules as DatabaseSessionManager (SQLite gets FK enforcement)
    - Meant for scripts (seed_catalog) and other non-request contexts

Design Decisions:
    - Separate from infrastructure/database.py: this is a convenience for non-FastAPI contexts
"""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from app.infrastructure.database import enable_sqlite_foreign_keys


def create_session_factory(
    database_url: str,
) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory for the given database URL."""
    engine = create_async_engine(database_url, echo=False)
    if make_url(database_url).get_backend_name() == "sqlite":
        enable_sqlite_foreign_keys(engine)
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
