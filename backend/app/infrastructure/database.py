"""Database Session Manager — async connection pool with automatic rollback and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - Connection loss and pool exhaustion map to TransientStoreError; other
      SQLAlchemy exceptions map to DatabaseError (core/errors.py)
    - SQLite connections enforce foreign keys (PRAGMA foreign_keys=ON)
    - is_unique_violation classifies IntegrityError by driver error code,
      never by message text

Design Decisions:
    - One manager per process, created in the FastAPI lifespan and kept on
      app.state; get_db reads it from the request (ADR: no global import side effects)
    - close() disposes the engine on graceful shutdown
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)

from app.core.errors import (
    DatabaseError, DuplicateKeyError, PortfolioError, TransientStoreError,
)

logger = logging.getLogger(__name__)


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ships with FK enforcement off; turn it on for every new connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Postgres SQLSTATE unique_violation; SQLite extended result names
_UNIQUE_SQLSTATE = "23505"
_SQLITE_UNIQUE_ERRORS = frozenset({"SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"})


def is_unique_violation(exc: IntegrityError) -> bool:
    """True for a unique or primary-key collision; False for NOT NULL, FK and CHECK."""
    orig = exc.orig
    if getattr(orig, "sqlstate", None) == _UNIQUE_SQLSTATE:
        return True
    return getattr(orig, "sqlite_errorname", None) in _SQLITE_UNIQUE_ERRORS


def integrity_error_for(
    exc: IntegrityError, resource_type: str, natural_key: object,
) -> PortfolioError:
    """DuplicateKeyError for key collisions, DatabaseError for any other constraint."""
    if is_unique_violation(exc):
        return DuplicateKeyError(resource_type, natural_key)
    logger.error(
        f"Constraint violation writing {resource_type} {natural_key}: {exc.orig}",
        extra={"entity_kind": resource_type, "natural_key": str(natural_key)},
    )
    return DatabaseError(f"{resource_type} {natural_key} violates a constraint", "write")


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        pool_timeout: float = 30.0,
        echo: bool = False,
    ):
        if make_url(database_url).get_backend_name() == "sqlite":
            # SQLite pools do not take size/overflow arguments
            self.engine = create_async_engine(database_url, echo=echo)
            enable_sqlite_foreign_keys(self.engine)
        else:
            self.engine = create_async_engine(
                database_url,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_pre_ping=True,
                pool_recycle=3600,
                echo=echo,
            )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except PortfolioError:
            await session.rollback()
            raise
        except (OperationalError, PoolTimeoutError) as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise TransientStoreError("Connection or operational error", "execute")
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise DatabaseError("Database driver error", "query")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown")
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def close(self) -> None:
        await self.engine.dispose()


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    return DatabaseSessionManager(database_url, **kwargs)


def get_db_manager(request: Request) -> DatabaseSessionManager:
    manager = getattr(request.app.state, "db_manager", None)
    if manager is None:
        raise RuntimeError("Database not initialized")
    return manager


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with get_db_manager(request).session() as session:
        yield session
