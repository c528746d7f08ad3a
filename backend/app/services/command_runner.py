"""Command Runner — turns a unit of store work into a CommandResult.

Invariants:
    - Every command runs under a deadline (asyncio.timeout); None disables it
    - Domain errors (those with an Outcome) become failure results after rollback
    - Timeouts, lost connections and pool exhaustion become TRANSIENT results
      after rollback; nothing is retried here
    - Errors without an Outcome (DatabaseError, programming errors) propagate
      to the session manager and the global handler

Design Decisions:
    - Base class over decorator: subclasses keep the same db/timeout pair and
      the shared commit helpers (ADR: one seam for transaction policy)
"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import (
    IntegrityError, OperationalError, SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import PortfolioError, TransientStoreError
from app.core.results import CommandResult
from app.infrastructure.database import integrity_error_for

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CommandRunner:
    """Shared transaction and error policy for command classes."""

    def __init__(self, db: AsyncSession, timeout_seconds: float | None = None):
        self.db = db
        self.timeout_seconds = timeout_seconds

    async def _run(
        self,
        operation: str,
        work: Callable[[], Awaitable[CommandResult[T]]],
        timeout_seconds: float | None = None,
    ) -> CommandResult[T]:
        deadline = timeout_seconds if timeout_seconds is not None else self.timeout_seconds
        try:
            async with asyncio.timeout(deadline):
                return await work()
        except TimeoutError:
            await self._rollback(operation)
            logger.warning(
                f"{operation} exceeded {deadline}s",
                extra={"error_code": "STORE_UNAVAILABLE"},
            )
            return CommandResult.failure(
                TransientStoreError("deadline exceeded", operation),
            )
        except (OperationalError, PoolTimeoutError) as e:
            await self._rollback(operation)
            logger.warning(
                f"{operation} failed transiently: {e}",
                extra={"error_code": "STORE_UNAVAILABLE"},
            )
            return CommandResult.failure(
                TransientStoreError("connection or lock failure", operation),
            )
        except PortfolioError as e:
            if e.outcome is None:
                raise
            await self._rollback(operation)
            logger.info(
                f"{operation}: {e.message}",
                extra={
                    "error_code": e.code,
                    "entity_kind": e.context.entity_kind,
                    "natural_key": e.context.natural_key,
                },
            )
            return CommandResult.failure(e)

    async def _commit(self, resource_type: str, natural_key: object) -> None:
        """Commit; a unique-constraint race at commit time is a duplicate key,
        any other constraint failure a DatabaseError."""
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise integrity_error_for(e, resource_type, natural_key)

    async def _rollback(self, operation: str) -> None:
        try:
            await self.db.rollback()
        except SQLAlchemyError as e:
            logger.error(f"Rollback after {operation} failed: {e}")
