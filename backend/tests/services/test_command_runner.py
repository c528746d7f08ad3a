"""Command Runner — verifies error policy at the command boundary.

Invariants:
    - Deadline exceeded → TRANSIENT result, nothing raised
    - OperationalError / pool timeout → TRANSIENT result
    - Domain errors → failure result carrying the error
    - Errors without an outcome propagate
"""

import asyncio

import pytest
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError

from app.core.domain_types import Outcome
from app.core.errors import (
    DatabaseError, ResourceNotFoundError, TransientStoreError,
)
from app.core.results import CommandResult
from app.services.command_runner import CommandRunner


async def test_deadline_exceeded_is_transient(test_db):
    runner = CommandRunner(test_db, timeout_seconds=0.01)

    async def slow():
        await asyncio.sleep(1)
        return CommandResult.success()

    result = await runner._run("slow_command", slow)

    assert result.outcome == Outcome.TRANSIENT
    assert isinstance(result.error, TransientStoreError)
    assert result.error.context.retry_after_ms == 1000


async def test_per_call_deadline_overrides_default(test_db):
    runner = CommandRunner(test_db, timeout_seconds=None)

    async def slow():
        await asyncio.sleep(1)
        return CommandResult.success()

    result = await runner._run("slow_import", slow, timeout_seconds=0.01)
    assert result.outcome == Outcome.TRANSIENT


async def test_no_deadline_lets_work_finish(test_db):
    async def work():
        await asyncio.sleep(0)
        return CommandResult.success("done")

    result = await CommandRunner(test_db)._run("quick", work)
    assert result.ok
    assert result.value == "done"


@pytest.mark.parametrize("error", [
    OperationalError("SELECT 1", {}, Exception("database is locked")),
    PoolTimeoutError("QueuePool limit reached"),
])
async def test_connection_failures_are_transient(test_db, error):
    async def work():
        raise error

    result = await CommandRunner(test_db)._run("flaky", work)
    assert result.outcome == Outcome.TRANSIENT
    assert result.error.code == "STORE_UNAVAILABLE"


async def test_domain_error_becomes_failure_result(test_db):
    async def work():
        raise ResourceNotFoundError("Category", "games")

    result = await CommandRunner(test_db)._run("get_category", work)

    assert result.outcome == Outcome.NOT_FOUND
    assert not result.ok
    with pytest.raises(ResourceNotFoundError):
        result.unwrap()


async def test_error_without_outcome_propagates(test_db):
    async def work():
        raise DatabaseError("disk full", "insert")

    with pytest.raises(DatabaseError):
        await CommandRunner(test_db)._run("insert", work)
