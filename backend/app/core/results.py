"""Command Results — explicit success/failure values returned by every catalog command.

Invariants:
    - A CommandResult is exactly one of: success, partial success, or failure
    - Failures always carry the PortfolioError that produced them
    - PARTIAL_SUCCESS is ok: the value is valid, `skipped` lists the natural keys
      that could not be resolved
    - All types are PURE data: no IO, no DB

Design Decisions:
    - Result values over exceptions at the command boundary: the transport layer
      decides status codes (ADR: commands know nothing about HTTP)
    - unwrap() re-raises the original error so routes can defer to the global handler
"""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from app.core.domain_types import CountStatus, Outcome
from app.core.errors import PortfolioError

T = TypeVar("T")


@dataclass
class CommandResult(Generic[T]):
    """Outcome of one command against the store."""
    outcome: Outcome
    value: T | None = None
    error: PortfolioError | None = None
    skipped: list[str] = field(default_factory=list)

    @classmethod
    def success(cls, value: T | None = None) -> "CommandResult[T]":
        return cls(Outcome.SUCCESS, value=value)

    @classmethod
    def from_report(cls, value: T, skipped: list[str]) -> "CommandResult[T]":
        """SUCCESS when nothing was skipped, PARTIAL_SUCCESS otherwise."""
        if skipped:
            return cls(Outcome.PARTIAL_SUCCESS, value=value, skipped=list(skipped))
        return cls(Outcome.SUCCESS, value=value)

    @classmethod
    def failure(cls, error: PortfolioError) -> "CommandResult[T]":
        if error.outcome is None:
            raise ValueError(f"{type(error).__name__} has no command outcome")
        return cls(error.outcome, error=error)

    @property
    def ok(self) -> bool:
        return self.outcome in (Outcome.SUCCESS, Outcome.PARTIAL_SUCCESS)

    def unwrap(self) -> T:
        """Return the value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value


@dataclass(frozen=True)
class SyncReport:
    """Result of reconciling one owner's join rows against a target key set."""
    owner_id: Any
    linked: tuple[str, ...]
    skipped: tuple[str, ...]

    @property
    def complete(self) -> bool:
        return not self.skipped


@dataclass(frozen=True)
class CountOutcome:
    """Per-parent result of a counter recalculation."""
    parent_id: Any
    new_count: int | None
    status: CountStatus
    error: str | None = None


@dataclass(frozen=True)
class DeleteCheck:
    """Live dependent count for a parent row."""
    allowed: bool
    dependent_count: int


@dataclass(frozen=True)
class UpsertResult(Generic[T]):
    entity: T
    created: bool
    changed: bool = True
