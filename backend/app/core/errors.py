"""Error Hierarchy — typed, categorized exceptions for all catalog failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every domain error carries an Outcome discriminant; callers branch on it,
      never on the message text
    - to_response() produces the REST envelope; no internal details leaked
    - HTTP status mapping lives in the transport layer (api/error_handlers.py)

Design Decisions:
    - Single hierarchy with PortfolioError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - DatabaseError has no outcome: unexpected store failures are not part of the
      command result taxonomy and surface as 500
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

from app.core.domain_types import Outcome


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    entity_kind: str | None = None
    natural_key: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class PortfolioError(Exception):
    """Base exception for all catalog errors."""

    outcome: Outcome | None = None

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def details(self) -> dict:
        """Extra payload fields for the response envelope."""
        return {}

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        body = {
            "code": self.code,
            "message": self.context.user_message or self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
            "context": {
                "entity_kind": self.context.entity_kind,
                "natural_key": self.context.natural_key,
                "retry_after_ms": self.context.retry_after_ms,
            },
        }
        body.update(self.details())
        return {"error": body}


# ─── Domain Errors ──────────────────────────────────────────────

class ResourceNotFoundError(PortfolioError):
    """Requested resource does not exist."""
    outcome = Outcome.NOT_FOUND

    def __init__(
        self, resource_type: str, resource_id: Any, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext(
            entity_kind=resource_type, natural_key=str(resource_id),
        )
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class DuplicateKeyError(PortfolioError):
    """A create or upsert collided with an existing natural key."""
    outcome = Outcome.DUPLICATE_KEY

    def __init__(
        self, resource_type: str, natural_key: Any, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext(
            entity_kind=resource_type, natural_key=str(natural_key),
        )
        super().__init__(
            f"{resource_type} '{natural_key}' already exists",
            "DUPLICATE_KEY", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx,
        )
        self.resource_type = resource_type
        self.natural_key = natural_key


class DependentsExistError(PortfolioError):
    """Delete refused because other rows still reference the parent."""
    outcome = Outcome.CONFLICT

    def __init__(
        self,
        resource_type: str,
        resource_id: Any,
        dependent_count: int,
        dependent_type: str,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext(
            entity_kind=resource_type, natural_key=str(resource_id),
        )
        super().__init__(
            f"Cannot delete {resource_type} '{resource_id}': "
            f"{dependent_count} {dependent_type} still reference it",
            "DEPENDENTS_EXIST", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.dependent_count = dependent_count
        self.dependent_type = dependent_type

    def details(self) -> dict:
        return {
            "dependent_count": self.dependent_count,
            "dependent_type": self.dependent_type,
        }


# ─── Infrastructure Errors ──────────────────────────────────────

class TransientStoreError(PortfolioError):
    """Store timeout or connection failure. Safe to retry the whole command."""
    outcome = Outcome.TRANSIENT

    def __init__(
        self,
        message: str,
        operation: str,
        retry_after_ms: int | None = 1000,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            f"Store {operation} unavailable: {message}",
            "STORE_UNAVAILABLE", ErrorCategory.TIMEOUT,
            ErrorSeverity.WARNING, ctx,
        )
        self.operation = operation


class DatabaseError(PortfolioError):
    """Database operation failed."""

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context,
        )
        self.operation = operation
