"""Error Hierarchy — verifies outcome discriminants and the response envelope."""

from app.core.domain_types import Outcome
from app.core.errors import (
    DatabaseError, DependentsExistError, DuplicateKeyError, ErrorCategory,
    PortfolioError, ResourceNotFoundError, TransientStoreError,
)


def test_outcomes_per_error_type():
    assert ResourceNotFoundError("Category", "x").outcome == Outcome.NOT_FOUND
    assert DuplicateKeyError("Category", "x").outcome == Outcome.DUPLICATE_KEY
    assert DependentsExistError("Category", "x", 1, "projects").outcome == Outcome.CONFLICT
    assert TransientStoreError("timeout", "query").outcome == Outcome.TRANSIENT
    assert DatabaseError("boom", "query").outcome is None


def test_all_errors_share_base():
    for error in (
        ResourceNotFoundError("Category", "x"),
        DuplicateKeyError("Category", "x"),
        TransientStoreError("timeout", "query"),
    ):
        assert isinstance(error, PortfolioError)


def test_not_found_response_envelope():
    body = ResourceNotFoundError("Category", "missing").to_response()
    assert body["error"]["code"] == "RESOURCE_NOT_FOUND"
    assert body["error"]["category"] == ErrorCategory.RESOURCE_NOT_FOUND.value
    assert body["error"]["context"]["entity_kind"] == "Category"
    assert body["error"]["context"]["natural_key"] == "missing"
    assert "missing" in body["error"]["message"]


def test_dependents_exist_carries_count():
    error = DependentsExistError("Category", "web", 3, "projects")
    body = error.to_response()["error"]
    assert error.dependent_count == 3
    assert body["code"] == "DEPENDENTS_EXIST"
    assert body["dependent_count"] == 3
    assert body["dependent_type"] == "projects"


def test_transient_sets_retry_after():
    error = TransientStoreError("deadline exceeded", "delete_category")
    assert error.context.retry_after_ms == 1000
    assert error.code == "STORE_UNAVAILABLE"
