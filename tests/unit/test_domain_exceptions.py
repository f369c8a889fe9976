"""Tests for domain exceptions (error_code, message, details) and their HTTP status mapping."""

import pytest

from app.core.exception_handlers import status_for_error_code
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    BrokerageException,
    DuplicateAssignmentException,
    PermissionStoreException,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    TenantNotFoundException,
    ValidationException,
)


def test_brokerage_exception_default_error_code() -> None:
    """Base BrokerageException uses class name as error_code when not provided."""
    exc = BrokerageException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "BrokerageException"
    assert exc.details == {}
    assert str(exc) == "Something failed"


def test_brokerage_exception_to_dict() -> None:
    exc = BrokerageException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {
        "error": "CUSTOM",
        "message": "Oops",
        "details": {"key": "value"},
    }


def test_validation_exception() -> None:
    """ValidationException sets VALIDATION_ERROR and optional field in details."""
    exc = ValidationException("Invalid name", field="name")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "name"}
    assert ValidationException("Invalid").details == {}


def test_authentication_exception() -> None:
    exc = AuthenticationException()
    assert exc.message == "Authentication failed"
    assert exc.error_code == "AUTHENTICATION_ERROR"


def test_authorization_exception_with_module_and_action() -> None:
    exc = AuthorizationException(module="settings", action="update")
    assert exc.message == "Permission denied: update on settings"
    assert exc.error_code == "PERMISSION_DENIED"
    assert exc.details == {"module": "settings", "action": "update"}


def test_authorization_exception_default_message() -> None:
    exc = AuthorizationException()
    assert exc.message == "Permission denied"
    assert exc.details == {}


def test_resource_not_found_exception() -> None:
    exc = ResourceNotFoundException("role", "r1")
    assert exc.message == "role not found: r1"
    assert exc.details == {"resource_type": "role", "resource_id": "r1"}


def test_duplicate_assignment_exception() -> None:
    exc = DuplicateAssignmentException(
        "Role already assigned to user", "user_role", {"user_id": "u1"}
    )
    assert exc.error_code == "DUPLICATE_ASSIGNMENT"
    assert exc.details == {"user_id": "u1", "assignment_type": "user_role"}


@pytest.mark.parametrize(
    ("exc", "status"),
    [
        (ValidationException("bad"), 400),
        (AuthenticationException(), 401),
        (AuthorizationException(), 403),
        (ResourceNotFoundException("role", "r1"), 404),
        (TenantNotFoundException("t1"), 404),
        (DuplicateAssignmentException("dup", "user_role"), 409),
        (SqlNotConfiguredException(), 503),
        (PermissionStoreException(), 503),
        (BrokerageException("other"), 400),
    ],
)
def test_status_for_error_code(exc: BrokerageException, status: int) -> None:
    assert status_for_error_code(exc.error_code) == status
