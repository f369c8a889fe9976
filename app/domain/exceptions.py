"""Domain exceptions for the brokerage core.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class BrokerageException(Exception):
    """Base exception for all application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the HTTP exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(BrokerageException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(BrokerageException):
    """Raised when authentication fails (e.g. invalid or missing token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(BrokerageException):
    """Raised when the user lacks the module:action grant for the operation."""

    def __init__(
        self,
        module: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional module, action, and message.

        Args:
            module: Optional permission module (e.g. 'clients', 'settings').
            action: Optional action that was attempted (e.g. 'view', 'update').
            message: Human-readable message; default used when module/action omitted.
        """
        if module and action:
            message = f"Permission denied: {action} on {module}"
        details: dict[str, Any] = {}
        if module:
            details["module"] = module
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class TenantNotFoundException(BrokerageException):
    """Raised when a requested tenant is not found."""

    def __init__(self, tenant_id: str) -> None:
        super().__init__(
            f"Tenant not found: {tenant_id}",
            "TENANT_NOT_FOUND",
            {"tenant_id": tenant_id},
        )


class ResourceNotFoundException(BrokerageException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'role').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class SqlNotConfiguredException(BrokerageException):
    """Raised when an operation requires the SQL database but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )


class DuplicateAssignmentException(BrokerageException):
    """Raised when assigning a role that is already assigned (unique constraint)."""

    def __init__(
        self,
        message: str,
        assignment_type: str,
        details_extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with message and assignment context.

        Args:
            message: Human-readable description (e.g. 'Role already assigned to user').
            assignment_type: 'user_role'.
            details_extra: Optional extra keys (e.g. user_id, role_id).
        """
        details = details_extra or {}
        details["assignment_type"] = assignment_type
        super().__init__(message, "DUPLICATE_ASSIGNMENT", details)


class PermissionStoreException(BrokerageException):
    """Raised by the role-assignment store when roles or grants cannot be read."""

    def __init__(self, message: str = "Role store unavailable") -> None:
        super().__init__(message, "PERMISSION_STORE_ERROR")
