"""Domain layer: enums, value objects, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import (
    MODULE_ACTIONS,
    CommissionScope,
    DashboardScope,
    PermissionAction,
    PermissionModule,
    QRReferenceType,
)
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    BrokerageException,
    DuplicateAssignmentException,
    ResourceNotFoundException,
    TenantNotFoundException,
    ValidationException,
)
from app.domain.value_objects import ResolvedPermissionSet, permission_gate

__all__ = [
    # Enums
    "MODULE_ACTIONS",
    "CommissionScope",
    "DashboardScope",
    "PermissionAction",
    "PermissionModule",
    "QRReferenceType",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "BrokerageException",
    "DuplicateAssignmentException",
    "ResourceNotFoundException",
    "TenantNotFoundException",
    "ValidationException",
    # Value objects
    "ResolvedPermissionSet",
    "permission_gate",
]
