"""Application DTOs (no ORM dependency)."""

from app.application.dtos.permission import GrantRow, RolePermissionResult
from app.application.dtos.role import (
    RoleAssignmentRow,
    RoleResult,
    UserRoleAssignmentResult,
)
from app.application.dtos.tenant import TenantResult
from app.application.dtos.user import AuthenticatedUser

__all__ = [
    "AuthenticatedUser",
    "GrantRow",
    "RoleAssignmentRow",
    "RolePermissionResult",
    "RoleResult",
    "TenantResult",
    "UserRoleAssignmentResult",
]
