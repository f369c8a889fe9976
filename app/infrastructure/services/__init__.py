"""Infrastructure implementations of application service interfaces."""

from app.infrastructure.services.permission_resolver import RoleAssignmentStore

__all__ = [
    "RoleAssignmentStore",
]
