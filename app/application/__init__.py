"""Application layer: interfaces, DTOs and services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, role store, cache).
"""

from app.application.interfaces import (
    ICacheService,
    IRoleAssignmentStore,
    IRolePermissionRepository,
    IRoleRepository,
    ITenantRepository,
    IUserRoleRepository,
)
from app.application.services.access_control import AccessControlService
from app.application.services.role_service import RoleService

__all__ = [
    "AccessControlService",
    "ICacheService",
    "IRoleAssignmentStore",
    "IRolePermissionRepository",
    "IRoleRepository",
    "ITenantRepository",
    "IUserRoleRepository",
    "RoleService",
]
