"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    IRolePermissionRepository,
    IRoleRepository,
    ITenantRepository,
    IUserRoleRepository,
)
from app.application.interfaces.services import ICacheService, IRoleAssignmentStore

__all__ = [
    "ICacheService",
    "IRoleAssignmentStore",
    "IRolePermissionRepository",
    "IRoleRepository",
    "ITenantRepository",
    "IUserRoleRepository",
]
