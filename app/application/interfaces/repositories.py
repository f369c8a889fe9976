"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.permission import RolePermissionResult
    from app.application.dtos.role import RoleResult, UserRoleAssignmentResult
    from app.application.dtos.tenant import TenantResult


# Tenant repository interface
class ITenantRepository(Protocol):
    """Protocol for tenant lookups (tenant header validation)."""

    async def get_by_id(self, tenant_id: str) -> TenantResult | None:
        """Return tenant by ID."""

    async def get_by_code(self, code: str) -> TenantResult | None:
        """Return tenant by unique code."""


# Role repository interface
class IRoleRepository(Protocol):
    """Protocol for tenant role repository (RoleService)."""

    async def create_role(
        self,
        tenant_id: str,
        name: str,
        description: str | None = None,
        **attributes: Any,
    ) -> RoleResult:
        """Create a role; attributes are scope/flag columns."""

    async def get_by_id_and_tenant(
        self, role_id: str, tenant_id: str
    ) -> RoleResult | None:
        """Return role by id and tenant."""

    async def get_by_name_and_tenant(
        self, name: str, tenant_id: str
    ) -> RoleResult | None:
        """Return role by name and tenant."""

    async def get_by_tenant(
        self,
        tenant_id: str,
        skip: int = 0,
        limit: int = 100,
        *,
        include_inactive: bool = False,
    ) -> list[RoleResult]:
        """List roles for tenant ordered by name."""

    async def has_any_role(self, tenant_id: str) -> bool:
        """Return True if the tenant has at least one role (active or not)."""

    async def update_role(
        self, role_id: str, tenant_id: str, **changes: Any
    ) -> RoleResult | None:
        """Apply non-None changes; return updated role or None if not found."""

    async def delete_role(self, role_id: str, tenant_id: str) -> bool:
        """Hard-delete role (grants and assignments cascade). True if deleted."""


# Role permission (grant) repository interface
class IRolePermissionRepository(Protocol):
    """Protocol for role grant rows (role editor)."""

    async def get_permissions_for_role(
        self, role_id: str
    ) -> list[RolePermissionResult]:
        """Return every grant row (allowed or not) for role."""

    async def set_permission(
        self, role_id: str, module: str, action: str, allowed: bool
    ) -> RolePermissionResult:
        """Insert or update the (role, module, action) row."""


# User-role assignment repository interface
class IUserRoleRepository(Protocol):
    """Protocol for user-role assignments in a tenant."""

    async def get_assignments_for_user(
        self, user_id: str, tenant_id: str
    ) -> list[UserRoleAssignmentResult]:
        """Return all assignments of user in tenant (with role)."""

    async def get_assignments_for_tenant(
        self, tenant_id: str
    ) -> list[UserRoleAssignmentResult]:
        """Return all assignments in tenant (with role)."""

    async def assign_role_to_user(
        self,
        user_id: str,
        role_id: str,
        tenant_id: str,
        assigned_by: str | None = None,
    ) -> UserRoleAssignmentResult:
        """Create assignment. Raises DuplicateAssignmentException if already assigned."""

    async def remove_role_from_user(
        self, user_id: str, role_id: str, tenant_id: str
    ) -> bool:
        """Delete assignment. True if removed."""
