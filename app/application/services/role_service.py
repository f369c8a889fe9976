"""Role application service: roles, grants and user assignments for a tenant.

Every mutation drops the cached permission sets it can affect: role and grant
changes invalidate the whole tenant, assignment changes only the user. With
defer_invalidation the drops are queued until flush_invalidations(), which the
caller runs once the transaction has committed.
"""

from __future__ import annotations

import logging

from app.application.dtos.permission import RolePermissionResult
from app.application.dtos.role import RoleResult, UserRoleAssignmentResult
from app.application.interfaces.repositories import (
    IRolePermissionRepository,
    IRoleRepository,
    IUserRoleRepository,
)
from app.application.services.access_control import AccessControlService
from app.application.services.default_roles import DEFAULT_ROLES
from app.domain.enums import (
    DashboardScope,
    PermissionAction,
    PermissionModule,
    is_catalogued,
)
from app.domain.exceptions import ResourceNotFoundException, ValidationException

logger = logging.getLogger(__name__)

_MSG_DUPLICATE_ROLE = "Role with name '%s' already exists"


def _coerce_grant(
    module: PermissionModule | str, action: PermissionAction | str
) -> tuple[PermissionModule, PermissionAction]:
    try:
        mod = PermissionModule(module)
    except ValueError:
        raise ValidationException(f"Unknown module: {module}", field="module") from None
    try:
        act = PermissionAction(action)
    except ValueError:
        raise ValidationException(f"Unknown action: {action}", field="action") from None
    if not is_catalogued(mod, act):
        raise ValidationException(
            f"Action '{act.value}' is not available for module '{mod.value}'",
            field="action",
        )
    return mod, act


class RoleService:
    """Tenant role management (role editor, role assignment screens)."""

    def __init__(
        self,
        role_repo: IRoleRepository,
        role_permission_repo: IRolePermissionRepository,
        user_role_repo: IUserRoleRepository,
        access_control: AccessControlService,
        *,
        defer_invalidation: bool = False,
    ) -> None:
        self._role_repo = role_repo
        self._role_permission_repo = role_permission_repo
        self._user_role_repo = user_role_repo
        self._access_control = access_control
        self._defer_invalidation = defer_invalidation
        self._pending_tenants: set[str] = set()
        self._pending_users: set[tuple[str, str]] = set()

    async def _invalidate_tenant(self, tenant_id: str) -> None:
        if self._defer_invalidation:
            self._pending_tenants.add(tenant_id)
        else:
            await self._access_control.invalidate_tenant(tenant_id)

    async def _invalidate_user(self, user_id: str, tenant_id: str) -> None:
        if self._defer_invalidation:
            self._pending_users.add((user_id, tenant_id))
        else:
            await self._access_control.invalidate(user_id, tenant_id)

    async def flush_invalidations(self) -> None:
        """Apply queued cache drops. Call after the transaction has committed."""
        tenants, users = self._pending_tenants, self._pending_users
        self._pending_tenants, self._pending_users = set(), set()
        for tenant_id in tenants:
            await self._access_control.invalidate_tenant(tenant_id)
        for user_id, tenant_id in users:
            if tenant_id not in tenants:
                await self._access_control.invalidate(user_id, tenant_id)

    async def list_roles(
        self,
        tenant_id: str,
        *,
        include_inactive: bool = True,
        skip: int = 0,
        limit: int = 100,
    ) -> list[RoleResult]:
        return await self._role_repo.get_by_tenant(
            tenant_id, skip=skip, limit=limit, include_inactive=include_inactive
        )

    async def get_role(self, tenant_id: str, role_id: str) -> RoleResult:
        """Return role in tenant. Raises ResourceNotFoundException."""
        role = await self._role_repo.get_by_id_and_tenant(role_id, tenant_id)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        return role

    async def _ensure_name_free(self, tenant_id: str, name: str) -> None:
        # Best-effort; the (tenant_id, name) unique constraint is the backstop.
        if await self._role_repo.get_by_name_and_tenant(name, tenant_id):
            raise ValidationException(_MSG_DUPLICATE_ROLE % name, field="name")

    async def create_role(
        self,
        tenant_id: str,
        name: str,
        description: str | None = None,
        *,
        dashboard_scope: DashboardScope = DashboardScope.PERSONAL,
        can_see_own_commissions: bool = True,
        can_see_team_commissions: bool = False,
        can_see_all_commissions: bool = False,
        is_super_role: bool = False,
        is_system_role: bool = False,
    ) -> RoleResult:
        """Create a role. Raises ValidationException if the name is taken in tenant."""
        await self._ensure_name_free(tenant_id, name)
        created = await self._role_repo.create_role(
            tenant_id=tenant_id,
            name=name,
            description=description,
            dashboard_scope=DashboardScope(dashboard_scope).value,
            can_see_own_commissions=can_see_own_commissions,
            can_see_team_commissions=can_see_team_commissions,
            can_see_all_commissions=can_see_all_commissions,
            is_super_role=is_super_role,
            is_system_role=is_system_role,
        )
        logger.info("Role %s (%s) created in tenant %s", created.id, name, tenant_id)
        return created

    async def update_role(
        self,
        tenant_id: str,
        role_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        is_active: bool | None = None,
        dashboard_scope: DashboardScope | None = None,
        can_see_own_commissions: bool | None = None,
        can_see_team_commissions: bool | None = None,
        can_see_all_commissions: bool | None = None,
        is_super_role: bool | None = None,
    ) -> RoleResult:
        """Partial update. System roles keep their name."""
        role = await self.get_role(tenant_id, role_id)
        if name is not None and name != role.name:
            if role.is_system_role:
                raise ValidationException("System roles cannot be renamed", field="name")
            await self._ensure_name_free(tenant_id, name)
        updated = await self._role_repo.update_role(
            role_id,
            tenant_id,
            name=name,
            description=description,
            is_active=is_active,
            dashboard_scope=(
                DashboardScope(dashboard_scope).value if dashboard_scope is not None else None
            ),
            can_see_own_commissions=can_see_own_commissions,
            can_see_team_commissions=can_see_team_commissions,
            can_see_all_commissions=can_see_all_commissions,
            is_super_role=is_super_role,
        )
        if updated is None:
            raise ResourceNotFoundException("role", role_id)
        await self._invalidate_tenant(tenant_id)
        return updated

    async def delete_role(self, tenant_id: str, role_id: str) -> None:
        """Delete role with its grants and assignments. System roles cannot be deleted."""
        role = await self.get_role(tenant_id, role_id)
        if role.is_system_role:
            raise ValidationException("System roles cannot be deleted")
        if not await self._role_repo.delete_role(role_id, tenant_id):
            raise ResourceNotFoundException("role", role_id)
        await self._invalidate_tenant(tenant_id)
        logger.info("Role %s deleted in tenant %s", role_id, tenant_id)

    async def duplicate_role(
        self, tenant_id: str, role_id: str, new_name: str
    ) -> RoleResult:
        """Copy scopes and grant rows of role under new_name (never a system role)."""
        original = await self.get_role(tenant_id, role_id)
        await self._ensure_name_free(tenant_id, new_name)
        copy = await self._role_repo.create_role(
            tenant_id=tenant_id,
            name=new_name,
            description=f"Copie de {original.name}",
            dashboard_scope=original.dashboard_scope,
            can_see_own_commissions=original.can_see_own_commissions,
            can_see_team_commissions=original.can_see_team_commissions,
            can_see_all_commissions=original.can_see_all_commissions,
            is_super_role=original.is_super_role,
            is_system_role=False,
        )
        for row in await self._role_permission_repo.get_permissions_for_role(role_id):
            await self._role_permission_repo.set_permission(
                copy.id, row.module, row.action, row.allowed
            )
        return copy

    async def initialize_default_roles(self, tenant_id: str) -> list[RoleResult]:
        """Seed the default roles. Does nothing (returns []) if the tenant has any role."""
        if await self._role_repo.has_any_role(tenant_id):
            logger.info("Tenant %s already has roles; skipping defaults", tenant_id)
            return []
        created: list[RoleResult] = []
        for template in DEFAULT_ROLES:
            role = await self._role_repo.create_role(
                tenant_id=tenant_id,
                name=template.name,
                description=template.description,
                dashboard_scope=template.dashboard_scope.value,
                can_see_own_commissions=template.can_see_own_commissions,
                can_see_team_commissions=template.can_see_team_commissions,
                can_see_all_commissions=template.can_see_all_commissions,
                is_super_role=template.is_super_role,
                is_system_role=True,
            )
            for module, action in template.grants:
                await self._role_permission_repo.set_permission(
                    role.id, module.value, action.value, True
                )
            created.append(role)
        await self._invalidate_tenant(tenant_id)
        return created

    async def list_role_permissions(
        self, tenant_id: str, role_id: str
    ) -> list[RolePermissionResult]:
        await self.get_role(tenant_id, role_id)
        return await self._role_permission_repo.get_permissions_for_role(role_id)

    async def set_permission(
        self,
        tenant_id: str,
        role_id: str,
        module: PermissionModule | str,
        action: PermissionAction | str,
        allowed: bool,
    ) -> RolePermissionResult:
        """Grant or revoke one catalogued (module, action) on role."""
        mod, act = _coerce_grant(module, action)
        await self.get_role(tenant_id, role_id)
        result = await self._role_permission_repo.set_permission(
            role_id, mod.value, act.value, allowed
        )
        await self._invalidate_tenant(tenant_id)
        return result

    async def list_user_roles(
        self, tenant_id: str, user_id: str
    ) -> list[UserRoleAssignmentResult]:
        return await self._user_role_repo.get_assignments_for_user(user_id, tenant_id)

    async def list_assignments(self, tenant_id: str) -> list[UserRoleAssignmentResult]:
        return await self._user_role_repo.get_assignments_for_tenant(tenant_id)

    async def assign_role(
        self,
        tenant_id: str,
        user_id: str,
        role_id: str,
        assigned_by: str | None = None,
    ) -> UserRoleAssignmentResult:
        """Assign a role of this tenant to user. Raises DuplicateAssignmentException if held."""
        await self.get_role(tenant_id, role_id)
        assignment = await self._user_role_repo.assign_role_to_user(
            user_id=user_id,
            role_id=role_id,
            tenant_id=tenant_id,
            assigned_by=assigned_by,
        )
        await self._invalidate_user(user_id, tenant_id)
        return assignment

    async def remove_role(self, tenant_id: str, user_id: str, role_id: str) -> None:
        """Remove assignment. Raises ResourceNotFoundException if user does not hold role."""
        removed = await self._user_role_repo.remove_role_from_user(
            user_id, role_id, tenant_id
        )
        if not removed:
            raise ResourceNotFoundException("user_role", f"{user_id}/{role_id}")
        await self._invalidate_user(user_id, tenant_id)
