"""RolePermission repository: (module, action) rows of a role."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.permission import RolePermissionResult
from app.infrastructure.persistence.models.permission import TenantRolePermission


def _to_result(rp: TenantRolePermission) -> RolePermissionResult:
    return RolePermissionResult(
        id=rp.id,
        role_id=rp.role_id,
        module=rp.module,
        action=rp.action,
        allowed=rp.allowed,
    )


class RolePermissionRepository:
    """Role grant rows only. Callers check the role belongs to the tenant first."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_permissions_for_role(
        self, role_id: str
    ) -> list[RolePermissionResult]:
        result = await self.db.execute(
            select(TenantRolePermission)
            .where(TenantRolePermission.role_id == role_id)
            .order_by(TenantRolePermission.module, TenantRolePermission.action)
        )
        return [_to_result(rp) for rp in result.scalars().all()]

    async def set_permission(
        self, role_id: str, module: str, action: str, allowed: bool
    ) -> RolePermissionResult:
        """Insert or update the (role, module, action) row."""
        result = await self.db.execute(
            select(TenantRolePermission).where(
                TenantRolePermission.role_id == role_id,
                TenantRolePermission.module == module,
                TenantRolePermission.action == action,
            )
        )
        rp = result.scalar_one_or_none()
        if rp is None:
            rp = TenantRolePermission(
                role_id=role_id, module=module, action=action, allowed=allowed
            )
            self.db.add(rp)
        else:
            rp.allowed = allowed
        await self.db.flush()
        await self.db.refresh(rp)
        return _to_result(rp)
