"""Reads role assignments and granted pairs from the DB (implements IRoleAssignmentStore)."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.permission import GrantRow
from app.application.dtos.role import RoleAssignmentRow
from app.domain.exceptions import PermissionStoreException
from app.infrastructure.persistence.models.permission import (
    TenantRolePermission,
    UserTenantRole,
)
from app.infrastructure.persistence.models.role import TenantRole

logger = logging.getLogger(__name__)


class RoleAssignmentStore:
    """Role-assignment store over tenant_role / tenant_role_permission / user_tenant_role.

    Database errors are re-raised as PermissionStoreException so the
    access-control service can fail closed.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def fetch_role_assignments(
        self, user_id: str, tenant_id: str
    ) -> list[RoleAssignmentRow]:
        """Every assignment of user in tenant joined to its role (active or not)."""
        query = (
            select(
                TenantRole.id,
                TenantRole.name,
                TenantRole.is_active,
                TenantRole.dashboard_scope,
                TenantRole.can_see_own_commissions,
                TenantRole.can_see_team_commissions,
                TenantRole.can_see_all_commissions,
                TenantRole.is_super_role,
            )
            .select_from(UserTenantRole)
            .join(TenantRole, TenantRole.id == UserTenantRole.role_id)
            .where(
                UserTenantRole.user_id == user_id,
                UserTenantRole.tenant_id == tenant_id,
                TenantRole.tenant_id == tenant_id,
            )
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            raise PermissionStoreException(
                f"Could not load role assignments: {type(e).__name__}"
            ) from e
        return [
            RoleAssignmentRow(
                role_id=row.id,
                name=row.name,
                is_active=row.is_active,
                dashboard_scope=row.dashboard_scope,
                can_see_own_commissions=row.can_see_own_commissions,
                can_see_team_commissions=row.can_see_team_commissions,
                can_see_all_commissions=row.can_see_all_commissions,
                is_super_role=row.is_super_role,
            )
            for row in result.all()
        ]

    async def fetch_granted_pairs(
        self, role_ids: Sequence[str], tenant_id: str
    ) -> list[GrantRow]:
        """(module, action) rows with allowed = true for role_ids, restricted to tenant."""
        if not role_ids:
            return []
        query = (
            select(TenantRolePermission.module, TenantRolePermission.action)
            .join(TenantRole, TenantRole.id == TenantRolePermission.role_id)
            .where(
                TenantRolePermission.role_id.in_(list(role_ids)),
                TenantRolePermission.allowed.is_(True),
                TenantRole.tenant_id == tenant_id,
            )
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            raise PermissionStoreException(
                f"Could not load role grants: {type(e).__name__}"
            ) from e
        rows = [GrantRow(module=row.module, action=row.action) for row in result.all()]
        logger.debug("Loaded %d grant rows for %d roles", len(rows), len(role_ids))
        return rows
