"""UserRole repository: user-role assignments in a tenant."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.role import UserRoleAssignmentResult
from app.domain.exceptions import DuplicateAssignmentException
from app.infrastructure.persistence.models.permission import UserTenantRole
from app.infrastructure.persistence.models.role import TenantRole
from app.infrastructure.persistence.repositories.role_repo import _role_to_result


def _to_result(
    ur: UserTenantRole, role: TenantRole | None = None
) -> UserRoleAssignmentResult:
    return UserRoleAssignmentResult(
        id=ur.id,
        user_id=ur.user_id,
        tenant_id=ur.tenant_id,
        role_id=ur.role_id,
        assigned_by=ur.assigned_by,
        assigned_at=ur.assigned_at,
        role=_role_to_result(role) if role is not None else None,
    )


class UserRoleRepository:
    """User-role link table only. Assign/remove and list assignments."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _list(self, *conditions) -> list[UserRoleAssignmentResult]:
        result = await self.db.execute(
            select(UserTenantRole, TenantRole)
            .join(TenantRole, TenantRole.id == UserTenantRole.role_id)
            .where(*conditions)
            .order_by(UserTenantRole.assigned_at)
        )
        return [_to_result(ur, role) for ur, role in result.all()]

    async def get_assignments_for_user(
        self, user_id: str, tenant_id: str
    ) -> list[UserRoleAssignmentResult]:
        return await self._list(
            UserTenantRole.user_id == user_id,
            UserTenantRole.tenant_id == tenant_id,
            TenantRole.tenant_id == tenant_id,
        )

    async def get_assignments_for_tenant(
        self, tenant_id: str
    ) -> list[UserRoleAssignmentResult]:
        return await self._list(
            UserTenantRole.tenant_id == tenant_id,
            TenantRole.tenant_id == tenant_id,
        )

    async def assign_role_to_user(
        self,
        user_id: str,
        role_id: str,
        tenant_id: str,
        assigned_by: str | None = None,
    ) -> UserRoleAssignmentResult:
        ur = UserTenantRole(
            tenant_id=tenant_id,
            user_id=user_id,
            role_id=role_id,
            assigned_by=assigned_by,
        )
        try:
            # Savepoint so a duplicate does not poison the request transaction.
            async with self.db.begin_nested():
                self.db.add(ur)
                await self.db.flush()
        except IntegrityError:
            raise DuplicateAssignmentException(
                "Role already assigned to user",
                assignment_type="user_role",
                details_extra={"user_id": user_id, "role_id": role_id},
            ) from None
        await self.db.refresh(ur)
        return _to_result(ur)

    async def remove_role_from_user(
        self, user_id: str, role_id: str, tenant_id: str
    ) -> bool:
        result = await self.db.execute(
            select(UserTenantRole).where(
                UserTenantRole.user_id == user_id,
                UserTenantRole.role_id == role_id,
                UserTenantRole.tenant_id == tenant_id,
            )
        )
        ur = result.scalar_one_or_none()
        if not ur:
            return False
        await self.db.delete(ur)
        await self.db.flush()
        return True
