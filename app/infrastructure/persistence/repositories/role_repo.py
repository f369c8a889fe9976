"""Role repository. Read methods return RoleResult (DTO); entity getters return ORM for writes."""

from __future__ import annotations

from typing import Any

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.role import RoleResult
from app.domain.exceptions import ValidationException
from app.infrastructure.persistence.models.role import TenantRole
from app.infrastructure.persistence.repositories.base import BaseRepository

# Columns update_role may change; anything else passed in is ignored.
_UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "description",
        "is_active",
        "is_super_role",
        "dashboard_scope",
        "can_see_own_commissions",
        "can_see_team_commissions",
        "can_see_all_commissions",
    }
)


def _role_to_result(r: TenantRole) -> RoleResult:
    """Map ORM TenantRole to application RoleResult."""
    return RoleResult(
        id=r.id,
        tenant_id=r.tenant_id,
        name=r.name,
        description=r.description,
        is_system_role=r.is_system_role,
        is_active=r.is_active,
        is_super_role=r.is_super_role,
        dashboard_scope=r.dashboard_scope,
        can_see_own_commissions=r.can_see_own_commissions,
        can_see_team_commissions=r.can_see_team_commissions,
        can_see_all_commissions=r.can_see_all_commissions,
    )


class RoleRepository(BaseRepository[TenantRole]):
    """Role repository. Read methods return RoleResult; use get_entity_by_id_and_tenant for update/delete."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, TenantRole)

    async def create_role(
        self,
        tenant_id: str,
        name: str,
        description: str | None = None,
        **attributes: Any,
    ) -> RoleResult:
        """Create a role; return read-model DTO.

        Raises ValidationException on unique (tenant_id, name) violation.
        """
        role = TenantRole(
            tenant_id=tenant_id,
            name=name,
            description=description,
            **attributes,
        )
        try:
            created = await self.create(role)
        except IntegrityError:
            raise ValidationException(
                f"Role with name '{name}' already exists", field="name"
            ) from None
        return _role_to_result(created)

    async def get_by_name_and_tenant(
        self, name: str, tenant_id: str
    ) -> RoleResult | None:
        result = await self.db.execute(
            select(TenantRole).where(
                TenantRole.name == name, TenantRole.tenant_id == tenant_id
            )
        )
        row = result.scalar_one_or_none()
        return _role_to_result(row) if row else None

    async def get_by_id_and_tenant(
        self, role_id: str, tenant_id: str
    ) -> RoleResult | None:
        """Return role by id and tenant (read-model DTO)."""
        orm = await self.get_entity_by_id_and_tenant(role_id, tenant_id)
        return _role_to_result(orm) if orm else None

    async def get_entity_by_id_and_tenant(
        self, role_id: str, tenant_id: str
    ) -> TenantRole | None:
        """Return role ORM by id and tenant for update/delete."""
        result = await self.db.execute(
            select(TenantRole).where(
                TenantRole.id == role_id, TenantRole.tenant_id == tenant_id
            )
        )
        return result.scalar_one_or_none()

    async def get_by_tenant(
        self,
        tenant_id: str,
        skip: int = 0,
        limit: int = 100,
        *,
        include_inactive: bool = False,
    ) -> list[RoleResult]:
        q = select(TenantRole).where(TenantRole.tenant_id == tenant_id)
        if not include_inactive:
            q = q.where(TenantRole.is_active.is_(True))
        q = q.order_by(TenantRole.name).offset(skip).limit(limit)
        result = await self.db.execute(q)
        return [_role_to_result(r) for r in result.scalars().all()]

    async def has_any_role(self, tenant_id: str) -> bool:
        result = await self.db.execute(
            select(exists().where(TenantRole.tenant_id == tenant_id))
        )
        return bool(result.scalar())

    async def update_role(
        self, role_id: str, tenant_id: str, **changes: Any
    ) -> RoleResult | None:
        """Apply non-None changes; return updated DTO or None if not found."""
        role = await self.get_entity_by_id_and_tenant(role_id, tenant_id)
        if role is None:
            return None
        for field, value in changes.items():
            if value is not None and field in _UPDATABLE_FIELDS:
                setattr(role, field, value)
        try:
            updated = await self.update(role)
        except IntegrityError:
            raise ValidationException(
                f"Role with name '{changes.get('name')}' already exists", field="name"
            ) from None
        return _role_to_result(updated)

    async def delete_role(self, role_id: str, tenant_id: str) -> bool:
        """Hard-delete role; grants and assignments go with it (ON DELETE CASCADE)."""
        role = await self.get_entity_by_id_and_tenant(role_id, tenant_id)
        if role is None:
            return False
        await self.delete(role)
        return True
