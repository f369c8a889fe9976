"""Access control and role management dependencies (composition root)."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.user import AuthenticatedUser
from app.application.services.access_control import AccessControlService
from app.application.services.payment_reference import IBANPolicy
from app.application.services.role_service import RoleService
from app.core.config import get_settings
from app.domain.enums import PermissionAction, PermissionModule
from app.domain.value_objects.permission_set import ResolvedPermissionSet
from app.infrastructure.persistence.database import get_db, transactional_session
from app.infrastructure.persistence.repositories import (
    RolePermissionRepository,
    RoleRepository,
    UserRoleRepository,
)
from app.infrastructure.services import RoleAssignmentStore

from .auth import get_current_user
from .tenant import get_tenant_id


def _build_access_control(request: Request, db: AsyncSession) -> AccessControlService:
    """AccessControlService over db with the app cache (app.state.cache, set in lifespan)."""
    settings = get_settings()
    return AccessControlService(
        store=RoleAssignmentStore(db),
        cache=getattr(request.app.state, "cache", None),
        cache_ttl=settings.cache_ttl_permissions,
        admin_name_fallback=settings.admin_role_name_fallback,
    )


async def get_access_control_service(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AccessControlService:
    """Access control for permission checks (read session)."""
    return _build_access_control(request, db)


async def get_role_service(request: Request) -> AsyncIterator[RoleService]:
    """Role service; all repositories share the request transaction.

    Cached permission sets are dropped only after that transaction commits.
    """
    async with transactional_session() as db:
        service = RoleService(
            role_repo=RoleRepository(db),
            role_permission_repo=RolePermissionRepository(db),
            user_role_repo=UserRoleRepository(db),
            access_control=_build_access_control(request, db),
            defer_invalidation=True,
        )
        yield service
    await service.flush_invalidations()


async def get_current_permissions(
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    access: Annotated[AccessControlService, Depends(get_access_control_service)],
) -> ResolvedPermissionSet:
    """Resolved permission set of the caller in the header tenant."""
    return await access.resolve(current_user.id, tenant_id)


def require_permission(module: PermissionModule | str, action: PermissionAction | str):
    """Dependency factory: require JWT auth and module:action in the header tenant.

    Module and action are validated when the route is declared.
    """
    required_module = PermissionModule(module)
    required_action = PermissionAction(action)

    async def _require(
        current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
        tenant_id: Annotated[str, Depends(get_tenant_id)],
        access: Annotated[AccessControlService, Depends(get_access_control_service)],
    ) -> AuthenticatedUser:
        await access.require(
            current_user.id, tenant_id, required_module, required_action
        )
        return current_user

    return _require


def get_iban_policy() -> IBANPolicy:
    """IBAN rules from settings (IBAN_LENIENT_CHECKSUM_COUNTRIES)."""
    return IBANPolicy(
        lenient_checksum_countries=get_settings().lenient_checksum_countries
    )
