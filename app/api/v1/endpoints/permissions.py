"""Permissions API: catalogue and the caller's resolved permission set (tenant-scoped)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    get_access_control_service,
    get_current_permissions,
    get_current_user,
    get_tenant_id,
)
from app.application.dtos.user import AuthenticatedUser
from app.application.services.access_control import AccessControlService
from app.core.limiter import limit_writes
from app.domain.enums import PermissionAction, PermissionModule
from app.domain.value_objects.permission_set import ResolvedPermissionSet
from app.schemas.permission import (
    PermissionCatalogResponse,
    PermissionCheckResponse,
    PermissionSetResponse,
)

router = APIRouter()


@router.get("/catalog", response_model=PermissionCatalogResponse)
async def get_catalog(
    _: Annotated[AuthenticatedUser, Depends(get_current_user)],
):
    """Modules, actions, and the actions each module offers."""
    return PermissionCatalogResponse.build()


@router.get("/me", response_model=PermissionSetResponse)
async def get_my_permissions(
    permission_set: Annotated[ResolvedPermissionSet, Depends(get_current_permissions)],
):
    """Resolved permission set of the caller in the X-Tenant-ID tenant."""
    return PermissionSetResponse.from_permission_set(permission_set)


@router.post("/me/refresh", response_model=PermissionSetResponse)
@limit_writes
async def refresh_my_permissions(
    request: Request,
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    access: Annotated[AccessControlService, Depends(get_access_control_service)],
):
    """Drop the cached set and resolve again (after a role change)."""
    permission_set = await access.refresh(current_user.id, tenant_id)
    return PermissionSetResponse.from_permission_set(permission_set)


@router.get("/me/check", response_model=PermissionCheckResponse)
async def check_my_permission(
    permission_set: Annotated[ResolvedPermissionSet, Depends(get_current_permissions)],
    module: Annotated[PermissionModule, Query()],
    action: Annotated[PermissionAction, Query()],
):
    """Whether the caller may perform action on module."""
    return PermissionCheckResponse(
        module=module, action=action, allowed=permission_set.can(module, action)
    )
