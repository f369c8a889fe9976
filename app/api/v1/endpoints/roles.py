"""Roles API: list, get, create, update, delete, duplicate, defaults and role permissions (tenant-scoped)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from app.api.v1.dependencies import get_role_service, get_tenant_id, require_permission
from app.application.dtos.user import AuthenticatedUser
from app.application.services.role_service import RoleService
from app.core.limiter import limit_writes
from app.domain.enums import PermissionAction, PermissionModule
from app.schemas.role import (
    RoleCreate,
    RoleDuplicate,
    RolePermissionResponse,
    RolePermissionsUpdate,
    RoleResponse,
    RoleUpdate,
)

router = APIRouter()

_can_view = require_permission(PermissionModule.SETTINGS, PermissionAction.VIEW)
_can_update = require_permission(PermissionModule.SETTINGS, PermissionAction.UPDATE)


@router.get("", response_model=list[RoleResponse])
async def list_roles(
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[AuthenticatedUser, Depends(_can_view)],
    skip: int = 0,
    limit: int = 100,
    include_inactive: bool = True,
):
    """List roles for tenant ordered by name."""
    roles = await role_service.list_roles(
        tenant_id, include_inactive=include_inactive, skip=skip, limit=limit
    )
    return [RoleResponse.model_validate(r) for r in roles]


@router.post("", response_model=RoleResponse, status_code=201)
@limit_writes
async def create_role(
    request: Request,
    body: RoleCreate,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[AuthenticatedUser, Depends(_can_update)],
):
    """Create a role (no grants yet; set them with PUT /{role_id}/permissions)."""
    created = await role_service.create_role(
        tenant_id,
        body.name,
        body.description,
        dashboard_scope=body.dashboard_scope,
        can_see_own_commissions=body.can_see_own_commissions,
        can_see_team_commissions=body.can_see_team_commissions,
        can_see_all_commissions=body.can_see_all_commissions,
        is_super_role=body.is_super_role,
    )
    return RoleResponse.model_validate(created)


@router.post("/initialize-defaults", response_model=list[RoleResponse])
@limit_writes
async def initialize_default_roles(
    request: Request,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[AuthenticatedUser, Depends(_can_update)],
):
    """Create the default roles; returns [] when the tenant already has roles."""
    created = await role_service.initialize_default_roles(tenant_id)
    return [RoleResponse.model_validate(r) for r in created]


@router.get("/{role_id}", response_model=RoleResponse)
async def get_role(
    role_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[AuthenticatedUser, Depends(_can_view)],
):
    """Get role by id (tenant-scoped)."""
    return RoleResponse.model_validate(await role_service.get_role(tenant_id, role_id))


@router.put("/{role_id}", response_model=RoleResponse)
@limit_writes
async def update_role(
    request: Request,
    role_id: str,
    body: RoleUpdate,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[AuthenticatedUser, Depends(_can_update)],
):
    """Partial update. System roles can be (de)activated but not renamed."""
    updated = await role_service.update_role(
        tenant_id, role_id, **body.model_dump(exclude_unset=True)
    )
    return RoleResponse.model_validate(updated)


@router.delete("/{role_id}", status_code=204)
@limit_writes
async def delete_role(
    request: Request,
    role_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[AuthenticatedUser, Depends(_can_update)],
):
    """Delete a non-system role with its grants and assignments."""
    await role_service.delete_role(tenant_id, role_id)
    return Response(status_code=204)


@router.post("/{role_id}/duplicate", response_model=RoleResponse, status_code=201)
@limit_writes
async def duplicate_role(
    request: Request,
    role_id: str,
    body: RoleDuplicate,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[AuthenticatedUser, Depends(_can_update)],
):
    """Copy a role (scopes and grants) under a new name."""
    copy = await role_service.duplicate_role(tenant_id, role_id, body.name)
    return RoleResponse.model_validate(copy)


@router.get("/{role_id}/permissions", response_model=list[RolePermissionResponse])
async def list_role_permissions(
    role_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[AuthenticatedUser, Depends(_can_view)],
):
    """Grant rows of a role (allowed and revoked)."""
    rows = await role_service.list_role_permissions(tenant_id, role_id)
    return [RolePermissionResponse.model_validate(r) for r in rows]


@router.put("/{role_id}/permissions", response_model=list[RolePermissionResponse])
@limit_writes
async def set_role_permissions(
    request: Request,
    role_id: str,
    body: RolePermissionsUpdate,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[AuthenticatedUser, Depends(_can_update)],
):
    """Upsert the listed (module, action, allowed) rows; returns all rows of the role."""
    for item in body.permissions:
        await role_service.set_permission(
            tenant_id, role_id, item.module, item.action, item.allowed
        )
    rows = await role_service.list_role_permissions(tenant_id, role_id)
    return [RolePermissionResponse.model_validate(r) for r in rows]
