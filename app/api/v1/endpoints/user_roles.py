"""User-roles API: list, assign and remove roles of a user (tenant-scoped)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from app.api.v1.dependencies import get_role_service, get_tenant_id, require_permission
from app.application.dtos.user import AuthenticatedUser
from app.application.services.role_service import RoleService
from app.core.limiter import limit_writes
from app.domain.enums import PermissionAction, PermissionModule
from app.schemas.role import UserRoleAssign, UserRoleAssignmentResponse

router = APIRouter()

_can_view = require_permission(PermissionModule.COLLABORATORS, PermissionAction.VIEW)
_can_update = require_permission(PermissionModule.COLLABORATORS, PermissionAction.UPDATE)


@router.get("/roles", response_model=list[UserRoleAssignmentResponse])
async def list_tenant_assignments(
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[AuthenticatedUser, Depends(_can_view)],
):
    """Every user-role assignment in the tenant."""
    rows = await role_service.list_assignments(tenant_id)
    return [UserRoleAssignmentResponse.model_validate(r) for r in rows]


@router.get("/{user_id}/roles", response_model=list[UserRoleAssignmentResponse])
async def list_user_roles(
    user_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[AuthenticatedUser, Depends(_can_view)],
):
    """Roles assigned to a user in the tenant (active and inactive)."""
    rows = await role_service.list_user_roles(tenant_id, user_id)
    return [UserRoleAssignmentResponse.model_validate(r) for r in rows]


@router.post(
    "/{user_id}/roles", response_model=UserRoleAssignmentResponse, status_code=201
)
@limit_writes
async def assign_role_to_user(
    request: Request,
    user_id: str,
    body: UserRoleAssign,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    current_user: Annotated[AuthenticatedUser, Depends(_can_update)],
):
    """Assign a role of this tenant to a user. 409 if already assigned."""
    assignment = await role_service.assign_role(
        tenant_id, user_id, body.role_id, assigned_by=current_user.id
    )
    return UserRoleAssignmentResponse.model_validate(assignment)


@router.delete("/{user_id}/roles/{role_id}", status_code=204)
@limit_writes
async def remove_role_from_user(
    request: Request,
    user_id: str,
    role_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[AuthenticatedUser, Depends(_can_update)],
):
    """Remove a role from a user. 404 if the user does not hold it."""
    await role_service.remove_role(tenant_id, user_id, role_id)
    return Response(status_code=204)
