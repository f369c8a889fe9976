"""Role and role-assignment API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import DashboardScope, PermissionAction, PermissionModule


class RoleCreate(BaseModel):
    """Request body for creating a role."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=500)
    dashboard_scope: DashboardScope = DashboardScope.PERSONAL
    can_see_own_commissions: bool = True
    can_see_team_commissions: bool = False
    can_see_all_commissions: bool = False
    is_super_role: bool = False


class RoleUpdate(BaseModel):
    """Request body for updating a role (partial)."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=500)
    is_active: bool | None = None
    dashboard_scope: DashboardScope | None = None
    can_see_own_commissions: bool | None = None
    can_see_team_commissions: bool | None = None
    can_see_all_commissions: bool | None = None
    is_super_role: bool | None = None


class RoleDuplicate(BaseModel):
    """Request body for POST /roles/{role_id}/duplicate."""

    name: str = Field(..., min_length=1, max_length=255)


class RoleResponse(BaseModel):
    """Role list/detail response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    name: str
    description: str | None
    is_system_role: bool
    is_active: bool
    is_super_role: bool
    dashboard_scope: str
    can_see_own_commissions: bool
    can_see_team_commissions: bool
    can_see_all_commissions: bool


class RolePermissionItem(BaseModel):
    """One (module, action) switch of a role."""

    module: PermissionModule
    action: PermissionAction
    allowed: bool = True


class RolePermissionsUpdate(BaseModel):
    """Request body for PUT /roles/{role_id}/permissions (rows not listed are left as is)."""

    permissions: list[RolePermissionItem] = Field(..., max_length=200)


class RolePermissionResponse(BaseModel):
    """Role permission row."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    role_id: str
    module: str
    action: str
    allowed: bool


class UserRoleAssign(BaseModel):
    """Request body for assigning a role to a user."""

    role_id: str = Field(..., min_length=1, max_length=64)


class UserRoleAssignmentResponse(BaseModel):
    """User-role assignment with the role when joined."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    tenant_id: str
    role_id: str
    assigned_by: str | None
    assigned_at: datetime | None
    role: RoleResponse | None = None
