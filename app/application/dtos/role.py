"""DTOs for role use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class RoleResult:
    """Role read-model (result of get_by_id_and_tenant, get_by_tenant, create_role, etc.)."""

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


@dataclass(frozen=True)
class RoleAssignmentRow:
    """One assignment of a user joined to its role, as returned by the role-assignment store.

    Values are raw column values; dashboard_scope may hold anything the table holds.
    """

    role_id: str
    name: str
    is_active: bool
    dashboard_scope: str | None
    can_see_own_commissions: bool
    can_see_team_commissions: bool
    can_see_all_commissions: bool
    is_super_role: bool = False


@dataclass(frozen=True)
class UserRoleAssignmentResult:
    """User-role assignment read-model, with the assigned role when joined."""

    id: str
    user_id: str
    tenant_id: str
    role_id: str
    assigned_by: str | None
    assigned_at: datetime | None
    role: RoleResult | None = None
