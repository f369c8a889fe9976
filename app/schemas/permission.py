"""Permission API schemas (catalogue, resolved set, single check)."""

from pydantic import BaseModel, Field

from app.domain.enums import (
    MODULE_ACTIONS,
    CommissionScope,
    DashboardScope,
    PermissionAction,
    PermissionModule,
)
from app.domain.value_objects.permission_set import ResolvedPermissionSet


class PermissionCatalogResponse(BaseModel):
    """Modules, actions, and the actions each module offers (role editor)."""

    modules: list[str]
    actions: list[str]
    module_actions: dict[str, list[str]]

    @classmethod
    def build(cls) -> "PermissionCatalogResponse":
        return cls(
            modules=PermissionModule.values(),
            actions=PermissionAction.values(),
            module_actions={
                m.value: [a.value for a in actions] for m, actions in MODULE_ACTIONS.items()
            },
        )


class PermissionSetResponse(BaseModel):
    """Resolved permission set of the caller in the current tenant."""

    permissions: dict[str, bool] = Field(
        default_factory=dict, description='Granted pairs as {"module:action": true}'
    )
    dashboard_scope: DashboardScope
    commission_scope: CommissionScope
    roles: list[str]
    is_admin: bool

    @classmethod
    def from_permission_set(
        cls, permission_set: ResolvedPermissionSet
    ) -> "PermissionSetResponse":
        return cls(
            permissions=permission_set.permissions,
            dashboard_scope=permission_set.dashboard_scope,
            commission_scope=permission_set.commission_scope,
            roles=list(permission_set.roles),
            is_admin=permission_set.is_admin,
        )


class PermissionCheckResponse(BaseModel):
    """Response for GET /permissions/me/check."""

    module: PermissionModule
    action: PermissionAction
    allowed: bool
