"""Resolved permission set: the derived, read-only answer to "what may this user do here".

Computed from role assignments and grants for one (user, tenant) pair. Grants are
held as a set of (module, action) enum pairs so an unknown module or action is a
ValueError at the call site rather than a silent deny.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

from app.domain.enums import (
    CommissionScope,
    DashboardScope,
    PermissionAction,
    PermissionModule,
)

T = TypeVar("T")

GrantPair = tuple[PermissionModule, PermissionAction]


def _as_module(module: PermissionModule | str) -> PermissionModule:
    return module if isinstance(module, PermissionModule) else PermissionModule(module)


def _as_action(action: PermissionAction | str) -> PermissionAction:
    return action if isinstance(action, PermissionAction) else PermissionAction(action)


def permission_key(module: PermissionModule | str, action: PermissionAction | str) -> str:
    """Return the external "module:action" spelling of a grant."""
    return f"{_as_module(module).value}:{_as_action(action).value}"


@dataclass(frozen=True)
class ResolvedPermissionSet:
    """Grants, visibility scopes, role names and admin flag for one user in one tenant.

    Administrators bypass the grant table entirely: can/can_any/can_all answer True
    for every valid (module, action). Everyone else is default-deny.
    """

    grants: frozenset[GrantPair] = frozenset()
    dashboard_scope: DashboardScope = DashboardScope.PERSONAL
    commission_scope: CommissionScope = CommissionScope.NONE
    roles: tuple[str, ...] = ()
    is_admin: bool = False

    @classmethod
    def empty(cls) -> ResolvedPermissionSet:
        """Safe default: nothing granted, lowest scopes, no roles, not admin."""
        return cls()

    @property
    def permissions(self) -> dict[str, bool]:
        """Granted pairs as {"module:action": True} (only granted keys are present)."""
        return {permission_key(m, a): True for m, a in sorted(self.grants)}

    def can(self, module: PermissionModule | str, action: PermissionAction | str) -> bool:
        """Return True if admin or the (module, action) pair is granted."""
        pair = (_as_module(module), _as_action(action))
        if self.is_admin:
            return True
        return pair in self.grants

    def can_any(
        self,
        module: PermissionModule | str,
        actions: Iterable[PermissionAction | str],
    ) -> bool:
        """Return True if admin or at least one of actions is granted on module."""
        mod = _as_module(module)
        acts = [_as_action(a) for a in actions]
        if self.is_admin:
            return True
        return any((mod, a) in self.grants for a in acts)

    def can_all(
        self,
        module: PermissionModule | str,
        actions: Iterable[PermissionAction | str],
    ) -> bool:
        """Return True if admin or every one of actions is granted on module."""
        mod = _as_module(module)
        acts = [_as_action(a) for a in actions]
        if self.is_admin:
            return True
        return all((mod, a) in self.grants for a in acts)

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable form (cache payload and API body)."""
        return {
            "permissions": self.permissions,
            "dashboard_scope": self.dashboard_scope.value,
            "commission_scope": self.commission_scope.value,
            "roles": list(self.roles),
            "is_admin": self.is_admin,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResolvedPermissionSet:
        """Rebuild from to_dict() output."""
        grants: set[GrantPair] = set()
        for key, allowed in (data.get("permissions") or {}).items():
            if not allowed:
                continue
            module, _, action = key.partition(":")
            grants.add((PermissionModule(module), PermissionAction(action)))
        return cls(
            grants=frozenset(grants),
            dashboard_scope=DashboardScope(data.get("dashboard_scope", "personal")),
            commission_scope=CommissionScope(data.get("commission_scope", "none")),
            roles=tuple(data.get("roles") or ()),
            is_admin=bool(data.get("is_admin", False)),
        )


def permission_gate(
    permission_set: ResolvedPermissionSet | None,
    module: PermissionModule | str,
    action: PermissionAction | str,
    children: T,
    fallback: T | None = None,
) -> T | None:
    """Return children when permitted, else fallback.

    A None permission_set means "not loaded yet": nothing is rendered (None),
    not even the fallback.
    """
    if permission_set is None:
        return None
    if permission_set.can(module, action):
        return children
    return fallback
