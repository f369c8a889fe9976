"""Access control: resolve a user's permission set in a tenant, with caching (store + cache ports).

Resolution is a pure function of the store's current rows: active roles are
merged into one ResolvedPermissionSet (highest scope wins, grants unioned).
Store failures fail closed to the empty set; callers cannot tell "not loaded"
from "denied", and that is intended.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from app.application.dtos.permission import GrantRow
from app.application.dtos.role import RoleAssignmentRow
from app.application.interfaces.services import ICacheService, IRoleAssignmentStore
from app.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_PERMISSION
from app.domain.enums import (
    CommissionScope,
    DashboardScope,
    PermissionAction,
    PermissionModule,
)
from app.domain.exceptions import AuthorizationException, PermissionStoreException
from app.domain.value_objects.permission_set import GrantPair, ResolvedPermissionSet

logger = logging.getLogger(__name__)

# Legacy admin names. "administrateur" also matches the fragment; it must stay
# an admin name even if the fragment rule is narrowed.
ADMIN_ROLE_NAME_EXACT = "administrateur"
ADMIN_ROLE_NAME_FRAGMENT = "admin"


def is_admin_role_name(name: str) -> bool:
    """Legacy heuristic: role name contains "admin" (any case) or is "administrateur"."""
    lowered = name.lower()
    return ADMIN_ROLE_NAME_FRAGMENT in lowered or lowered == ADMIN_ROLE_NAME_EXACT


def is_admin_role(role: RoleAssignmentRow, *, name_fallback: bool = True) -> bool:
    """Explicit super-role flag, or the name heuristic when name_fallback is on."""
    if role.is_super_role:
        return True
    return name_fallback and is_admin_role_name(role.name or "")


def _parse_dashboard_scope(role: RoleAssignmentRow) -> DashboardScope:
    if role.dashboard_scope is None:
        return DashboardScope.PERSONAL
    try:
        return DashboardScope(role.dashboard_scope)
    except ValueError:
        logger.warning(
            "Role %s has unknown dashboard_scope %r; treating as personal",
            role.role_id,
            role.dashboard_scope,
        )
        return DashboardScope.PERSONAL


def merge_dashboard_scope(roles: Iterable[RoleAssignmentRow]) -> DashboardScope:
    """Highest of global > team > personal. Stops at the first global; never downgrades."""
    scope = DashboardScope.PERSONAL
    for role in roles:
        role_scope = _parse_dashboard_scope(role)
        if role_scope is DashboardScope.GLOBAL:
            return DashboardScope.GLOBAL
        if role_scope is DashboardScope.TEAM and scope is DashboardScope.PERSONAL:
            scope = DashboardScope.TEAM
    return scope


def merge_commission_scope(roles: Iterable[RoleAssignmentRow]) -> CommissionScope:
    """Highest of all > team > own > none. Stops at the first all; never downgrades."""
    scope = CommissionScope.NONE
    for role in roles:
        if role.can_see_all_commissions:
            return CommissionScope.ALL
        if role.can_see_team_commissions and scope.rank < CommissionScope.TEAM.rank:
            scope = CommissionScope.TEAM
        if role.can_see_own_commissions and scope is CommissionScope.NONE:
            scope = CommissionScope.OWN
    return scope


def collect_grants(rows: Iterable[GrantRow]) -> frozenset[GrantPair]:
    """Union granted rows into (module, action) pairs; rows with unknown names are skipped."""
    grants: set[GrantPair] = set()
    for row in rows:
        try:
            grants.add((PermissionModule(row.module), PermissionAction(row.action)))
        except ValueError:
            logger.warning(
                "Ignoring grant with unknown module/action: %s:%s", row.module, row.action
            )
    return frozenset(grants)


def build_permission_set(
    active_roles: list[RoleAssignmentRow],
    grant_rows: Iterable[GrantRow],
    *,
    admin_name_fallback: bool = True,
) -> ResolvedPermissionSet:
    """Merge active roles and their granted rows into a ResolvedPermissionSet.

    With no active roles the result is the empty set, whatever grant_rows holds.
    """
    if not active_roles:
        return ResolvedPermissionSet.empty()
    return ResolvedPermissionSet(
        grants=collect_grants(grant_rows),
        dashboard_scope=merge_dashboard_scope(active_roles),
        commission_scope=merge_commission_scope(active_roles),
        roles=tuple(r.name for r in active_roles if r.name),
        is_admin=any(
            is_admin_role(r, name_fallback=admin_name_fallback) for r in active_roles
        ),
    )


def permission_cache_key(tenant_id: str, user_id: str) -> str:
    """Cache key for one user's resolved set in one tenant."""
    return CACHE_KEY_SEP.join((CACHE_PREFIX_PERMISSION, tenant_id, user_id))


class AccessControlService:
    """Resolves and queries permission sets; uses cache when available (5 min TTL typical).

    Every code path that mutates roles, grants or assignments must call
    invalidate()/invalidate_tenant(); otherwise answers stay as of the last resolve.
    """

    def __init__(
        self,
        store: IRoleAssignmentStore,
        cache: ICacheService | None = None,
        cache_ttl: int = 300,
        *,
        admin_name_fallback: bool = True,
    ) -> None:
        self.store = store
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.admin_name_fallback = admin_name_fallback

    def _cache_usable(self) -> bool:
        return self.cache is not None and self.cache.is_available()

    async def resolve(self, user_id: str, tenant_id: str) -> ResolvedPermissionSet:
        """Return the permission set for user in tenant. Never raises for store errors."""
        if not user_id or not tenant_id:
            return ResolvedPermissionSet.empty()

        key = permission_cache_key(tenant_id, user_id)
        if self._cache_usable():
            cached = await self.cache.get(key)
            if cached is not None:
                try:
                    return ResolvedPermissionSet.from_dict(cached)
                except (ValueError, TypeError, AttributeError):
                    logger.warning("Discarding malformed cached permission set %s", key)
                    await self.cache.delete(key)

        try:
            resolved = await self._resolve_from_store(user_id, tenant_id)
        except PermissionStoreException:
            logger.exception(
                "Permission resolution failed for user %s in tenant %s; denying all",
                user_id,
                tenant_id,
            )
            return ResolvedPermissionSet.empty()

        if self._cache_usable():
            await self.cache.set(key, resolved.to_dict(), ttl=self.cache_ttl)
        return resolved

    async def _resolve_from_store(
        self, user_id: str, tenant_id: str
    ) -> ResolvedPermissionSet:
        assignments = await self.store.fetch_role_assignments(user_id, tenant_id)
        active_roles = [a for a in assignments if a.is_active]
        if not active_roles:
            return ResolvedPermissionSet.empty()
        grant_rows = await self.store.fetch_granted_pairs(
            [r.role_id for r in active_roles], tenant_id
        )
        return build_permission_set(
            active_roles, grant_rows, admin_name_fallback=self.admin_name_fallback
        )

    async def refresh(self, user_id: str, tenant_id: str) -> ResolvedPermissionSet:
        """Drop the cached set and resolve again from the store."""
        await self.invalidate(user_id, tenant_id)
        return await self.resolve(user_id, tenant_id)

    async def can(
        self,
        user_id: str,
        tenant_id: str,
        module: PermissionModule | str,
        action: PermissionAction | str,
    ) -> bool:
        permissions = await self.resolve(user_id, tenant_id)
        return permissions.can(module, action)

    async def can_any(
        self,
        user_id: str,
        tenant_id: str,
        module: PermissionModule | str,
        actions: Iterable[PermissionAction | str],
    ) -> bool:
        permissions = await self.resolve(user_id, tenant_id)
        return permissions.can_any(module, actions)

    async def can_all(
        self,
        user_id: str,
        tenant_id: str,
        module: PermissionModule | str,
        actions: Iterable[PermissionAction | str],
    ) -> bool:
        permissions = await self.resolve(user_id, tenant_id)
        return permissions.can_all(module, actions)

    async def require(
        self,
        user_id: str,
        tenant_id: str,
        module: PermissionModule | str,
        action: PermissionAction | str,
    ) -> ResolvedPermissionSet:
        """Return the resolved set; raise AuthorizationException if module:action is not allowed."""
        permissions = await self.resolve(user_id, tenant_id)
        if not permissions.can(module, action):
            raise AuthorizationException(
                module=str(getattr(module, "value", module)),
                action=str(getattr(action, "value", action)),
            )
        return permissions

    async def invalidate(self, user_id: str, tenant_id: str) -> None:
        """Invalidate cached permissions for one user."""
        if self._cache_usable():
            await self.cache.delete(permission_cache_key(tenant_id, user_id))

    async def invalidate_tenant(self, tenant_id: str) -> None:
        """Invalidate all cached permissions for a tenant."""
        if self._cache_usable():
            await self.cache.delete_pattern(
                CACHE_KEY_SEP.join((CACHE_PREFIX_PERMISSION, tenant_id, "*"))
            )
