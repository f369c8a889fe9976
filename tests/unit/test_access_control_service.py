"""Unit tests for AccessControlService and the permission-set merge rules."""

import pytest

from app.application.dtos.permission import GrantRow
from app.application.dtos.role import RoleAssignmentRow
from app.application.services.access_control import (
    AccessControlService,
    build_permission_set,
    collect_grants,
    is_admin_role,
    is_admin_role_name,
    merge_commission_scope,
    merge_dashboard_scope,
    permission_cache_key,
)
from app.domain.enums import (
    CommissionScope,
    DashboardScope,
    PermissionAction,
    PermissionModule,
)
from app.domain.exceptions import AuthorizationException
from app.domain.value_objects.permission_set import ResolvedPermissionSet

USER = "user-1"
TENANT = "tenant-1"


def _row(
    name: str = "Agent",
    *,
    scope: str | None = "personal",
    own: bool = False,
    team: bool = False,
    all_: bool = False,
    is_super_role: bool = False,
    is_active: bool = True,
) -> RoleAssignmentRow:
    return RoleAssignmentRow(
        role_id=f"r-{name}",
        name=name,
        is_active=is_active,
        dashboard_scope=scope,
        can_see_own_commissions=own,
        can_see_team_commissions=team,
        can_see_all_commissions=all_,
        is_super_role=is_super_role,
    )


# --- merge rules -----------------------------------------------------------


def test_dashboard_scope_takes_highest() -> None:
    assert merge_dashboard_scope([]) is DashboardScope.PERSONAL
    assert merge_dashboard_scope([_row(scope="team"), _row(scope="personal")]) is (
        DashboardScope.TEAM
    )
    assert merge_dashboard_scope([_row(scope="personal"), _row(scope="global")]) is (
        DashboardScope.GLOBAL
    )


def test_dashboard_scope_unknown_or_null_counts_as_personal() -> None:
    assert merge_dashboard_scope([_row(scope=None), _row(scope="bogus")]) is (
        DashboardScope.PERSONAL
    )


def test_commission_scope_takes_highest() -> None:
    assert merge_commission_scope([_row()]) is CommissionScope.NONE
    assert merge_commission_scope([_row(own=True)]) is CommissionScope.OWN
    assert merge_commission_scope([_row(own=True), _row(team=True)]) is CommissionScope.TEAM
    assert merge_commission_scope([_row(team=True), _row(own=True)]) is CommissionScope.TEAM
    assert merge_commission_scope([_row(own=True), _row(all_=True)]) is CommissionScope.ALL


def test_collect_grants_skips_unknown_rows() -> None:
    grants = collect_grants(
        [
            GrantRow("clients", "view"),
            GrantRow("clients", "view"),
            GrantRow("legacy_module", "view"),
            GrantRow("clients", "teleport"),
        ]
    )
    assert grants == frozenset({(PermissionModule.CLIENTS, PermissionAction.VIEW)})


def test_admin_detection() -> None:
    assert is_admin_role_name("Admin Cabinet") is True
    assert is_admin_role_name("ADMINISTRATEUR") is True
    assert is_admin_role_name("Sysadmin") is True
    assert is_admin_role_name("Manager") is False
    assert is_admin_role(_row("Direction", is_super_role=True)) is True
    assert is_admin_role(_row("Admin Cabinet"), name_fallback=False) is False
    assert is_admin_role(_row("Admin Cabinet"), name_fallback=True) is True


def test_build_permission_set_without_active_roles_is_empty() -> None:
    result = build_permission_set([], [GrantRow("clients", "view")])
    assert result == ResolvedPermissionSet.empty()


def test_build_permission_set_merges_roles() -> None:
    result = build_permission_set(
        [_row("Agent", own=True), _row("Manager", scope="team", team=True)],
        [GrantRow("clients", "view"), GrantRow("contracts", "view")],
    )
    assert result.roles == ("Agent", "Manager")
    assert result.dashboard_scope is DashboardScope.TEAM
    assert result.commission_scope is CommissionScope.TEAM
    assert result.is_admin is False
    assert result.permissions == {"clients:view": True, "contracts:view": True}


# --- service ---------------------------------------------------------------


async def test_resolve_unions_grants_of_active_roles(access_control, fake_store) -> None:
    fake_store.add_role(USER, TENANT, "Agent", [("clients", "view")], own=True)
    fake_store.add_role(USER, TENANT, "Export", [("clients", "export")])
    fake_store.add_role(
        USER, TENANT, "Old", [("settings", "update")], is_active=False, all_=True
    )

    perms = await access_control.resolve(USER, TENANT)

    assert perms.roles == ("Agent", "Export")
    assert perms.can("clients", "view") is True
    assert perms.can("clients", "export") is True
    assert perms.can("settings", "update") is False
    assert perms.commission_scope is CommissionScope.OWN


async def test_resolve_without_assignments_is_empty(access_control) -> None:
    assert await access_control.resolve(USER, TENANT) == ResolvedPermissionSet.empty()


async def test_resolve_with_blank_ids_skips_store(access_control, fake_store) -> None:
    assert await access_control.resolve("", TENANT) == ResolvedPermissionSet.empty()
    assert await access_control.resolve(USER, "") == ResolvedPermissionSet.empty()
    assert fake_store.calls == 0


async def test_resolve_is_scoped_to_tenant(access_control, fake_store) -> None:
    fake_store.add_role(USER, "tenant-2", "Admin Cabinet", is_super_role=True)
    perms = await access_control.resolve(USER, TENANT)
    assert perms.is_admin is False
    assert perms.can("clients", "view") is False


async def test_super_role_flag_grants_everything(access_control, fake_store) -> None:
    fake_store.add_role(USER, TENANT, "Direction", is_super_role=True)
    perms = await access_control.resolve(USER, TENANT)
    assert perms.is_admin is True
    assert await access_control.can(USER, TENANT, "payout", "validate") is True


async def test_admin_name_fallback_can_be_disabled(fake_store, memory_cache) -> None:
    fake_store.add_role(USER, TENANT, "Admin Cabinet", [("clients", "view")])
    strict = AccessControlService(fake_store, memory_cache, admin_name_fallback=False)
    perms = await strict.resolve(USER, TENANT)
    assert perms.is_admin is False
    assert perms.can("clients", "view") is True
    assert perms.can("settings", "update") is False


async def test_store_failure_fails_closed_and_is_not_cached(
    access_control, fake_store, memory_cache
) -> None:
    fake_store.add_role(USER, TENANT, "Agent", [("clients", "view")])
    fake_store.fail = True

    perms = await access_control.resolve(USER, TENANT)

    assert perms == ResolvedPermissionSet.empty()
    assert await memory_cache.get(permission_cache_key(TENANT, USER)) is None

    fake_store.fail = False
    assert (await access_control.resolve(USER, TENANT)).can("clients", "view") is True


async def test_resolve_caches_result(access_control, fake_store) -> None:
    fake_store.add_role(USER, TENANT, "Agent", [("clients", "view")])
    first = await access_control.resolve(USER, TENANT)
    second = await access_control.resolve(USER, TENANT)
    assert first == second
    assert fake_store.calls == 1


async def test_cached_answer_is_stale_until_invalidated(access_control, fake_store) -> None:
    fake_store.add_role(USER, TENANT, "Agent", [("clients", "view")])
    await access_control.resolve(USER, TENANT)

    fake_store.add_role(USER, TENANT, "Export", [("clients", "export")])
    assert await access_control.can(USER, TENANT, "clients", "export") is False

    await access_control.invalidate(USER, TENANT)
    assert await access_control.can(USER, TENANT, "clients", "export") is True


async def test_refresh_rereads_store(access_control, fake_store) -> None:
    await access_control.resolve(USER, TENANT)
    fake_store.add_role(USER, TENANT, "Agent", [("dashboard", "view")])
    perms = await access_control.refresh(USER, TENANT)
    assert perms.can("dashboard", "view") is True
    assert fake_store.calls == 2


async def test_invalidate_tenant_drops_every_user_of_tenant(
    access_control, fake_store, memory_cache
) -> None:
    for user in ("u1", "u2"):
        fake_store.add_role(user, TENANT, "Agent", [("clients", "view")])
        await access_control.resolve(user, TENANT)
    fake_store.add_role("u3", "tenant-2", "Agent", [("clients", "view")])
    await access_control.resolve("u3", "tenant-2")

    await access_control.invalidate_tenant(TENANT)

    assert await memory_cache.get(permission_cache_key(TENANT, "u1")) is None
    assert await memory_cache.get(permission_cache_key(TENANT, "u2")) is None
    assert await memory_cache.get(permission_cache_key("tenant-2", "u3")) is not None


async def test_malformed_cache_entry_is_discarded(
    access_control, fake_store, memory_cache
) -> None:
    fake_store.add_role(USER, TENANT, "Agent", [("clients", "view")])
    await memory_cache.set(
        permission_cache_key(TENANT, USER), {"dashboard_scope": "galactic"}
    )
    perms = await access_control.resolve(USER, TENANT)
    assert perms.can("clients", "view") is True
    assert fake_store.calls == 1


async def test_without_cache_every_call_hits_store(fake_store) -> None:
    service = AccessControlService(fake_store, cache=None)
    await service.resolve(USER, TENANT)
    await service.resolve(USER, TENANT)
    await service.invalidate_tenant(TENANT)
    assert fake_store.calls == 2


async def test_can_any_and_can_all(access_control, fake_store) -> None:
    fake_store.add_role(USER, TENANT, "Agent", [("clients", "view"), ("clients", "create")])
    assert await access_control.can_any(USER, TENANT, "clients", ["delete", "view"]) is True
    assert await access_control.can_all(USER, TENANT, "clients", ["view", "delete"]) is False


async def test_require_raises_permission_denied(access_control, fake_store) -> None:
    fake_store.add_role(USER, TENANT, "Agent", [("clients", "view")])
    perms = await access_control.require(USER, TENANT, "clients", "view")
    assert perms.can("clients", "view")

    with pytest.raises(AuthorizationException) as exc_info:
        await access_control.require(
            USER, TENANT, PermissionModule.SETTINGS, PermissionAction.UPDATE
        )
    assert exc_info.value.error_code == "PERMISSION_DENIED"
    assert exc_info.value.details == {"module": "settings", "action": "update"}


def test_permission_cache_key_format() -> None:
    assert permission_cache_key("t1", "u1") == "permission:t1:u1"


# --- resolution properties --------------------------------------------------

DASHBOARD_ORDER = [DashboardScope.PERSONAL, DashboardScope.TEAM, DashboardScope.GLOBAL]
COMMISSION_FLAGS = {
    CommissionScope.NONE: {},
    CommissionScope.OWN: {"own": True},
    CommissionScope.TEAM: {"team": True},
    CommissionScope.ALL: {"all_": True},
}


@pytest.mark.parametrize("held", DASHBOARD_ORDER)
@pytest.mark.parametrize("added", DASHBOARD_ORDER)
def test_adding_a_role_never_lowers_dashboard_scope(held, added) -> None:
    before = merge_dashboard_scope([_row("A", scope=held.value)])
    for roles in (
        [_row("A", scope=held.value), _row("B", scope=added.value)],
        [_row("B", scope=added.value), _row("A", scope=held.value)],
    ):
        after = merge_dashboard_scope(roles)
        assert after.rank >= before.rank
        assert after is max(held, added, key=lambda s: s.rank)


@pytest.mark.parametrize("held", list(COMMISSION_FLAGS))
@pytest.mark.parametrize("added", list(COMMISSION_FLAGS))
def test_adding_a_role_never_lowers_commission_scope(held, added) -> None:
    first = _row("A", **COMMISSION_FLAGS[held])
    second = _row("B", **COMMISSION_FLAGS[added])
    before = merge_commission_scope([first])
    assert before is held
    for roles in ([first, second], [second, first]):
        after = merge_commission_scope(roles)
        assert after.rank >= before.rank
        assert after is max(held, added, key=lambda s: s.rank)


async def test_resolve_without_cache_is_idempotent(fake_store) -> None:
    fake_store.add_role(
        USER, TENANT, "Manager", [("clients", "view")], dashboard_scope="team", team=True
    )
    fake_store.add_role(USER, TENANT, "Agent", [("contracts", "view")])
    service = AccessControlService(fake_store, cache=None)

    first = await service.resolve(USER, TENANT)
    second = await service.resolve(USER, TENANT)

    assert first == second
    assert fake_store.calls == 2


async def test_removing_every_assignment_resets_scopes(access_control, fake_store) -> None:
    fake_store.add_role(
        USER, TENANT, "Direction", [("payout", "validate")], dashboard_scope="global", all_=True
    )
    perms = await access_control.resolve(USER, TENANT)
    assert perms.dashboard_scope is DashboardScope.GLOBAL
    assert perms.commission_scope is CommissionScope.ALL

    fake_store.assignments.clear()
    perms = await access_control.refresh(USER, TENANT)

    assert perms == ResolvedPermissionSet.empty()
    assert perms.dashboard_scope is DashboardScope.PERSONAL
    assert perms.commission_scope is CommissionScope.NONE


def test_administrateur_is_admin_by_name_only_when_fallback_is_on() -> None:
    assert is_admin_role_name("administrateur") is True
    assert is_admin_role_name("Administrateur") is True
    assert is_admin_role(_row("Administrateur"), name_fallback=False) is False
