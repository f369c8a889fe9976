"""Role, grant and assignment repositories against Postgres. Session is rolled back after each test."""

import pytest

from app.application.services.access_control import AccessControlService
from app.domain.exceptions import DuplicateAssignmentException
from app.infrastructure.persistence.repositories import (
    RolePermissionRepository,
    RoleRepository,
    TenantRepository,
    UserRoleRepository,
)
from app.infrastructure.services import RoleAssignmentStore


@pytest.mark.requires_db
async def test_tenant_lookup_by_id_and_code(db_session, tenant) -> None:
    repo = TenantRepository(db_session)
    by_id = await repo.get_by_id(tenant.id)
    by_code = await repo.get_by_code(tenant.code)
    assert by_id is not None
    assert by_id == by_code
    assert by_id.is_active is True
    assert await repo.get_by_id("nonexistent-id-xyz") is None


@pytest.mark.requires_db
async def test_create_and_list_roles(db_session, tenant) -> None:
    repo = RoleRepository(db_session)
    created = await repo.create_role(tenant.id, "Manager", dashboard_scope="team")
    await repo.create_role(tenant.id, "Agent")

    assert created.dashboard_scope == "team"
    assert created.can_see_own_commissions is True
    assert created.is_super_role is False
    assert [r.name for r in await repo.get_by_tenant(tenant.id)] == ["Agent", "Manager"]
    assert await repo.has_any_role(tenant.id) is True
    assert (await repo.get_by_name_and_tenant("Manager", tenant.id)).id == created.id


@pytest.mark.requires_db
async def test_update_and_delete_role(db_session, tenant) -> None:
    repo = RoleRepository(db_session)
    role = await repo.create_role(tenant.id, "Agent")

    updated = await repo.update_role(role.id, tenant.id, is_active=False, name=None)
    assert updated.is_active is False
    assert updated.name == "Agent"
    assert await repo.get_by_tenant(tenant.id) == []
    assert len(await repo.get_by_tenant(tenant.id, include_inactive=True)) == 1

    assert await repo.delete_role(role.id, tenant.id) is True
    assert await repo.get_by_id_and_tenant(role.id, tenant.id) is None


@pytest.mark.requires_db
async def test_set_permission_upserts(db_session, tenant) -> None:
    role = await RoleRepository(db_session).create_role(tenant.id, "Agent")
    repo = RolePermissionRepository(db_session)

    await repo.set_permission(role.id, "clients", "view", True)
    await repo.set_permission(role.id, "clients", "view", False)
    await repo.set_permission(role.id, "clients", "create", True)

    rows = await repo.get_permissions_for_role(role.id)
    assert [(r.module, r.action, r.allowed) for r in rows] == [
        ("clients", "create", True),
        ("clients", "view", False),
    ]


@pytest.mark.requires_db
async def test_assignment_duplicate_keeps_transaction_usable(db_session, tenant) -> None:
    role = await RoleRepository(db_session).create_role(tenant.id, "Agent")
    repo = UserRoleRepository(db_session)

    first = await repo.assign_role_to_user("user-1", role.id, tenant.id, assigned_by="admin")
    assert first.assigned_at is not None
    with pytest.raises(DuplicateAssignmentException):
        await repo.assign_role_to_user("user-1", role.id, tenant.id)

    listed = await repo.get_assignments_for_user("user-1", tenant.id)
    assert [a.role.name for a in listed] == ["Agent"]
    assert await repo.remove_role_from_user("user-1", role.id, tenant.id) is True
    assert await repo.remove_role_from_user("user-1", role.id, tenant.id) is False


@pytest.mark.requires_db
async def test_store_resolves_active_roles_and_allowed_grants(db_session, tenant) -> None:
    roles = RoleRepository(db_session)
    grants = RolePermissionRepository(db_session)
    assignments = UserRoleRepository(db_session)
    agent = await roles.create_role(tenant.id, "Agent")
    old = await roles.create_role(tenant.id, "Ancien")
    await roles.update_role(old.id, tenant.id, is_active=False)
    await grants.set_permission(agent.id, "clients", "view", True)
    await grants.set_permission(agent.id, "clients", "delete", False)
    await grants.set_permission(old.id, "settings", "update", True)
    await assignments.assign_role_to_user("user-1", agent.id, tenant.id)
    await assignments.assign_role_to_user("user-1", old.id, tenant.id)

    access = AccessControlService(RoleAssignmentStore(db_session))
    perms = await access.resolve("user-1", tenant.id)

    assert perms.roles == ("Agent",)
    assert perms.permissions == {"clients:view": True}
    assert perms.commission_scope.value == "own"
