"""Pytest configuration and fixtures for brokerage-core.

Uses app.main:app for HTTP tests and app.infrastructure.persistence.database
for DB-dependent fixtures. In-memory fakes stand in for the role store and the
repositories so unit and API tests run without Postgres or Redis.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-pytest")
os.environ.setdefault("REDIS_ENABLED", "false")

import dataclasses
import itertools
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.permission import GrantRow, RolePermissionResult
from app.application.dtos.role import (
    RoleAssignmentRow,
    RoleResult,
    UserRoleAssignmentResult,
)
from app.application.dtos.tenant import TenantResult
from app.application.services.access_control import AccessControlService
from app.application.services.role_service import RoleService
from app.core.config import get_settings
from app.domain.exceptions import DuplicateAssignmentException, PermissionStoreException
from app.infrastructure.cache import InMemoryCache
from app.infrastructure.persistence.database import get_session_factory
from app.infrastructure.security.jwt import create_access_token
from app.main import app

TENANT_ID = "tenant-1"
OTHER_TENANT_ID = "tenant-2"

_ids = itertools.count(1)


def _next_id(prefix: str) -> str:
    return f"{prefix}-{next(_ids)}"


class FakeRoleAssignmentStore:
    """In-memory role-assignment store; set fail=True to simulate an unreachable DB."""

    def __init__(self) -> None:
        self.assignments: dict[tuple[str, str], list[RoleAssignmentRow]] = {}
        self.grants: dict[str, list[GrantRow]] = {}
        self.fail = False
        self.calls = 0

    def add_role(
        self,
        user_id: str,
        tenant_id: str,
        name: str,
        grants: Sequence[tuple[str, str]] = (),
        *,
        role_id: str | None = None,
        is_active: bool = True,
        dashboard_scope: str | None = "personal",
        own: bool = True,
        team: bool = False,
        all_: bool = False,
        is_super_role: bool = False,
    ) -> str:
        role_id = role_id or _next_id("role")
        self.assignments.setdefault((user_id, tenant_id), []).append(
            RoleAssignmentRow(
                role_id=role_id,
                name=name,
                is_active=is_active,
                dashboard_scope=dashboard_scope,
                can_see_own_commissions=own,
                can_see_team_commissions=team,
                can_see_all_commissions=all_,
                is_super_role=is_super_role,
            )
        )
        self.grants.setdefault(role_id, []).extend(
            GrantRow(module=m, action=a) for m, a in grants
        )
        return role_id

    async def fetch_role_assignments(
        self, user_id: str, tenant_id: str
    ) -> list[RoleAssignmentRow]:
        self.calls += 1
        if self.fail:
            raise PermissionStoreException("connection refused")
        return list(self.assignments.get((user_id, tenant_id), []))

    async def fetch_granted_pairs(
        self, role_ids: Sequence[str], tenant_id: str
    ) -> list[GrantRow]:
        if self.fail:
            raise PermissionStoreException("connection refused")
        return [g for rid in role_ids for g in self.grants.get(rid, [])]


class FakeRoleRepository:
    """In-memory IRoleRepository."""

    def __init__(self) -> None:
        self.roles: dict[str, RoleResult] = {}

    async def create_role(
        self,
        tenant_id: str,
        name: str,
        description: str | None = None,
        **attributes: Any,
    ) -> RoleResult:
        role = RoleResult(
            id=_next_id("role"),
            tenant_id=tenant_id,
            name=name,
            description=description,
            is_system_role=attributes.get("is_system_role", False),
            is_active=attributes.get("is_active", True),
            is_super_role=attributes.get("is_super_role", False),
            dashboard_scope=attributes.get("dashboard_scope", "personal"),
            can_see_own_commissions=attributes.get("can_see_own_commissions", True),
            can_see_team_commissions=attributes.get("can_see_team_commissions", False),
            can_see_all_commissions=attributes.get("can_see_all_commissions", False),
        )
        self.roles[role.id] = role
        return role

    async def get_by_id_and_tenant(self, role_id: str, tenant_id: str) -> RoleResult | None:
        role = self.roles.get(role_id)
        return role if role and role.tenant_id == tenant_id else None

    async def get_by_name_and_tenant(self, name: str, tenant_id: str) -> RoleResult | None:
        return next(
            (r for r in self.roles.values() if r.name == name and r.tenant_id == tenant_id),
            None,
        )

    async def get_by_tenant(
        self,
        tenant_id: str,
        skip: int = 0,
        limit: int = 100,
        *,
        include_inactive: bool = False,
    ) -> list[RoleResult]:
        roles = sorted(
            (
                r
                for r in self.roles.values()
                if r.tenant_id == tenant_id and (include_inactive or r.is_active)
            ),
            key=lambda r: r.name,
        )
        return roles[skip : skip + limit]

    async def has_any_role(self, tenant_id: str) -> bool:
        return any(r.tenant_id == tenant_id for r in self.roles.values())

    async def update_role(
        self, role_id: str, tenant_id: str, **changes: Any
    ) -> RoleResult | None:
        role = await self.get_by_id_and_tenant(role_id, tenant_id)
        if role is None:
            return None
        updated = dataclasses.replace(
            role, **{k: v for k, v in changes.items() if v is not None}
        )
        self.roles[role_id] = updated
        return updated

    async def delete_role(self, role_id: str, tenant_id: str) -> bool:
        if await self.get_by_id_and_tenant(role_id, tenant_id) is None:
            return False
        del self.roles[role_id]
        return True


class FakeRolePermissionRepository:
    """In-memory IRolePermissionRepository keyed by (role_id, module, action)."""

    def __init__(self) -> None:
        self.rows: dict[tuple[str, str, str], RolePermissionResult] = {}

    async def get_permissions_for_role(self, role_id: str) -> list[RolePermissionResult]:
        return sorted(
            (r for r in self.rows.values() if r.role_id == role_id),
            key=lambda r: (r.module, r.action),
        )

    async def set_permission(
        self, role_id: str, module: str, action: str, allowed: bool
    ) -> RolePermissionResult:
        key = (role_id, module, action)
        existing = self.rows.get(key)
        row = RolePermissionResult(
            id=existing.id if existing else _next_id("perm"),
            role_id=role_id,
            module=module,
            action=action,
            allowed=allowed,
        )
        self.rows[key] = row
        return row


class FakeUserRoleRepository:
    """In-memory IUserRoleRepository; joins roles from a FakeRoleRepository."""

    def __init__(self, role_repo: FakeRoleRepository) -> None:
        self.role_repo = role_repo
        self.assignments: list[UserRoleAssignmentResult] = []

    def _with_role(self, a: UserRoleAssignmentResult) -> UserRoleAssignmentResult:
        return dataclasses.replace(a, role=self.role_repo.roles.get(a.role_id))

    async def get_assignments_for_user(
        self, user_id: str, tenant_id: str
    ) -> list[UserRoleAssignmentResult]:
        return [
            self._with_role(a)
            for a in self.assignments
            if a.user_id == user_id and a.tenant_id == tenant_id
        ]

    async def get_assignments_for_tenant(
        self, tenant_id: str
    ) -> list[UserRoleAssignmentResult]:
        return [self._with_role(a) for a in self.assignments if a.tenant_id == tenant_id]

    async def assign_role_to_user(
        self,
        user_id: str,
        role_id: str,
        tenant_id: str,
        assigned_by: str | None = None,
    ) -> UserRoleAssignmentResult:
        if any(a.user_id == user_id and a.role_id == role_id for a in self.assignments):
            raise DuplicateAssignmentException(
                "Role already assigned to user",
                "user_role",
                {"user_id": user_id, "role_id": role_id},
            )
        assignment = UserRoleAssignmentResult(
            id=_next_id("ur"),
            user_id=user_id,
            tenant_id=tenant_id,
            role_id=role_id,
            assigned_by=assigned_by,
            assigned_at=datetime.now(UTC),
        )
        self.assignments.append(assignment)
        return self._with_role(assignment)

    async def remove_role_from_user(
        self, user_id: str, role_id: str, tenant_id: str
    ) -> bool:
        before = len(self.assignments)
        self.assignments = [
            a
            for a in self.assignments
            if not (a.user_id == user_id and a.role_id == role_id and a.tenant_id == tenant_id)
        ]
        return len(self.assignments) < before


class FakeTenantRepository:
    """In-memory ITenantRepository."""

    def __init__(self, tenants: Sequence[TenantResult] = ()) -> None:
        self.tenants = {t.id: t for t in tenants}

    async def get_by_id(self, tenant_id: str) -> TenantResult | None:
        return self.tenants.get(tenant_id)

    async def get_by_code(self, code: str) -> TenantResult | None:
        return next((t for t in self.tenants.values() if t.code == code), None)


@pytest.fixture
def fake_store() -> FakeRoleAssignmentStore:
    return FakeRoleAssignmentStore()


@pytest.fixture
def memory_cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def access_control(
    fake_store: FakeRoleAssignmentStore, memory_cache: InMemoryCache
) -> AccessControlService:
    """AccessControlService over the fake store and an in-process cache."""
    return AccessControlService(store=fake_store, cache=memory_cache, cache_ttl=300)


@pytest.fixture
def role_repo() -> FakeRoleRepository:
    return FakeRoleRepository()


@pytest.fixture
def role_permission_repo() -> FakeRolePermissionRepository:
    return FakeRolePermissionRepository()


@pytest.fixture
def user_role_repo(role_repo: FakeRoleRepository) -> FakeUserRoleRepository:
    return FakeUserRoleRepository(role_repo)


@pytest.fixture
def role_service(
    role_repo: FakeRoleRepository,
    role_permission_repo: FakeRolePermissionRepository,
    user_role_repo: FakeUserRoleRepository,
    access_control: AccessControlService,
) -> RoleService:
    """RoleService over in-memory repositories sharing the access_control fixture."""
    return RoleService(
        role_repo=role_repo,
        role_permission_repo=role_permission_repo,
        user_role_repo=user_role_repo,
        access_control=access_control,
    )


@pytest.fixture
def fake_tenant_repo() -> FakeTenantRepository:
    return FakeTenantRepository(
        [
            TenantResult(id=TENANT_ID, code="cabinet-1", name="Cabinet Un", is_active=True),
            TenantResult(
                id=OTHER_TENANT_ID, code="cabinet-2", name="Cabinet Deux", is_active=False
            ),
        ]
    )


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_auth_headers():
    """Return a builder of Authorization + X-Tenant-ID headers for a user id."""

    def _build(user_id: str, tenant_id: str | None = TENANT_ID) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}
        if tenant_id is not None:
            headers[get_settings().tenant_header_name] = tenant_id
        return headers

    return _build


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL (Postgres, migrated). Skips (pytest.skip) when it is not
    configured. Use @pytest.mark.requires_db to mark tests that need this fixture;
    run without DB via: pytest -m 'not requires_db'.
    """
    factory = get_session_factory()
    if factory is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with factory() as session:
        yield session
        await session.rollback()
