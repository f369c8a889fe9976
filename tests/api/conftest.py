"""API test wiring: dependency overrides that swap the database for in-memory fakes."""

import pytest

from app.api.v1.dependencies import (
    get_access_control_service,
    get_role_service,
    get_tenant_repo,
)
from app.main import app


@pytest.fixture(autouse=True)
def override_dependencies(fake_tenant_repo, access_control, role_service):
    """Route tenant lookups, access control and role management to the fakes."""
    app.dependency_overrides[get_tenant_repo] = lambda: fake_tenant_repo
    app.dependency_overrides[get_access_control_service] = lambda: access_control
    app.dependency_overrides[get_role_service] = lambda: role_service
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(fake_store) -> str:
    """User holding an explicit super role in the test tenant."""
    fake_store.add_role("admin-1", "tenant-1", "Direction", is_super_role=True)
    return "admin-1"


@pytest.fixture
def agent_user(fake_store) -> str:
    """User with client and dashboard grants only."""
    fake_store.add_role(
        "agent-1",
        "tenant-1",
        "Agent",
        [("clients", "view"), ("clients", "create"), ("dashboard", "view")],
        own=True,
    )
    return "agent-1"
