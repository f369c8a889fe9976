"""Integration fixtures: a fresh tenant per test with the RLS tenant context set."""

import uuid

import pytest

from app.core.request_context import set_tenant_id
from app.infrastructure.persistence.database import _set_tenant_context
from app.infrastructure.persistence.models import Tenant
from app.shared.utils import generate_cuid


@pytest.fixture
async def tenant(db_session) -> Tenant:
    """Insert a tenant and scope the session to it (rolled back with the session)."""
    tenant_id = generate_cuid()
    set_tenant_id(tenant_id)
    await _set_tenant_context(db_session)
    row = Tenant(
        id=tenant_id,
        code=f"test-{uuid.uuid4().hex[:12]}",
        name="Cabinet Test",
        is_active=True,
    )
    db_session.add(row)
    await db_session.flush()
    yield row
    set_tenant_id(None)
