"""Seed the default roles for an existing tenant and optionally give a user the admin role.

Usage:
    python -m scripts.seed_default_roles <tenant_id_or_code> [admin_user_id]
Resolves tenant by id or code. Requires Postgres (DATABASE_URL). Run with a DB
role that has BYPASSRLS when resolving by code. Does nothing to roles if the
tenant already has some; the admin assignment is still made when asked.
"""

import asyncio
import sys

from app.application.services.access_control import AccessControlService
from app.application.services.default_roles import DEFAULT_ROLES
from app.application.services.role_service import RoleService
from app.core.config import get_settings
from app.core.request_context import set_tenant_id
from app.domain.exceptions import DuplicateAssignmentException
from app.infrastructure.persistence.database import (
    _set_tenant_context,
    get_session_factory,
)
from app.infrastructure.persistence.repositories import (
    RolePermissionRepository,
    RoleRepository,
    TenantRepository,
    UserRoleRepository,
)
from app.infrastructure.services import RoleAssignmentStore

USAGE = "Usage: python -m scripts.seed_default_roles <tenant_id_or_code> [admin_user_id]"


async def main() -> None:
    """Seed default roles for the given tenant."""
    if len(sys.argv) < 2:
        print(USAGE, file=sys.stderr)
        sys.exit(1)
    tenant_arg = sys.argv[1]
    admin_user_id = sys.argv[2] if len(sys.argv) > 2 else None

    get_settings()
    factory = get_session_factory()
    if factory is None:
        print("DATABASE_URL not configured", file=sys.stderr)
        sys.exit(1)

    async with factory() as session:
        async with session.begin():
            tenant_repo = TenantRepository(session)
            tenant = await tenant_repo.get_by_id(
                tenant_arg
            ) or await tenant_repo.get_by_code(tenant_arg)
            if not tenant:
                print(f"Tenant not found: {tenant_arg}", file=sys.stderr)
                sys.exit(1)
            set_tenant_id(tenant.id)
            await _set_tenant_context(session)

            # No shared cache here; running API instances pick changes up on TTL expiry.
            role_service = RoleService(
                role_repo=RoleRepository(session),
                role_permission_repo=RolePermissionRepository(session),
                user_role_repo=UserRoleRepository(session),
                access_control=AccessControlService(RoleAssignmentStore(session)),
            )
            created = await role_service.initialize_default_roles(tenant.id)
            print(f"Created {len(created)} roles for tenant {tenant.id} ({tenant.code})")

            if admin_user_id:
                admin_name = DEFAULT_ROLES[0].name
                admin = await RoleRepository(session).get_by_name_and_tenant(
                    admin_name, tenant.id
                )
                if admin is None:
                    print(f"Role '{admin_name}' not found in tenant", file=sys.stderr)
                    sys.exit(1)
                try:
                    await role_service.assign_role(tenant.id, admin_user_id, admin.id)
                    print(f"Assigned '{admin_name}' to user {admin_user_id}")
                except DuplicateAssignmentException:
                    print(f"User {admin_user_id} already has '{admin_name}'")


if __name__ == "__main__":
    asyncio.run(main())
