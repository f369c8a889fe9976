"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for tenant resolution, authentication, access
control and application services. Routes depend only on these, not on
infrastructure directly.
"""

from .access import (
    get_access_control_service,
    get_current_permissions,
    get_iban_policy,
    get_role_service,
    require_permission,
)
from .auth import get_current_user, get_current_user_optional
from .tenant import get_tenant_id, get_tenant_repo

__all__ = [
    "get_access_control_service",
    "get_current_permissions",
    "get_current_user",
    "get_current_user_optional",
    "get_iban_policy",
    "get_role_service",
    "get_tenant_id",
    "get_tenant_repo",
    "require_permission",
]
