"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    MultiTenantModel,
    TenantMixin,
    TimestampMixin,
)
from app.infrastructure.persistence.models.permission import (
    TenantRolePermission,
    UserTenantRole,
)
from app.infrastructure.persistence.models.role import TenantRole
from app.infrastructure.persistence.models.tenant import Tenant

__all__ = [
    "Tenant",
    "TenantRole",
    "TenantRolePermission",
    "UserTenantRole",
    "CuidMixin",
    "TenantMixin",
    "TimestampMixin",
    "MultiTenantModel",
]
