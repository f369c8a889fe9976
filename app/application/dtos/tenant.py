"""DTOs for tenant use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TenantResult:
    """Tenant read-model (result of get_by_id, get_by_code)."""

    id: str
    code: str
    name: str
    is_active: bool
