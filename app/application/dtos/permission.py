"""DTOs for permission grants (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class GrantRow:
    """A granted (module, action) pair as stored; strings are not yet validated."""

    module: str
    action: str


@dataclass(frozen=True)
class RolePermissionResult:
    """Role permission row read-model (role editor)."""

    id: str
    role_id: str
    module: str
    action: str
    allowed: bool
