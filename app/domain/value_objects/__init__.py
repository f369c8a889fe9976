"""Domain value objects and shared value types."""

from app.domain.value_objects.permission_set import (
    GrantPair,
    ResolvedPermissionSet,
    permission_gate,
    permission_key,
)

__all__ = [
    "GrantPair",
    "ResolvedPermissionSet",
    "permission_gate",
    "permission_key",
]
