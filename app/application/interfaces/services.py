"""Service interfaces (ports) for the application layer.

Protocols define contracts for application services (DIP).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.permission import GrantRow
    from app.application.dtos.role import RoleAssignmentRow


# Role-assignment store interface (read side of access control)
class IRoleAssignmentStore(Protocol):
    """Protocol for the two reads access control needs (used by AccessControlService)."""

    async def fetch_role_assignments(
        self, user_id: str, tenant_id: str
    ) -> list[RoleAssignmentRow]:
        """Return the user's assignments in tenant joined to their roles (active or not)."""

    async def fetch_granted_pairs(
        self, role_ids: Sequence[str], tenant_id: str
    ) -> list[GrantRow]:
        """Return (module, action) rows with allowed = true for the given roles."""


# Cache service interface
class ICacheService(Protocol):
    """Minimal cache protocol for permission caching (DIP)."""

    def is_available(self) -> bool:
        """Return True if cache is connected."""

    async def get(self, key: str) -> Any:
        """Return cached value or None."""

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value with TTL. Returns True on success."""

    async def delete(self, key: str) -> bool:
        """Delete key. Returns True on success."""

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching pattern. Returns count deleted."""
