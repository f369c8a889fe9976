"""Cache protocol for the infrastructure layer (Redis and in-process backends)."""

from typing import Any, Protocol


class CacheProtocol(Protocol):
    """Protocol for cache backends. Structurally matches ICacheService."""

    def is_available(self) -> bool:
        """Return True if cache is connected and usable."""
        ...

    async def get(self, key: str) -> Any:
        """Return cached value or None."""
        ...

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value with TTL in seconds."""
        ...

    async def delete(self, key: str) -> bool:
        """Remove key from cache."""
        ...

    async def delete_pattern(self, pattern: str) -> int:
        """Remove every key matching a glob pattern; return count."""
        ...

    async def disconnect(self) -> None:
        """Release resources (shutdown)."""
        ...
