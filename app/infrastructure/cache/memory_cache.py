"""In-process TTL cache used when Redis is disabled or unreachable.

Same surface as CacheService (get/set/delete/delete_pattern). Values are stored
as JSON strings so callers observe the same round-trip as with Redis.
"""

from __future__ import annotations

import fnmatch
import json
import logging
import time
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class InMemoryCache:
    """Per-process cache with expiry; entries are checked lazily on read."""

    def __init__(
        self,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: dict[str, tuple[float, str]] = {}
        self._max_entries = max_entries
        self._clock = clock

    def is_available(self) -> bool:
        return True

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Cache MISS: %s", key)
            return None
        expires_at, payload = entry
        if expires_at <= self._clock():
            del self._entries[key]
            logger.debug("Cache EXPIRED: %s", key)
            return None
        logger.debug("Cache HIT: %s", key)
        return json.loads(payload)

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        if len(self._entries) >= self._max_entries and key not in self._entries:
            self._evict()
        self._entries[key] = (self._clock() + ttl, json.dumps(value))
        logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        return True

    async def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching a glob pattern (Redis SCAN MATCH semantics for * and ?)."""
        matched = [k for k in self._entries if fnmatch.fnmatchcase(k, pattern)]
        for key in matched:
            del self._entries[key]
        if matched:
            logger.info("Cache INVALIDATE: %s (%s keys)", pattern, len(matched))
        return len(matched)

    async def disconnect(self) -> None:
        self._entries.clear()

    def _evict(self) -> None:
        now = self._clock()
        expired = [k for k, (exp, _) in self._entries.items() if exp <= now]
        for key in expired:
            del self._entries[key]
        if len(self._entries) >= self._max_entries:
            # Oldest insertion first (dicts keep insertion order).
            self._entries.pop(next(iter(self._entries)))
