"""Cache: Redis service, in-process fallback, and cache key utilities.

Used by the access-control service (resolved permission sets) and the tenant
header check. Key format is in keys.py.
"""

from app.infrastructure.cache.cache_protocol import CacheProtocol
from app.infrastructure.cache.keys import tenant_code_key, tenant_header_key, tenant_key
from app.infrastructure.cache.memory_cache import InMemoryCache
from app.infrastructure.cache.redis_cache import CacheService

__all__ = [
    "CacheProtocol",
    "CacheService",
    "InMemoryCache",
    "tenant_code_key",
    "tenant_header_key",
    "tenant_key",
]
