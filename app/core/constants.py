"""Core constants: cache key prefixes and shared literal values.

Single source of truth for cache key structure (DRY). Used by
infrastructure cache and the access-control service.
"""

# Cache key prefixes (used with :tenant_id:user_id etc.)
CACHE_PREFIX_TENANT = "tenant"
CACHE_PREFIX_PERMISSION = "permission"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Stored in the cache when a tenant lookup misses, so unknown tenants are not re-queried.
TENANT_CACHE_MISS_MARKER = "__missing__"
TENANT_VALIDATION_CACHE_TTL = 60
