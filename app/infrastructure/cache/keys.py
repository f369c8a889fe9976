"""Cache key builders. Single place for key format.

Key components (tenant_id, code) must not contain CACHE_KEY_SEP to avoid
ambiguous or colliding keys. Permission-set keys are built by
app.application.services.access_control.permission_cache_key.
"""

from app.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_TENANT


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value contains the cache key separator."""
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def tenant_key(tenant_id: str) -> str:
    """Cache key for tenant by ID."""
    _validate_key_component(tenant_id, "tenant_id")
    return f"{CACHE_PREFIX_TENANT}{CACHE_KEY_SEP}id{CACHE_KEY_SEP}{tenant_id}"


def tenant_code_key(code: str) -> str:
    """Cache key for tenant by code."""
    _validate_key_component(code, "code")
    return f"{CACHE_PREFIX_TENANT}{CACHE_KEY_SEP}code{CACHE_KEY_SEP}{code}"


def tenant_header_key(tenant_id: str) -> str:
    """Cache key for the tenant-header existence check (hit or miss marker)."""
    _validate_key_component(tenant_id, "tenant_id")
    return f"{CACHE_PREFIX_TENANT}{CACHE_KEY_SEP}header{CACHE_KEY_SEP}{tenant_id}"
