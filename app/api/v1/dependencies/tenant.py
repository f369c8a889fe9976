"""Tenant-related dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.constants import TENANT_CACHE_MISS_MARKER, TENANT_VALIDATION_CACHE_TTL
from app.core.tenant_validation import is_valid_tenant_id_format
from app.infrastructure.cache.keys import tenant_header_key
from app.infrastructure.persistence.database import get_db
from app.infrastructure.persistence.repositories import TenantRepository


async def get_tenant_repo(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TenantRepository:
    """Tenant repository for read operations (cached)."""
    return TenantRepository(
        db,
        cache_service=getattr(request.app.state, "cache", None),
        cache_ttl=get_settings().cache_ttl_tenants,
    )


async def get_tenant_id(
    request: Request,
    tenant_repo: Annotated[TenantRepository, Depends(get_tenant_repo)],
) -> str:
    """Resolve tenant ID from header and validate it exists and is active.

    Uses app.state.cache (short TTL) when available to avoid hitting the tenant
    repository on every request; unknown tenants are cached as a miss marker.
    """
    name = get_settings().tenant_header_name
    value = request.headers.get(name)
    if not value:
        raise HTTPException(
            status_code=400,
            detail=f"Missing required header: {name}",
        )
    if not is_valid_tenant_id_format(value):
        raise HTTPException(
            status_code=400,
            detail="Invalid tenant ID format (use alphanumeric, hyphen, underscore; max 64 characters)",
        )
    cache = getattr(request.app.state, "cache", None)
    cache_key = tenant_header_key(value)
    if cache and cache.is_available():
        cached = await cache.get(cache_key)
        if cached is not None:
            if cached == TENANT_CACHE_MISS_MARKER:
                raise HTTPException(status_code=400, detail="Invalid or unknown tenant")
            return value
    tenant = await tenant_repo.get_by_id(value)
    if not tenant or not tenant.is_active:
        if cache and cache.is_available():
            await cache.set(
                cache_key, TENANT_CACHE_MISS_MARKER, ttl=TENANT_VALIDATION_CACHE_TTL
            )
        raise HTTPException(status_code=400, detail="Invalid or unknown tenant")
    if cache and cache.is_available():
        await cache.set(cache_key, value, ttl=TENANT_VALIDATION_CACHE_TTL)
    return value
