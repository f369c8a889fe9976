"""Tenant repository with optional caching. Returns application DTOs (read-only)."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.tenant import TenantResult
from app.infrastructure.cache.cache_protocol import CacheProtocol
from app.infrastructure.cache.keys import tenant_code_key, tenant_key
from app.infrastructure.persistence.models.tenant import Tenant
from app.infrastructure.persistence.repositories.base import BaseRepository


def _tenant_to_result(t: Tenant) -> TenantResult:
    """Map ORM Tenant to application TenantResult."""
    return TenantResult(id=t.id, code=t.code, name=t.name, is_active=t.is_active)


def _result_to_dict(t: TenantResult) -> dict[str, Any]:
    return {"id": t.id, "code": t.code, "name": t.name, "is_active": t.is_active}


class TenantRepository(BaseRepository[Tenant]):
    """Tenant lookups. Optional cache (inject cache_ttl). Uses tenant_key/tenant_code_key."""

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        cache_ttl: int = 900,
    ) -> None:
        super().__init__(db, Tenant)
        self.cache = cache_service
        self.cache_ttl = cache_ttl

    def _cache_usable(self) -> bool:
        return self.cache is not None and self.cache.is_available()

    async def _cache_store(self, tenant: TenantResult) -> None:
        if self._cache_usable():
            d = _result_to_dict(tenant)
            await self.cache.set(tenant_key(tenant.id), d, ttl=self.cache_ttl)
            await self.cache.set(tenant_code_key(tenant.code), d, ttl=self.cache_ttl)

    async def get_by_id(self, tenant_id: str) -> TenantResult | None:
        """Get tenant by ID, from cache if available."""
        if self._cache_usable():
            cached = await self.cache.get(tenant_key(tenant_id))
            if cached is not None:
                return TenantResult(**cached)
        tenant = await super().get_by_id(tenant_id)
        if tenant is None:
            return None
        result = _tenant_to_result(tenant)
        await self._cache_store(result)
        return result

    async def get_by_code(self, code: str) -> TenantResult | None:
        """Get tenant by unique code, from cache if available."""
        if self._cache_usable():
            cached = await self.cache.get(tenant_code_key(code))
            if cached is not None:
                return TenantResult(**cached)
        result = await self.db.execute(select(Tenant).where(Tenant.code == code))
        tenant = result.scalar_one_or_none()
        if tenant is None:
            return None
        found = _tenant_to_result(tenant)
        await self._cache_store(found)
        return found
