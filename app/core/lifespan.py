"""Application lifespan: startup and shutdown.

Wiring of infrastructure only (cache, DB engine dispose); no business logic.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.infrastructure.cache import CacheService, InMemoryCache
from app.infrastructure.persistence.database import dispose_engine

logger = logging.getLogger(__name__)


async def _create_cache() -> CacheService | InMemoryCache:
    """Redis when enabled and reachable, otherwise the in-process cache."""
    settings = get_settings()
    if settings.redis_enabled:
        cache = CacheService(settings=settings)
        await cache.connect()
        if cache.is_available():
            return cache
        logger.warning("Redis unavailable; using in-process cache")
    return InMemoryCache()


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: cache (Redis or in-process). Shutdown: cache disconnect,
    SQL engine dispose.
    """
    app.state.cache = await _create_cache()
    logger.info("Cache backend: %s", type(app.state.cache).__name__)

    yield

    if getattr(app.state, "cache", None) is not None:
        await app.state.cache.disconnect()
        app.state.cache = None
        logger.info("Cache disconnected")

    await dispose_engine()
