"""Runtime wiring for storecache invalidation."""

from __future__ import annotations

import logging

from storecache.cache.dispatch import InvalidationDispatcher
from storecache.cache.invalidation import CacheInvalidator
from storecache.cache.redis import RedisCacheStore, close_redis, get_redis
from storecache.cache.store import CacheStore, InMemoryCacheStore
from storecache.config import settings
from storecache.hooks import CacheInvalidationHooks

logger = logging.getLogger(__name__)

_invalidator: CacheInvalidator | None = None
_hooks: CacheInvalidationHooks | None = None


async def create_cache_store() -> CacheStore:
    """Create a cache store based on configuration."""
    backend = settings.cache_backend.lower()

    if backend in {"memory", "inmemory", "in_memory"}:
        return InMemoryCacheStore()

    if backend == "redis":
        return RedisCacheStore(await get_redis())

    raise ValueError("Unsupported cache_backend. Supported values: memory, redis.")


async def get_invalidator() -> CacheInvalidator:
    """Get the singleton cascade invalidator."""
    global _invalidator
    if _invalidator is None:
        _invalidator = CacheInvalidator(await create_cache_store())
    return _invalidator


async def get_hooks() -> CacheInvalidationHooks:
    """Get the singleton mutation hooks (and their dispatcher)."""
    global _hooks
    if _hooks is None:
        _hooks = CacheInvalidationHooks(await get_invalidator())
    return _hooks


async def get_dispatcher() -> InvalidationDispatcher:
    """Get the dispatcher shared by the singleton hooks."""
    return (await get_hooks()).dispatcher


async def start_invalidation() -> CacheInvalidationHooks:
    """Wire the invalidation stack at application startup."""
    hooks = await get_hooks()
    logger.info("Cache invalidation started (%s)", settings.cache_backend)
    return hooks


async def stop_invalidation() -> None:
    """Drain in-flight invalidations and release the cache store."""
    global _invalidator, _hooks
    if _hooks is not None:
        await _hooks.dispatcher.stop()
    _hooks = None
    _invalidator = None
    await close_redis()
    logger.info("Cache invalidation stopped")


async def health_check() -> bool:
    """Check that the configured cache store is reachable."""
    store = (await get_invalidator()).store
    check = getattr(store, "health_check", None)
    if check is None:
        return True
    return bool(await check())
