"""Cache layer for storecache.

Cascading invalidation of derived retail reporting caches:
- Key schema for shift, day, report and lookup-table caches
- Cascade planner mapping entity mutations to every affected cache
- Best-effort executor that records failures instead of raising
- Fire-and-forget dispatch from business services
"""

from storecache.cache.dispatch import InvalidationDispatcher
from storecache.cache.errors import CacheError, CacheStoreError, InvalidCacheKeyError
from storecache.cache.invalidation import (
    CacheInvalidator,
    CascadeOperation,
    InvalidationExecutor,
    InvalidationPlan,
    InvalidationStep,
)
from storecache.cache.keys import SYSTEM_DEFAULT, CacheKeys
from storecache.cache.redis import RedisCacheStore, close_redis, get_redis
from storecache.cache.results import InvalidationLogger, InvalidationResult
from storecache.cache.store import CacheStore, InMemoryCacheStore

__all__ = [
    # Keys
    "CacheKeys",
    "SYSTEM_DEFAULT",
    # Stores
    "CacheStore",
    "InMemoryCacheStore",
    "RedisCacheStore",
    "get_redis",
    "close_redis",
    # Invalidation
    "CacheInvalidator",
    "CascadeOperation",
    "InvalidationExecutor",
    "InvalidationPlan",
    "InvalidationStep",
    "InvalidationResult",
    "InvalidationLogger",
    "InvalidationDispatcher",
    # Errors
    "CacheError",
    "CacheStoreError",
    "InvalidCacheKeyError",
]
