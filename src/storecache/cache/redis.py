"""Redis cache store for storecache.

Provides the async delete operations the invalidation executor needs.
Uses redis-py async client for connection pooling.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TYPE_CHECKING, TypeVar, cast

import redis.asyncio as redis
from redis.exceptions import RedisError

from storecache.cache.errors import CacheStoreError
from storecache.config import settings

if TYPE_CHECKING:
    from redis.asyncio import Redis

T = TypeVar("T")

logger = logging.getLogger(__name__)

# Module-level connection pool
_redis_client: Redis | None = None


async def get_redis() -> Redis:
    """Get or create the Redis client.

    Uses connection pooling for efficient connection management.
    """
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(  # type: ignore[no-untyped-call]
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_timeout=settings.cache_operation_timeout,
        )
    return _redis_client


async def close_redis() -> None:
    """Close Redis connections."""
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None


class RedisCacheStore:
    """Cache store adapter backed by Redis.

    Each call is bounded by ``timeout`` seconds. Timeouts and Redis errors
    are raised as CacheStoreError so callers see one failure type.
    """

    def __init__(
        self,
        client: Redis,
        timeout: float | None = None,
        scan_count: int | None = None,
    ):
        self.client = client
        self.timeout = settings.cache_operation_timeout if timeout is None else timeout
        self.scan_count = settings.cache_scan_count if scan_count is None else scan_count

    async def _bounded(self, operation: str, target: str, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except TimeoutError as e:
            raise CacheStoreError(operation, target, f"timed out after {self.timeout}s") from e
        except RedisError as e:
            raise CacheStoreError(operation, target, str(e) or type(e).__name__) from e

    async def delete(self, key: str) -> bool:
        """Delete a single key. A missing key is not an error."""
        removed = await self._bounded("delete", key, cast(Awaitable[int], self.client.delete(key)))
        return removed > 0

    async def delete_by_pattern(self, pattern: str) -> int:
        """Delete all keys matching ``pattern``.

        Uses SCAN to avoid blocking on large keyspaces. The whole scan shares
        one timeout budget.
        """
        return await self._bounded("delete_by_pattern", pattern, self._scan_delete(pattern))

    async def _scan_delete(self, pattern: str) -> int:
        deleted = 0
        cursor = 0
        while True:
            cursor, keys = await self.client.scan(
                cursor=cursor, match=pattern, count=self.scan_count
            )
            if keys:
                deleted += cast(int, await self.client.delete(*keys))
            if cursor == 0:
                break

        logger.debug("Deleted %d keys matching %s", deleted, pattern)
        return deleted

    async def health_check(self) -> bool:
        """Check Redis connectivity."""
        try:
            await cast(Awaitable[bool], self.client.ping())
            return True
        except RedisError:
            return False
