"""Unit tests for RedisCacheStore using fakeredis to avoid real Redis."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from redis.exceptions import ConnectionError as RedisConnectionError

from storecache.cache.errors import CacheStoreError
from storecache.cache.invalidation import CacheInvalidator
from storecache.cache.keys import CacheKeys
from storecache.cache.redis import RedisCacheStore

fakeredis = pytest.importorskip("fakeredis", reason="fakeredis is required for Redis unit tests")


@pytest_asyncio.fixture
async def redis_client():
    client = fakeredis.FakeAsyncRedis(decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


@pytest_asyncio.fixture
async def seeded(redis_client):
    keys = [
        CacheKeys.shift_summary("shift-1"),
        CacheKeys.z_report("shift-1"),
        CacheKeys.day_summary("store-9", "2024-01-15"),
        CacheKeys.day_summary("store-9", "2024-01-16"),
        CacheKeys.weekly_report("store-9", 2024, 3),
        CacheKeys.monthly_report("store-9", 2024, 1),
        CacheKeys.weekly_report("store-1", 2024, 3),
    ]
    for key in keys:
        await redis_client.set(key, "{}", ex=3600)
    return redis_client


class TestRedisCacheStore:
    """Tests for delete operations against Redis."""

    @pytest.mark.asyncio
    async def test_delete_existing(self, seeded) -> None:
        store = RedisCacheStore(seeded)

        assert await store.delete("shift:summary:shift-1") is True
        assert await seeded.get("shift:summary:shift-1") is None

    @pytest.mark.asyncio
    async def test_delete_missing_is_not_an_error(self, redis_client) -> None:
        assert await RedisCacheStore(redis_client).delete("shift:summary:ghost") is False

    @pytest.mark.asyncio
    async def test_delete_by_pattern_scans_in_batches(self, seeded) -> None:
        store = RedisCacheStore(seeded, scan_count=1)

        deleted = await store.delete_by_pattern(CacheKeys.store_reports_pattern("store-9"))

        assert deleted == 2
        assert await seeded.exists("report:week:store-1:2024:3") == 1
        assert await seeded.exists("report:z:shift-1") == 1

    @pytest.mark.asyncio
    async def test_redis_error_is_wrapped(self) -> None:
        client = AsyncMock()
        client.delete.side_effect = RedisConnectionError("Connection refused")

        with pytest.raises(CacheStoreError) as exc_info:
            await RedisCacheStore(client).delete("day:summary:s:2024-01-01")

        assert str(exc_info.value) == (
            "delete day:summary:s:2024-01-01 failed: Connection refused"
        )

    @pytest.mark.asyncio
    async def test_timeout_is_wrapped(self) -> None:
        async def hang(*args, **kwargs):
            await asyncio.sleep(10)

        client = AsyncMock()
        client.scan.side_effect = hang

        with pytest.raises(CacheStoreError, match="timed out"):
            await RedisCacheStore(client, timeout=0.01).delete_by_pattern("report:*:s:*")

    @pytest.mark.asyncio
    async def test_health_check(self, redis_client) -> None:
        assert await RedisCacheStore(redis_client).health_check() is True

    @pytest.mark.asyncio
    async def test_health_check_failure(self) -> None:
        client = AsyncMock()
        client.ping.side_effect = RedisConnectionError("down")
        assert await RedisCacheStore(client).health_check() is False


class TestCascadeAgainstRedis:
    """End-to-end cascades on a Redis keyspace."""

    @pytest.mark.asyncio
    async def test_shift_cascade(self, seeded, metrics) -> None:
        invalidator = CacheInvalidator(RedisCacheStore(seeded), metrics=metrics)

        result = await invalidator.invalidate_shift("shift-1", "store-9", "2024-01-15")

        assert result.success is True
        remaining = sorted([key async for key in seeded.scan_iter(match="*")])
        assert remaining == [
            "day:summary:store-9:2024-01-16",
            "report:week:store-1:2024:3",
        ]

    @pytest.mark.asyncio
    async def test_store_reset(self, seeded, metrics) -> None:
        invalidator = CacheInvalidator(RedisCacheStore(seeded), metrics=metrics)

        result = await invalidator.invalidate_store("store-9")

        assert result.success is True
        assert await seeded.exists("day:summary:store-9:2024-01-16") == 0
        assert await seeded.exists("shift:summary:shift-1") == 1
