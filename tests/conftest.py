"""Global pytest configuration and fixtures.

Provides in-memory cache stores, including one that can be told to fail on
specific keys or patterns.
"""

from __future__ import annotations

from typing import Any

import pytest
from prometheus_client import CollectorRegistry

from storecache.cache.errors import CacheStoreError
from storecache.cache.store import InMemoryCacheStore
from storecache.observability.metrics import MetricsRegistry


class FlakyCacheStore(InMemoryCacheStore):
    """In-memory store that raises for selected keys and patterns.

    Records every call so tests can assert what was attempted.
    """

    def __init__(
        self,
        data: dict[str, Any] | None = None,
        fail_on: set[str] | None = None,
        reason: str = "connection reset by peer",
    ):
        super().__init__(data)
        self.fail_on = set(fail_on or ())
        self.reason = reason
        self.calls: list[tuple[str, str]] = []

    async def delete(self, key: str) -> bool:
        self.calls.append(("delete", key))
        if key in self.fail_on:
            raise CacheStoreError("delete", key, self.reason)
        return await super().delete(key)

    async def delete_by_pattern(self, pattern: str) -> int:
        self.calls.append(("delete_by_pattern", pattern))
        if pattern in self.fail_on:
            raise CacheStoreError("delete_by_pattern", pattern, self.reason)
        return await super().delete_by_pattern(pattern)


@pytest.fixture
def metrics() -> MetricsRegistry:
    """Metrics bound to a private Prometheus registry."""
    registry = MetricsRegistry()
    registry.initialize(CollectorRegistry())
    return registry


@pytest.fixture
def memory_store() -> InMemoryCacheStore:
    return InMemoryCacheStore(
        {
            "shift:summary:shift-1": {"net_sales": "120.00"},
            "report:z:shift-1": {"z_number": 1},
            "day:summary:store-9:2024-01-15": {"shifts": 3},
            "day:summary:store-9:2024-01-16": {"shifts": 2},
            "report:week:store-9:2024:3": {"days": 7},
            "report:month:store-9:2024:1": {"days": 31},
            "report:week:store-1:2024:3": {"days": 7},
        }
    )


@pytest.fixture
def flaky_store() -> FlakyCacheStore:
    return FlakyCacheStore()
