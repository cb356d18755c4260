"""Cache store adapter interface and an in-memory backend.

The invalidation executor only needs two operations from a cache store:
delete one key and delete every key matching a glob pattern. Both must treat
a missing key as success.
"""

from __future__ import annotations

from fnmatch import fnmatchcase
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache backends consumed by the invalidation executor."""

    async def delete(self, key: str) -> bool:
        """Remove a key. Returns True if it existed, False if it was absent."""
        ...

    async def delete_by_pattern(self, pattern: str) -> int:
        """Remove every key matching a glob pattern. Returns the number removed."""
        ...


class InMemoryCacheStore:
    """Dictionary-backed cache store.

    Suitable for single-process deployments and local development. Pattern
    matching follows Redis glob semantics closely enough for the key schema
    in storecache.cache.keys.
    """

    def __init__(self, data: dict[str, Any] | None = None):
        self._data: dict[str, Any] = dict(data or {})

    async def delete(self, key: str) -> bool:
        if key not in self._data:
            return False
        del self._data[key]
        return True

    async def delete_by_pattern(self, pattern: str) -> int:
        matched = [key for key in self._data if fnmatchcase(key, pattern)]
        for key in matched:
            del self._data[key]
        return len(matched)

    async def health_check(self) -> bool:
        return True

    def keys(self) -> list[str]:
        """Snapshot of the stored keys."""
        return list(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)
