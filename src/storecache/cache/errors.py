"""Exceptions raised by the cache layer."""

from __future__ import annotations


class CacheError(Exception):
    """Base class for storecache cache errors."""


class InvalidCacheKeyError(CacheError, ValueError):
    """An identifier cannot be turned into a cache key.

    Raised while planning a cascade, before the cache store is touched.
    Reaching this means a caller passed an unvalidated identifier.
    """


class CacheStoreError(CacheError):
    """A cache store operation failed (connection, timeout, server error)."""

    def __init__(self, operation: str, target: str, reason: str):
        self.operation = operation
        self.target = target
        self.reason = reason
        super().__init__(f"{operation} {target} failed: {reason}")
