"""Prometheus metrics for storecache.

Provides metrics collection and exposure:
- Invalidation outcomes per cascade operation (success / partial)
- Errors and keys invalidated per operation
- Cascade latency

Usage:
    from storecache.observability.metrics import get_metrics

    metrics = get_metrics()
    metrics.record_invalidation("invalidate-shift", result)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

from storecache.config import settings

if TYPE_CHECKING:
    from storecache.cache.results import InvalidationResult

logger = logging.getLogger(__name__)


@dataclass
class MetricsRegistry:
    """Registry for Prometheus metrics."""

    invalidations_total: Any = None
    invalidation_errors_total: Any = None
    keys_invalidated_total: Any = None
    invalidation_duration_seconds: Any = None

    # Internal state
    _initialized: bool = field(default=False, repr=False)
    _registry: CollectorRegistry | None = field(default=None, repr=False)

    def initialize(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize Prometheus metrics."""
        if self._initialized:
            return

        if not settings.enable_metrics:
            logger.info("Metrics are disabled")
            self._initialized = True
            return

        self._registry = registry or REGISTRY

        self.invalidations_total = Counter(
            "storecache_invalidations_total",
            "Cascade invalidations by outcome",
            ["operation", "outcome"],
            registry=self._registry,
        )

        self.invalidation_errors_total = Counter(
            "storecache_invalidation_errors_total",
            "Failed key or pattern deletions",
            ["operation"],
            registry=self._registry,
        )

        self.keys_invalidated_total = Counter(
            "storecache_keys_invalidated_total",
            "Keys and patterns deleted successfully",
            ["operation"],
            registry=self._registry,
        )

        self.invalidation_duration_seconds = Histogram(
            "storecache_invalidation_duration_seconds",
            "Cascade invalidation latency in seconds",
            ["operation"],
            buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
            registry=self._registry,
        )

        self._initialized = True
        logger.info("Prometheus metrics initialized")

    def record_invalidation(self, operation: str, result: InvalidationResult) -> None:
        """Count one cascade outcome."""
        if self.invalidations_total is None:
            return

        outcome = "success" if result.success else "partial"
        self.invalidations_total.labels(operation=operation, outcome=outcome).inc()
        if result.errors:
            self.invalidation_errors_total.labels(operation=operation).inc(len(result.errors))
        if result.invalidated_keys:
            self.keys_invalidated_total.labels(operation=operation).inc(
                len(result.invalidated_keys)
            )

    def observe_duration(self, operation: str, seconds: float) -> None:
        """Record how long a cascade took."""
        if self.invalidation_duration_seconds is None:
            return
        self.invalidation_duration_seconds.labels(operation=operation).observe(seconds)


# Global metrics registry
metrics_registry = MetricsRegistry()


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry.

    Initializes metrics on first access.
    """
    if not metrics_registry._initialized:
        metrics_registry.initialize()
    return metrics_registry
