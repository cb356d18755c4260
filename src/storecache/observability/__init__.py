"""Observability module for storecache.

Provides metrics and structured logging:
- Prometheus counters for invalidation outcomes
- JSON structured logging with correlation and tenant context
"""

from storecache.observability.logging import (
    LogContext,
    client_id_var,
    configure_logging,
    correlation_id_var,
    store_id_var,
)
from storecache.observability.metrics import (
    MetricsRegistry,
    get_metrics,
    metrics_registry,
)

__all__ = [
    # Logging
    "configure_logging",
    "LogContext",
    "correlation_id_var",
    "client_id_var",
    "store_id_var",
    # Metrics
    "MetricsRegistry",
    "metrics_registry",
    "get_metrics",
]
