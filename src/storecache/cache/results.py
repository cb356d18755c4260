"""Invalidation outcomes and how they are reported."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from storecache.observability.metrics import MetricsRegistry, get_metrics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvalidationResult:
    """Outcome of one invalidation.

    ``invalidated_keys`` holds every key or pattern deleted successfully, in
    the order attempted. ``errors`` holds one ``"<label>: <error>"`` entry per
    failed deletion. ``success`` is True iff there are no errors.
    """

    invalidated_keys: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()
    success: bool = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "success", not self.errors)

    @classmethod
    def merge(cls, results: Iterable[InvalidationResult]) -> InvalidationResult:
        """Concatenate results in the order given."""
        keys: list[str] = []
        errors: list[str] = []
        for result in results:
            keys.extend(result.invalidated_keys)
            errors.extend(result.errors)
        return cls(invalidated_keys=tuple(keys), errors=tuple(errors))

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "invalidated_keys": list(self.invalidated_keys),
            "errors": list(self.errors),
        }


class InvalidationLogger:
    """Records invalidation outcomes for operators.

    A failed result is a diagnostic: every key that could be deleted already
    was.
    """

    def __init__(
        self,
        log: logging.Logger | None = None,
        metrics: MetricsRegistry | None = None,
    ):
        self._log = log or logger
        self._metrics = metrics

    def log(self, operation: str, result: InvalidationResult) -> None:
        metrics = self._metrics or get_metrics()
        metrics.record_invalidation(operation, result)

        if result.success:
            self._log.info(
                f"[CACHE] {operation}: Invalidated {len(result.invalidated_keys)} keys",
                extra={
                    "operation": operation,
                    "invalidated_count": len(result.invalidated_keys),
                },
            )
        else:
            self._log.warning(
                f"[CACHE] {operation}: Partial invalidation with {len(result.errors)} errors",
                extra={
                    "operation": operation,
                    "invalidated_count": len(result.invalidated_keys),
                    "error_count": len(result.errors),
                    "errors": list(result.errors),
                },
            )
