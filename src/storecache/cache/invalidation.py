"""Cascading cache invalidation.

A mutation to a low-level entity must also invalidate every cache derived
from it: a shift feeds its day summary, and day summaries feed the store's
weekly and monthly reports. Each cascade operation is planned up front as a
fixed sequence of steps, then executed step by step against the cache store.

Execution is best effort. A failed delete is recorded in the result and the
remaining steps still run; nothing is raised for store failures.

Example:
    invalidator = CacheInvalidator(store)

    # Awaited (CLI, scripts)
    result = await invalidator.invalidate_shift("shift-1", "store-9", "2024-01-15")

    # Planned now, executed later (hooks)
    plan = invalidator.plan_day("store-9", "2024-01-15")
    result = await invalidator.run(plan)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from storecache.cache.keys import CacheKeys
from storecache.cache.results import InvalidationLogger, InvalidationResult
from storecache.cache.store import CacheStore
from storecache.observability.metrics import MetricsRegistry, get_metrics

logger = logging.getLogger(__name__)


class CascadeOperation(str, Enum):
    """Named cascade operations."""

    SHIFT = "invalidate-shift"
    DAY = "invalidate-day"
    STORE = "invalidate-store"
    LOOKUP = "invalidate-lookup"
    TENDER_TYPE = "invalidate-tender-type"


@dataclass(frozen=True)
class InvalidationStep:
    """One executor call: delete these keys and patterns under one label."""

    tier: str
    label: str
    keys: tuple[str, ...] = ()
    patterns: tuple[str, ...] = ()


@dataclass(frozen=True)
class InvalidationPlan:
    """Resolved steps of a cascade, in execution order."""

    operation: CascadeOperation
    steps: tuple[InvalidationStep, ...]

    @property
    def targets(self) -> list[str]:
        """Every key and pattern the plan will attempt, in order."""
        return [target for step in self.steps for target in (*step.keys, *step.patterns)]


class InvalidationExecutor:
    """Runs delete directives against a cache store.

    Reports what happened; never raises for store failures and never stops
    early, so one failing key cannot prevent attempts on its siblings.
    """

    def __init__(self, store: CacheStore):
        self.store = store

    async def execute(
        self,
        label: str,
        keys: Sequence[str] = (),
        patterns: Sequence[str] = (),
    ) -> InvalidationResult:
        invalidated: list[str] = []
        errors: list[str] = []

        for key in keys:
            try:
                await self.store.delete(key)
            except Exception as e:
                errors.append(f"{label}: {_describe(e)}")
                logger.debug(f"Delete failed for {key}: {e}")
            else:
                invalidated.append(key)

        for pattern in patterns:
            try:
                count = await self.store.delete_by_pattern(pattern)
            except Exception as e:
                errors.append(f"{label}: {_describe(e)}")
                logger.debug(f"Pattern delete failed for {pattern}: {e}")
            else:
                invalidated.append(pattern)
                logger.debug(f"Pattern {pattern} removed {count} keys")

        return InvalidationResult(invalidated_keys=tuple(invalidated), errors=tuple(errors))


def _describe(error: Exception) -> str:
    return str(error) or type(error).__name__


class CacheInvalidator:
    """Cascade planner: encodes which caches derive from which entities.

    Planning resolves every key before any I/O happens, so malformed
    identifiers raise InvalidCacheKeyError without touching the store.
    """

    def __init__(
        self,
        store: CacheStore,
        invalidation_logger: InvalidationLogger | None = None,
        metrics: MetricsRegistry | None = None,
    ):
        self.executor = InvalidationExecutor(store)
        self._metrics = metrics
        self.invalidation_logger = invalidation_logger or InvalidationLogger(metrics=metrics)

    # -------------------------------------------------------------------------
    # Planning
    # -------------------------------------------------------------------------

    def plan_shift(self, shift_id: str, store_id: str, business_date: str) -> InvalidationPlan:
        """Shift changed: its own caches, its day, then the store's reports."""
        return InvalidationPlan(
            CascadeOperation.SHIFT,
            (
                InvalidationStep(
                    "self", "shift summary", keys=(CacheKeys.shift_summary(shift_id),)
                ),
                InvalidationStep("self", "z report", keys=(CacheKeys.z_report(shift_id),)),
                InvalidationStep(
                    "day", "day summary", keys=(CacheKeys.day_summary(store_id, business_date),)
                ),
                _store_reports_step(store_id),
            ),
        )

    def plan_day(self, store_id: str, business_date: str) -> InvalidationPlan:
        """Day summary changed: the day itself, then the store's reports."""
        return InvalidationPlan(
            CascadeOperation.DAY,
            (
                InvalidationStep(
                    "self", "day summary", keys=(CacheKeys.day_summary(store_id, business_date),)
                ),
                _store_reports_step(store_id),
            ),
        )

    def plan_store(self, store_id: str) -> InvalidationPlan:
        """Store-wide reset: every day summary and every period report."""
        return InvalidationPlan(
            CascadeOperation.STORE,
            (
                InvalidationStep(
                    "days",
                    "store day summaries",
                    patterns=(CacheKeys.day_summary_pattern(store_id),),
                ),
                _store_reports_step(store_id),
            ),
        )

    def plan_lookup(self, client_id: str | None, store_id: str | None = None) -> InvalidationPlan:
        """Lookup configuration changed for a client, optionally for one store.

        Tax rates are per store; without a store that step is left out.
        """
        department_keys = [CacheKeys.departments(client_id)]
        if store_id is not None:
            department_keys.append(CacheKeys.departments(client_id, store_id))

        steps = [
            InvalidationStep("tenders", "tender types", keys=(CacheKeys.tender_types(client_id),)),
            InvalidationStep("departments", "departments", keys=tuple(department_keys)),
        ]
        if store_id is not None:
            steps.append(
                InvalidationStep("tax-rates", "tax rates", keys=(CacheKeys.tax_rates(store_id),))
            )
        return InvalidationPlan(CascadeOperation.LOOKUP, tuple(steps))

    def plan_tender_type(self, client_id: str | None) -> InvalidationPlan:
        """A tender type changed.

        Client overrides can shadow or unshadow system defaults that
        consumers already resolved and cached, so a client change also drops
        the system-default entry.
        """
        steps = [
            InvalidationStep("tenders", "tender types", keys=(CacheKeys.tender_types(client_id),))
        ]
        if client_id is not None:
            steps.append(
                InvalidationStep(
                    "defaults", "default tender types", keys=(CacheKeys.tender_types(None),)
                )
            )
        return InvalidationPlan(CascadeOperation.TENDER_TYPE, tuple(steps))

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    async def run(self, plan: InvalidationPlan) -> InvalidationResult:
        """Execute every step of a plan and log the merged outcome.

        Steps always run to completion regardless of earlier failures.
        """
        started = time.perf_counter()
        parts: list[InvalidationResult] = []
        for step in plan.steps:
            part = await self.executor.execute(step.label, step.keys, step.patterns)
            if part.errors:
                logger.debug(
                    f"{plan.operation.value} tier {step.tier} had {len(part.errors)} errors"
                )
            parts.append(part)

        result = InvalidationResult.merge(parts)
        (self._metrics or get_metrics()).observe_duration(
            plan.operation.value, time.perf_counter() - started
        )
        self.invalidation_logger.log(plan.operation.value, result)
        return result

    async def invalidate_shift(
        self, shift_id: str, store_id: str, business_date: str
    ) -> InvalidationResult:
        return await self.run(self.plan_shift(shift_id, store_id, business_date))

    async def invalidate_day(self, store_id: str, business_date: str) -> InvalidationResult:
        return await self.run(self.plan_day(store_id, business_date))

    async def invalidate_store(self, store_id: str) -> InvalidationResult:
        return await self.run(self.plan_store(store_id))

    async def invalidate_lookup(
        self, client_id: str | None, store_id: str | None = None
    ) -> InvalidationResult:
        return await self.run(self.plan_lookup(client_id, store_id))

    async def invalidate_tender_type(self, client_id: str | None) -> InvalidationResult:
        return await self.run(self.plan_tender_type(client_id))


def _store_reports_step(store_id: str) -> InvalidationStep:
    return InvalidationStep(
        "reports", "store reports", patterns=(CacheKeys.store_reports_pattern(store_id),)
    )
