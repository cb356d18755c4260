"""Mutation-triggered invalidation hooks.

Call these from business services after the mutation has committed. Each hook
resolves its cascade immediately, so a malformed identifier raises
InvalidCacheKeyError at the call site, then hands the plan to the dispatcher
and returns without waiting for the cache store.

Example:
    summary = await day_summary_service.update(store_id, business_date, data)
    hooks.on_day_summary_updated(store_id, business_date)
    return summary
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

from storecache.cache.dispatch import InvalidationDispatcher
from storecache.cache.invalidation import CacheInvalidator, InvalidationPlan
from storecache.cache.results import InvalidationResult
from storecache.config import settings

logger = logging.getLogger(__name__)

BusinessDate = date | datetime | str


def to_business_date(value: BusinessDate, timezone: str | None = None) -> str:
    """Normalize a business date to ``YYYY-MM-DD``.

    Aware datetimes are converted into the store's business timezone first;
    naive datetimes are taken as already local. Strings pass through and are
    validated when the key is built.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(ZoneInfo(timezone or settings.business_timezone))
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


class CacheInvalidationHooks:
    """Entry points used by shift, day-summary and lookup-config services."""

    def __init__(
        self,
        invalidator: CacheInvalidator,
        dispatcher: InvalidationDispatcher | None = None,
        timezone: str | None = None,
    ):
        self.invalidator = invalidator
        self.dispatcher = dispatcher or InvalidationDispatcher(invalidator)
        self.timezone = timezone

    def _dispatch(self, plan: InvalidationPlan) -> asyncio.Task[InvalidationResult | None]:
        logger.debug(f"Dispatching {plan.operation.value} for {len(plan.steps)} steps")
        return self.dispatcher.submit(plan)

    def on_shift_updated(
        self, shift_id: str, store_id: str, business_date: BusinessDate
    ) -> asyncio.Task[InvalidationResult | None]:
        """Shift summary written, shift closed or Z report regenerated."""
        return self._dispatch(
            self.invalidator.plan_shift(
                shift_id, store_id, to_business_date(business_date, self.timezone)
            )
        )

    def on_day_summary_updated(
        self, store_id: str, business_date: BusinessDate
    ) -> asyncio.Task[InvalidationResult | None]:
        """Day summary recalculated, updated or closed."""
        return self._dispatch(
            self.invalidator.plan_day(store_id, to_business_date(business_date, self.timezone))
        )

    def on_store_reset(self, store_id: str) -> asyncio.Task[InvalidationResult | None]:
        """Store data re-seeded or backfilled."""
        return self._dispatch(self.invalidator.plan_store(store_id))

    def on_lookup_config_changed(
        self, client_id: str | None, store_id: str | None = None
    ) -> asyncio.Task[InvalidationResult | None]:
        """Tender types, departments or tax rates changed."""
        return self._dispatch(self.invalidator.plan_lookup(client_id, store_id))

    def on_tender_type_changed(
        self, client_id: str | None
    ) -> asyncio.Task[InvalidationResult | None]:
        """A single tender type was created, edited or removed."""
        return self._dispatch(self.invalidator.plan_tender_type(client_id))
