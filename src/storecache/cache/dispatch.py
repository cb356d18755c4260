"""Fire-and-forget dispatch of cascade invalidations.

Business services call into this after their own writes commit. Each plan
runs as a detached asyncio task; the caller never awaits it, and nothing the
task does can fail the request that triggered it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from storecache.cache.invalidation import CacheInvalidator, InvalidationPlan
    from storecache.cache.results import InvalidationResult

logger = logging.getLogger(__name__)


class InvalidationDispatcher:
    """Runs invalidation plans as detached tasks.

    Keeps a strong reference to every in-flight task so the event loop does
    not garbage-collect it mid-run. Outcomes are logged by the invalidator;
    unexpected exceptions are logged here and go no further.
    """

    def __init__(self, invalidator: CacheInvalidator):
        self._invalidator = invalidator
        self._tasks: set[asyncio.Task[InvalidationResult | None]] = set()

    def submit(self, plan: InvalidationPlan) -> asyncio.Task[InvalidationResult | None]:
        """Schedule a plan on the running loop and return immediately.

        Must be called from within a running event loop.
        """
        task = asyncio.get_running_loop().create_task(
            self._run(plan), name=f"storecache:{plan.operation.value}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, plan: InvalidationPlan) -> InvalidationResult | None:
        try:
            return await self._invalidator.run(plan)
        except asyncio.CancelledError:
            logger.warning(f"[CACHE] {plan.operation.value}: Invalidation cancelled")
            raise
        except Exception:
            logger.exception(f"[CACHE] {plan.operation.value}: Invalidation task failed")
            return None

    @property
    def pending_count(self) -> int:
        """Number of invalidations still running."""
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for all in-flight invalidations to finish."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def stop(self, timeout: float = 5.0) -> None:
        """Drain in-flight invalidations, cancelling any still running after ``timeout``."""
        try:
            await asyncio.wait_for(self.drain(), timeout=timeout)
        except TimeoutError:
            remaining = list(self._tasks)
            logger.warning(f"Cancelling {len(remaining)} unfinished invalidations")
            for task in remaining:
                task.cancel()
            await asyncio.gather(*remaining, return_exceptions=True)
