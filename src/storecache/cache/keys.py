"""Cache key schema for storecache.

Key format: {namespace}:{kind}:{identifier}[:{identifier}...]

Where:
- namespace: "shift", "day", "report", "config"
- kind: "summary", "z", "week", "month", "tenders", "departments", "tax-rates"
- identifier: shift_id, store_id, client_id, business date (YYYY-MM-DD), ...

Patterns use Redis glob syntax and are only ever passed to pattern deletes.
Identifiers must not contain the separator or glob metacharacters, otherwise
a pattern for one namespace could match keys of another.
"""

from __future__ import annotations

import re
from datetime import date

from storecache.cache.errors import InvalidCacheKeyError

SEP = ":"
WILDCARD = "*"

# Rendered client segment for system-wide defaults
SYSTEM_DEFAULT = "null"

_FORBIDDEN = re.compile(r"[:*?\[\]\s]")
_BUSINESS_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def _segment(value: str, name: str) -> str:
    """Validate one identifier segment and return it unchanged."""
    if not isinstance(value, str) or not value:
        raise InvalidCacheKeyError(f"Cache key component {name!r} must be a non-empty string")
    if _FORBIDDEN.search(value):
        raise InvalidCacheKeyError(
            f"Cache key component {name!r} contains a reserved character: {value!r}"
        )
    return value


def _business_date(value: str) -> str:
    if not isinstance(value, str) or not _BUSINESS_DATE.fullmatch(value):
        raise InvalidCacheKeyError(f"business_date must be YYYY-MM-DD, got {value!r}")
    try:
        date.fromisoformat(value)
    except ValueError as e:
        raise InvalidCacheKeyError(f"business_date is not a calendar date: {value!r}") from e
    return value


def _client(client_id: str | None) -> str:
    if client_id is None:
        return SYSTEM_DEFAULT
    if client_id == SYSTEM_DEFAULT:
        raise InvalidCacheKeyError(
            f"client_id {SYSTEM_DEFAULT!r} is reserved for system defaults; pass None instead"
        )
    return _segment(client_id, "client_id")


class CacheKeys:
    """Cache key generator following consistent naming convention."""

    # -------------------------------------------------------------------------
    # Shift level
    # -------------------------------------------------------------------------

    @classmethod
    def shift_summary(cls, shift_id: str) -> str:
        """Key for a shift summary."""
        return f"shift:summary:{_segment(shift_id, 'shift_id')}"

    @classmethod
    def z_report(cls, shift_id: str) -> str:
        """Key for the Z report of a closed shift."""
        return f"report:z:{_segment(shift_id, 'shift_id')}"

    # -------------------------------------------------------------------------
    # Day level
    # -------------------------------------------------------------------------

    @classmethod
    def day_summary(cls, store_id: str, business_date: str) -> str:
        """Key for a store's day summary.

        The date must already be normalized to the store's business day.
        """
        return (
            f"day:summary:{_segment(store_id, 'store_id')}"
            f"{SEP}{_business_date(business_date)}"
        )

    @classmethod
    def day_summary_pattern(cls, store_id: str) -> str:
        """Pattern matching every day summary of a store."""
        return f"day:summary:{_segment(store_id, 'store_id')}{SEP}{WILDCARD}"

    # -------------------------------------------------------------------------
    # Period reports
    # -------------------------------------------------------------------------

    @classmethod
    def weekly_report(cls, store_id: str, year: int, week: int) -> str:
        """Key for a weekly period report."""
        return f"report:week:{_segment(store_id, 'store_id')}:{int(year)}:{int(week)}"

    @classmethod
    def monthly_report(cls, store_id: str, year: int, month: int) -> str:
        """Key for a monthly period report."""
        return f"report:month:{_segment(store_id, 'store_id')}:{int(year)}:{int(month)}"

    @classmethod
    def store_reports_pattern(cls, store_id: str) -> str:
        """Pattern matching all period-report caches for a store.

        Z reports are keyed by shift and have no trailing segment, so they
        are never matched here.
        """
        return f"report:{WILDCARD}:{_segment(store_id, 'store_id')}:{WILDCARD}"

    # -------------------------------------------------------------------------
    # Lookup tables
    # -------------------------------------------------------------------------

    @classmethod
    def tender_types(cls, client_id: str | None) -> str:
        """Key for a client's tender types; None is the system default."""
        return f"config:tenders:{_client(client_id)}"

    @classmethod
    def departments(cls, client_id: str | None, store_id: str | None = None) -> str:
        """Key for departments.

        Without a store this is the client-level entry, stored under the
        literal ``*`` store segment. It is an exact key, not a pattern.
        """
        store = WILDCARD if store_id is None else _segment(store_id, "store_id")
        return f"config:departments:{_client(client_id)}:{store}"

    @classmethod
    def tax_rates(cls, store_id: str) -> str:
        """Key for a store's tax rates."""
        return f"config:tax-rates:{_segment(store_id, 'store_id')}"
