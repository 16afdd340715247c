"""Month-key arithmetic on the Bikram Sambat calendar.

Only month granularity matters to the ledger, so variable BS month lengths are
ignored. Month numbers are validated when a ``BillingPeriod`` is built; every
function here assumes well-formed periods.
"""
from __future__ import annotations

from typing import Iterator

from .models import BS_MONTH_NAMES, BS_MONTH_NAMES_NEPALI, BillingPeriod

__all__ = [
    "BS_MONTH_NAMES",
    "BS_MONTH_NAMES_NEPALI",
    "compare_periods",
    "iter_periods",
    "month_window",
    "months_between",
    "next_period",
    "period_key",
    "previous_period",
    "shift_period",
]


def next_period(period: BillingPeriod) -> BillingPeriod:
    if period.month == 12:
        return BillingPeriod(period.year + 1, 1)
    return BillingPeriod(period.year, period.month + 1)


def previous_period(period: BillingPeriod) -> BillingPeriod:
    if period.month == 1:
        return BillingPeriod(period.year - 1, 12)
    return BillingPeriod(period.year, period.month - 1)


def period_key(period: BillingPeriod) -> str:
    return f"{period.year}-{period.month:02d}"


def compare_periods(a: BillingPeriod, b: BillingPeriod) -> int:
    left, right = (a.year, a.month), (b.year, b.month)
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def months_between(a: BillingPeriod, b: BillingPeriod) -> int:
    """Signed number of month steps needed to go from ``a`` to ``b``."""
    return (b.year - a.year) * 12 + (b.month - a.month)


def shift_period(period: BillingPeriod, months: int) -> BillingPeriod:
    index = period.year * 12 + (period.month - 1) + months
    return BillingPeriod(index // 12, index % 12 + 1)


def iter_periods(start: BillingPeriod, end: BillingPeriod) -> Iterator[BillingPeriod]:
    """Yield every period from ``start`` to ``end`` inclusive; nothing if end < start."""
    for offset in range(months_between(start, end) + 1):
        yield shift_period(start, offset)


def month_window(anchor: BillingPeriod, before: int = 6, after: int = 6) -> list[BillingPeriod]:
    """Periods offered when picking a billing month around ``anchor``."""
    return [shift_period(anchor, offset) for offset in range(-before, after + 1)]
