"""
SubsAPI: Overlap Accounting Engine
====================================

What:  Computes how many distinct calendar months a user's subscriptions to one
       service were active inside a query window, and what those months cost.
How:   Two pure steps folded over the subscriptions in the order supplied:

    ┌──────────────┐    ┌─────────────────────┐    ┌──────────────────────┐
    │ Subscription │───▶│ normalize_interval  │───▶│  accumulate_months   │
    │ + window     │    │ (clip to window)    │    │ (dedupe month keys)  │
    └──────────────┘    └─────────────────────┘    └──────────────────────┘

    normalize_interval clips [start, end] to [window_start, window_end] on
    full dates. accumulate_months truncates both ends to the first of the
    month and inserts every month key in between into a shared set; only
    months not seen before are charged, at the price of the subscription
    that first covered them.

Worked example (window 01-2024 → 08-2024):
    A: price 100, 01-2024 → open   adds Jan..Aug  → 8 new months × 100
    B: price 200, 06-2024 → open   adds Jun..Aug  → 0 new months
    Result: unique_months=8, total_cost=800, unit_price=100

    Reversed (B first): B charges Jun..Aug at 200 (600), A charges Jan..May
    at 100 (500) → total_cost=1100, unique_months=8, unit_price=200.

Properties:
    - No I/O, no logging, no shared state between calls.
    - Processing order is the input order; callers must supply a stable order.
    - Inputs are assumed valid (end >= start, window_end >= window_start).
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Iterator, Optional, Protocol, Set, Tuple

MonthKey = Tuple[int, int]

ONE_DAY = timedelta(days=1)


class BillableSubscription(Protocol):
    """Anything with a monthly price and an active date range."""

    price: int
    start_date: date
    end_date: Optional[date]


@dataclass(frozen=True)
class EffectiveInterval:
    """The part of a subscription's active range that falls inside the window."""

    start: date
    end: date


@dataclass(frozen=True)
class SubscriptionSummary:
    unit_price: int = 0
    total_cost: int = 0
    unique_months: int = 0


# ══════════════════════════════════════════════════════════════════════════
# Interval Normalizer
# ══════════════════════════════════════════════════════════════════════════

def normalize_interval(
    subscription_start: date,
    subscription_end: Optional[date],
    window_start: date,
    window_end: date,
) -> Optional[EffectiveInterval]:
    """
    Clip a subscription's active range to the query window.

    An open-ended subscription (subscription_end is None) runs through
    window_end. Returns None when the clipped range is empty, including the
    case where the start lands exactly one day after the end.
    """
    effective_start = max(subscription_start, window_start)
    if subscription_end is None:
        effective_end = window_end
    else:
        effective_end = min(subscription_end, window_end)

    if effective_start > effective_end:
        return None
    # Adjacent ranges (start one day past the end) do not overlap.
    if effective_start == effective_end + ONE_DAY:
        return None

    return EffectiveInterval(start=effective_start, end=effective_end)


# ══════════════════════════════════════════════════════════════════════════
# Month Aggregator
# ══════════════════════════════════════════════════════════════════════════

def iter_months(start: date, end: date) -> Iterator[MonthKey]:
    """Yield (year, month) for every calendar month from start to end inclusive."""
    year, month = start.year, start.month
    last = (end.year, end.month)
    while (year, month) <= last:
        yield year, month
        if month == 12:
            year, month = year + 1, 1
        else:
            month += 1


def accumulate_months(interval: EffectiveInterval, seen: Set[MonthKey]) -> int:
    """Add the interval's months to `seen`; return how many were not already there."""
    added = 0
    for key in iter_months(interval.start, interval.end):
        if key in seen:
            continue
        seen.add(key)
        added += 1
    return added


# ══════════════════════════════════════════════════════════════════════════
# Orchestration
# ══════════════════════════════════════════════════════════════════════════

def compute_summary(
    subscriptions: Iterable[BillableSubscription],
    period_start: date,
    period_end: date,
) -> SubscriptionSummary:
    """
    Fold subscriptions into a single cost / month-count summary.

    Args:
        subscriptions: Records in processing order (first one wins a
                       shared month).
        period_start:  Inclusive window start; `date.min` for "since always".
        period_end:    Inclusive window end; also the end of open-ended
                       subscriptions.

    Returns:
        SubscriptionSummary where unit_price is the price of the first
        subscription that contributed at least one month (0 if none did).
    """
    seen: Set[MonthKey] = set()
    unit_price: Optional[int] = None
    total_cost = 0

    for subscription in subscriptions:
        interval = normalize_interval(
            subscription.start_date,
            subscription.end_date,
            period_start,
            period_end,
        )
        if interval is None:
            continue

        added = accumulate_months(interval, seen)
        if added == 0:
            continue

        if unit_price is None:
            unit_price = subscription.price
        total_cost += subscription.price * added

    return SubscriptionSummary(
        unit_price=unit_price or 0,
        total_cost=total_cost,
        unique_months=len(seen),
    )
