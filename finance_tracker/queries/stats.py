"""
Statistics Engine

Derives dashboard figures from the current transaction list. Everything is
recomputed from scratch on each call; nothing is cached between mutations.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from finance_tracker.models.transaction import (
    ZERO,
    BudgetStatus,
    Stats,
    TrackerSettings,
    Transaction,
    TrendBucket,
    to_decimal,
)


TREND_DAYS = 7


def category_totals(records: Iterable[Transaction]) -> dict[str, Decimal]:
    """Sum amounts per category, in first-encountered order."""
    totals: dict[str, Decimal] = {}
    for record in records:
        totals[record.category] = totals.get(record.category, ZERO) + to_decimal(record.amount)
    return totals


def top_category(totals: dict[str, Decimal]) -> Optional[str]:
    """Category with the largest total; the first one wins a tie."""
    best = None
    for category, amount in totals.items():
        if best is None or amount > totals[best]:
            best = category
    return best


def budget_status(total: Decimal, settings: TrackerSettings) -> Optional[BudgetStatus]:
    if settings.budget_cap <= 0:
        return None
    return BudgetStatus(
        remaining=settings.budget_cap - total,
        is_over=total > settings.budget_cap,
    )


def spending_trend(
    records: Iterable[Transaction],
    today: Optional[date] = None,
    days: int = TREND_DAYS,
) -> list[TrendBucket]:
    """
    Daily totals for the trailing window ending today.

    Returns `days` buckets, oldest first. Records outside the window are
    ignored.
    """
    today = today or date.today()
    buckets = [TrendBucket(day=today - timedelta(days=offset)) for offset in range(days - 1, -1, -1)]
    index = {bucket.day.isoformat(): bucket for bucket in buckets}

    for record in records:
        bucket = index.get(record.date)
        if bucket is not None:
            bucket.amount += to_decimal(record.amount)

    return buckets


def compute_stats(
    records: Iterable[Transaction],
    settings: Optional[TrackerSettings] = None,
    today: Optional[date] = None,
) -> Stats:
    records = list(records)
    settings = settings or TrackerSettings()

    totals = category_totals(records)
    total_amount = sum((to_decimal(record.amount) for record in records), ZERO)

    return Stats(
        total_count=len(records),
        total_amount=total_amount,
        category_totals=totals,
        top_category=top_category(totals),
        budget_status=budget_status(total_amount, settings),
        trend=spending_trend(records, today),
    )
