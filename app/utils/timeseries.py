"""
Temporal aggregation
Buckets transactions into calendar months (or days) and accumulates income
and expense sums per bucket.
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import timedelta
from typing import Dict, Iterable, List, Tuple

from app.models.analytics import DailyTrendPoint, MonthlyComparison, SpendingVelocity, TimeSeriesPoint
from app.utils.periods import days_back, month_bounds, month_key, months_back, reference_date, resolve_timezone
from app.utils.validation import coerce_budgets, coerce_transactions

logger = logging.getLogger(__name__)

POSITIVE_COLOR = "#4caf50"
NEGATIVE_COLOR = "#f44336"
VELOCITY_DAYS = 30


def _accumulate(buckets: Dict[str, List[float]], key: str, kind: str, amount: float) -> None:
    bucket = buckets.get(key)
    if bucket is None:
        return
    if kind == "income":
        bucket[0] += amount
    else:
        bucket[1] += amount


def spending_trends(
    transactions: Iterable,
    months: int = 12,
    now=None,
    tz=None,
) -> List[TimeSeriesPoint]:
    """One point per calendar month in the window ending at the reference month."""
    zone = resolve_timezone(tz)
    records = coerce_transactions(transactions, zone)
    if months <= 0:
        return []

    today = reference_date(now, zone)
    buckets: Dict[str, List[float]] = OrderedDict(
        (f"{year:04d}-{month:02d}", [0.0, 0.0]) for year, month in months_back(today, months)
    )
    for transaction in records:
        _accumulate(buckets, month_key(transaction.date), transaction.type, transaction.amount)

    logger.debug(f"Bucketed {len(records)} transactions into {len(buckets)} months")
    return [TimeSeriesPoint(date=key, income=income, expenses=expenses) for key, (income, expenses) in buckets.items()]


def daily_trend(
    transactions: Iterable,
    days: int = 30,
    now=None,
    tz=None,
) -> List[DailyTrendPoint]:
    """Net flow per day over the last ``days`` days, colored by its sign."""
    zone = resolve_timezone(tz)
    records = coerce_transactions(transactions, zone)
    if days <= 0:
        return []

    today = reference_date(now, zone)
    buckets: Dict[str, List[float]] = OrderedDict((day.isoformat(), [0.0, 0.0]) for day in days_back(today, days))
    for transaction in records:
        _accumulate(buckets, transaction.date.isoformat(), transaction.type, transaction.amount)

    return [
        DailyTrendPoint(
            date=key,
            value=income - expenses,
            color=POSITIVE_COLOR if income >= expenses else NEGATIVE_COLOR,
        )
        for key, (income, expenses) in buckets.items()
    ]


def monthly_comparison(
    transactions: Iterable,
    budgets: Iterable = (),
    months: int = 6,
    now=None,
    tz=None,
) -> List[MonthlyComparison]:
    """Income, expenses and budgeted amount per month, oldest first."""
    zone = resolve_timezone(tz)
    records = coerce_transactions(transactions, zone)
    budget_records = coerce_budgets(budgets, zone)
    if months <= 0:
        return []

    today = reference_date(now, zone)
    comparison: List[MonthlyComparison] = []
    for year, month in months_back(today, months):
        start, end = month_bounds(year, month)
        income = 0.0
        expenses = 0.0
        for transaction in records:
            if start <= transaction.date <= end:
                if transaction.type == "income":
                    income += transaction.amount
                else:
                    expenses += transaction.amount
        budgeted = sum(
            (budget.amount for budget in budget_records if budget.start_date <= end and budget.end_date >= start),
            0.0,
        )
        comparison.append(
            MonthlyComparison(
                month=f"{year:04d}-{month:02d}",
                income=income,
                expenses=expenses,
                budgeted_expenses=budgeted,
            )
        )
    return comparison


def spending_velocity(transactions: Iterable, now=None, tz=None) -> SpendingVelocity:
    """Average expense rate over the trailing 30 days."""
    zone = resolve_timezone(tz)
    records = coerce_transactions(transactions, zone)
    cutoff = reference_date(now, zone) - timedelta(days=VELOCITY_DAYS)

    spent = sum((t.amount for t in records if t.type == "expense" and t.date >= cutoff), 0.0)
    daily = spent / VELOCITY_DAYS
    return SpendingVelocity(daily=daily, weekly=daily * 7, monthly=daily * VELOCITY_DAYS)


def totals(transactions: Iterable) -> Tuple[float, float, float]:
    """All-time (income, expenses, net)."""
    records = coerce_transactions(transactions)
    income = sum((t.amount for t in records if t.type == "income"), 0.0)
    expenses = sum((t.amount for t in records if t.type == "expense"), 0.0)
    return income, expenses, income - expenses


def percentage_change(current: float, previous: float) -> float:
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100
