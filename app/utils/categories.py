"""
Category aggregation
Groups expense transactions by category and assigns each category a display
color, either from the catalog or hashed from its name.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional

from app.models.analytics import CategorySpending
from app.utils.periods import month_bounds, reference_date, resolve_timezone, subtract_months
from app.utils.validation import coerce_categories, coerce_transactions

logger = logging.getLogger(__name__)

PALETTE = (
    "#f44336", "#e91e63", "#9c27b0", "#673ab7", "#3f51b5",
    "#2196f3", "#03a9f4", "#00bcd4", "#009688", "#4caf50",
    "#8bc34a", "#cddc39", "#ffeb3b", "#ffc107", "#ff9800",
    "#ff5722", "#795548", "#9e9e9e", "#607d8b",
)


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _utf16_units(text: str) -> Iterator[int]:
    for char in text:
        code = ord(char)
        if code > 0xFFFF:
            code -= 0x10000
            yield 0xD800 + (code >> 10)
            yield 0xDC00 + (code & 0x3FF)
        else:
            yield code


def name_hash(name: str) -> int:
    """``hash * 31 + unit`` over UTF-16 code units with 32-bit shifts.

    Matches the hash the web client uses, so server and browser agree on
    colors for categories that have none.
    """
    value = 0
    for unit in _utf16_units(name):
        value = unit + (_int32(_int32(value) << 5) - value)
    return value


def palette_index(name: str) -> int:
    return abs(name_hash(name)) % len(PALETTE)


def generate_color(name: str) -> str:
    return PALETTE[palette_index(name)]


def _aggregate(records, catalog) -> List[CategorySpending]:
    totals: Dict[str, List[float]] = {}
    for transaction in records:
        entry = totals.setdefault(transaction.category, [0.0, 0])
        entry[0] += transaction.amount
        entry[1] += 1

    total_spent = sum((amount for amount, _ in totals.values()), 0.0)
    colors = {}
    for category in catalog:
        if category.color and category.name not in colors:
            colors[category.name] = category.color

    spending = [
        CategorySpending(
            category=name,
            amount=amount,
            percentage=(amount / total_spent * 100) if total_spent > 0 else 0.0,
            color=colors.get(name) or generate_color(name),
            transaction_count=count,
        )
        for name, (amount, count) in totals.items()
    ]
    # sorted() is stable: equal amounts keep first-seen order
    return sorted(spending, key=lambda item: item.amount, reverse=True)


def category_spending(
    transactions: Iterable,
    categories: Optional[Iterable] = None,
    months: int = 12,
    now=None,
    tz=None,
) -> List[CategorySpending]:
    """Expense breakdown by category over the last ``months`` months."""
    zone = resolve_timezone(tz)
    records = coerce_transactions(transactions, zone)
    catalog = coerce_categories(categories)
    cutoff = subtract_months(reference_date(now, zone), months)

    recent = [t for t in records if t.type == "expense" and t.date >= cutoff]
    logger.debug(f"{len(recent)} expenses since {cutoff.isoformat()}")
    return _aggregate(recent, catalog)


def top_spending_categories(
    transactions: Iterable,
    categories: Optional[Iterable] = None,
    limit: int = 5,
    months: int = 12,
    now=None,
    tz=None,
) -> List[CategorySpending]:
    return category_spending(transactions, categories, months=months, now=now, tz=tz)[:limit]


def current_month_spending(
    transactions: Iterable,
    categories: Optional[Iterable] = None,
    limit: int = 6,
    now=None,
    tz=None,
) -> List[CategorySpending]:
    """Largest expense categories within the reference calendar month."""
    zone = resolve_timezone(tz)
    records = coerce_transactions(transactions, zone)
    catalog = coerce_categories(categories)
    today = reference_date(now, zone)
    start, end = month_bounds(today.year, today.month)

    current = [t for t in records if t.type == "expense" and start <= t.date <= end]
    return _aggregate(current, catalog)[:limit]
