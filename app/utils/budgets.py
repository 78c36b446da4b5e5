"""
Budget evaluation
Measures spending against each budget's category and period.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from app.models.analytics import BudgetStatus
from app.utils.periods import resolve_timezone
from app.utils.validation import coerce_budgets, coerce_categories, coerce_transactions

logger = logging.getLogger(__name__)

UNDER = "under"
NEAR = "near"
OVER = "over"
NEAR_THRESHOLD = 80.0
DEFAULT_ALERT_THRESHOLD = NEAR_THRESHOLD


def classify_budget(percentage_used: float) -> str:
    """Three-state status from the *uncapped* percentage.

    The near band is fixed at 80-100%; the configurable alert threshold only
    decides which budgets are reported by :func:`budget_alerts`.
    """
    if percentage_used > 100:
        return OVER
    if percentage_used >= NEAR_THRESHOLD:
        return NEAR
    return UNDER


def evaluate_budgets(
    budgets: Iterable,
    transactions: Iterable,
    categories: Optional[Iterable] = None,
    tz=None,
) -> List[BudgetStatus]:
    zone = resolve_timezone(tz)
    budget_records = coerce_budgets(budgets, zone)
    records = coerce_transactions(transactions, zone)
    names = {category.id: category.name for category in coerce_categories(categories)}

    statuses: List[BudgetStatus] = []
    for budget in budget_records:
        category_name = names.get(budget.category_id, budget.category_id)
        spent = sum(
            (
                t.amount
                for t in records
                if t.type == "expense"
                and t.category == category_name
                and budget.start_date <= t.date <= budget.end_date
            ),
            0.0,
        )
        percentage_used = (spent / budget.amount * 100) if budget.amount > 0 else 0.0
        statuses.append(
            BudgetStatus(
                budget_id=budget.id,
                category_id=budget.category_id,
                category_name=category_name,
                budgeted=budget.amount,
                spent=spent,
                percentage_used=percentage_used,
                status=classify_budget(percentage_used),
            )
        )

    logger.debug(f"Evaluated {len(statuses)} budgets against {len(records)} transactions")
    return statuses


def over_budget(statuses: Iterable[BudgetStatus]) -> List[BudgetStatus]:
    return [status for status in statuses if status.percentage_used > 100]


def budget_alerts(statuses: Iterable[BudgetStatus], threshold: float = DEFAULT_ALERT_THRESHOLD) -> List[BudgetStatus]:
    """Budgets approaching, but not past, their limit."""
    return [status for status in statuses if threshold <= status.percentage_used <= 100]
