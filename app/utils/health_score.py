"""
Financial health scoring
Blends savings rate, budget adherence, goal progress and expense stability
into a single 0-100 score with recommendations.
"""
from __future__ import annotations

import logging
import math
import statistics
from typing import Iterable, List, Sequence

from app.models.analytics import BudgetStatus, GoalStatus, HealthFactor, HealthScore, MonthlyComparison

logger = logging.getLogger(__name__)

# Neutral baseline for factors with no underlying data
NEUTRAL_SCORE = 50.0

WEIGHTS = {
    "savings_rate": 0.30,
    "budget_adherence": 0.25,
    "goal_progress": 0.25,
    "expense_stability": 0.20,
}

# (minimum score, category), checked top down
CATEGORY_THRESHOLDS = (
    (80, "excellent"),
    (65, "good"),
    (50, "fair"),
)

SAVINGS_TIP = "Increase your savings rate by reducing expenses or increasing income"
BUDGET_TIP = "Improve budget adherence by tracking expenses more closely"
GOAL_TIP = "Focus on making consistent progress toward your financial goals"
STABILITY_TIP = "Work on stabilizing your monthly expenses"
INVESTING_TIP = "Excellent financial health! Consider exploring investment opportunities"


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return min(high, max(low, value))


def savings_rate(monthly: Sequence[MonthlyComparison]) -> float:
    income = sum((month.income for month in monthly), 0.0)
    expenses = sum((month.expenses for month in monthly), 0.0)
    if income <= 0:
        return 0.0
    return (income - expenses) / income * 100


def savings_factor(monthly: Sequence[MonthlyComparison]) -> HealthFactor:
    # 20% savings rate maps to a perfect score
    rate = savings_rate(monthly)
    return HealthFactor(score=clamp(rate * 5), value=rate)


def budget_adherence_factor(budget_statuses: Sequence[BudgetStatus]) -> HealthFactor:
    if not budget_statuses:
        return HealthFactor(score=NEUTRAL_SCORE, value=NEUTRAL_SCORE)
    adherence = statistics.fmean(clamp(100 - (status.percentage_used - 100)) for status in budget_statuses)
    return HealthFactor(score=adherence, value=adherence)


def goal_progress_factor(goal_statuses: Sequence[GoalStatus]) -> HealthFactor:
    if not goal_statuses:
        return HealthFactor(score=NEUTRAL_SCORE, value=NEUTRAL_SCORE)
    average = statistics.fmean(goal.progress for goal in goal_statuses)
    return HealthFactor(score=average, value=average)


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Population standard deviation as a percentage of the mean."""
    if not values:
        return 0.0
    mean = statistics.fmean(values)
    if mean == 0:
        return 0.0
    return statistics.pstdev(values) / mean * 100


def expense_stability_factor(monthly: Sequence[MonthlyComparison]) -> HealthFactor:
    stability = clamp(100 - coefficient_of_variation([month.expenses for month in monthly]))
    return HealthFactor(score=stability, value=stability)


def categorize(score: int) -> str:
    for minimum, category in CATEGORY_THRESHOLDS:
        if score >= minimum:
            return category
    return "poor"


def recommendations(
    savings: HealthFactor,
    adherence: HealthFactor,
    goals: HealthFactor,
    stability: HealthFactor,
    score: int,
) -> List[str]:
    tips: List[str] = []
    if savings.score < 50:
        tips.append(SAVINGS_TIP)
    if adherence.score < 70:
        tips.append(BUDGET_TIP)
    if goals.score < 60:
        tips.append(GOAL_TIP)
    if stability.score < 60:
        tips.append(STABILITY_TIP)
    if score >= 80:
        tips.append(INVESTING_TIP)
    return tips


def financial_health_score(
    monthly: Iterable[MonthlyComparison],
    budget_statuses: Iterable[BudgetStatus] = (),
    goal_statuses: Iterable[GoalStatus] = (),
) -> HealthScore:
    monthly = list(monthly)
    budget_statuses = list(budget_statuses)
    goal_statuses = list(goal_statuses)

    savings = savings_factor(monthly)
    adherence = budget_adherence_factor(budget_statuses)
    goals = goal_progress_factor(goal_statuses)
    stability = expense_stability_factor(monthly)

    weighted = (
        savings.score * WEIGHTS["savings_rate"]
        + adherence.score * WEIGHTS["budget_adherence"]
        + goals.score * WEIGHTS["goal_progress"]
        + stability.score * WEIGHTS["expense_stability"]
    )
    # half-up, not banker's rounding
    score = int(math.floor(weighted + 0.5))

    logger.debug(
        f"Health factors: savings={savings.score:.1f} adherence={adherence.score:.1f} "
        f"goals={goals.score:.1f} stability={stability.score:.1f} -> {score}"
    )
    return HealthScore(
        score=score,
        category=categorize(score),
        savings_rate=savings,
        budget_adherence=adherence,
        goal_progress=goals,
        expense_stability=stability,
        recommendations=recommendations(savings, adherence, goals, stability, score),
    )
