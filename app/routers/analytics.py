"""
Analytics Router
Stateless endpoints: the caller posts a snapshot of its records and gets the
derived analytics back. Nothing is stored.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.core.config import settings
from app.utils.analyzer import FinanceAnalyzer
from app.utils.budgets import budget_alerts

router = APIRouter()
logger = logging.getLogger(__name__)
finance_analyzer = FinanceAnalyzer.from_settings(settings)


class AnalyticsSnapshot(BaseModel):
    # Records stay raw here so the engine reports which record and field is bad
    transactions: List[Dict[str, Any]] = Field(default_factory=list)
    budgets: List[Dict[str, Any]] = Field(default_factory=list)
    goals: List[Dict[str, Any]] = Field(default_factory=list)
    categories: List[Dict[str, Any]] = Field(default_factory=list)
    now: Optional[datetime] = None
    months: Optional[int] = Field(default=None, ge=0)
    days: int = Field(default=30, ge=0)
    limit: Optional[int] = Field(default=None, ge=1)


@router.post("/trends")
def spending_trends(snapshot: AnalyticsSnapshot) -> List[Dict]:
    points = finance_analyzer.spending_trends(snapshot.transactions, months=snapshot.months, now=snapshot.now)
    return [point.to_dict() for point in points]


@router.post("/daily-trend")
def daily_trend(snapshot: AnalyticsSnapshot) -> List[Dict]:
    points = finance_analyzer.daily_trend(snapshot.transactions, days=snapshot.days, now=snapshot.now)
    return [point.to_dict() for point in points]


@router.post("/monthly-comparison")
def monthly_comparison(snapshot: AnalyticsSnapshot) -> Dict:
    months = finance_analyzer.monthly_comparison(
        snapshot.transactions, snapshot.budgets, months=snapshot.months, now=snapshot.now
    )
    return {
        "months": [month.to_dict() for month in months],
        "month_over_month": finance_analyzer.month_over_month(snapshot.transactions, now=snapshot.now),
        "velocity": finance_analyzer.spending_velocity(snapshot.transactions, now=snapshot.now).to_dict(),
    }


@router.post("/categories")
def category_spending(snapshot: AnalyticsSnapshot) -> List[Dict]:
    spending = finance_analyzer.category_spending(
        snapshot.transactions, snapshot.categories, months=snapshot.months, now=snapshot.now
    )
    if snapshot.limit is not None:
        spending = spending[: snapshot.limit]
    return [item.to_dict() for item in spending]


@router.post("/budgets")
def budget_analysis(snapshot: AnalyticsSnapshot) -> Dict:
    statuses = finance_analyzer.budget_analysis(snapshot.budgets, snapshot.transactions, snapshot.categories)
    return {
        "budgets": [status.to_dict() for status in statuses],
        "alerts": [status.budget_id for status in budget_alerts(statuses, finance_analyzer.alert_threshold)],
    }


@router.post("/goals")
def goal_analysis(snapshot: AnalyticsSnapshot) -> Dict:
    return {
        "goals": [status.to_dict() for status in finance_analyzer.goal_analysis(snapshot.goals, now=snapshot.now)],
        "statistics": finance_analyzer.goal_statistics(snapshot.goals, now=snapshot.now).to_dict(),
    }


@router.post("/health-score")
def health_score(snapshot: AnalyticsSnapshot) -> Dict:
    score = finance_analyzer.financial_health_score(
        snapshot.transactions, snapshot.budgets, snapshot.goals, snapshot.categories, now=snapshot.now
    )
    logger.info(f"Health score computed: {score.score} ({score.category})")
    return score.to_dict()


@router.post("/dashboard")
def dashboard(snapshot: AnalyticsSnapshot) -> Dict:
    summary = finance_analyzer.dashboard_summary(
        snapshot.transactions, snapshot.budgets, snapshot.goals, snapshot.categories, now=snapshot.now
    )
    return summary.to_dict()


@router.post("/insights")
def insights(snapshot: AnalyticsSnapshot) -> Dict:
    result = finance_analyzer.financial_insights(
        snapshot.transactions, snapshot.budgets, snapshot.goals, snapshot.categories, now=snapshot.now
    )
    return result.to_dict()
