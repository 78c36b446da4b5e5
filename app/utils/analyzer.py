from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Any, Dict, Iterable, List, Optional

from app.models.analytics import (
    BudgetStatus,
    CategorySpending,
    DailyTrendPoint,
    DashboardSummary,
    FinancialInsights,
    GoalStatistics,
    GoalStatus,
    HealthScore,
    MonthlyComparison,
    SpendingVelocity,
    TimeSeriesPoint,
)
from app.utils import budgets as budget_eval
from app.utils import categories as category_agg
from app.utils import goals as goal_eval
from app.utils import timeseries
from app.utils.health_score import financial_health_score
from app.utils.periods import reference_date, resolve_timezone
from app.utils.validation import coerce_budgets, coerce_categories, coerce_goals, coerce_transactions

logger = logging.getLogger(__name__)


def _plural(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


class FinanceAnalyzer:
    """
    Stateless analytics facade shared by the HTTP routes and any other caller.

    It only carries configuration (timezone and window sizes); every method
    computes its result from the records passed in and an optional reference
    clock ``now``.
    """

    def __init__(
        self,
        timezone: Optional[tzinfo | str] = None,
        trend_months: int = 12,
        comparison_months: int = 6,
        category_lookback_months: int = 12,
        alert_threshold: float = budget_eval.DEFAULT_ALERT_THRESHOLD,
        deadline_days: int = 30,
    ) -> None:
        self._tz = resolve_timezone(timezone)
        self._trend_months = trend_months
        self._comparison_months = comparison_months
        self._category_lookback_months = category_lookback_months
        self._alert_threshold = alert_threshold
        self._deadline_days = deadline_days

    @classmethod
    def from_settings(cls, settings) -> "FinanceAnalyzer":
        return cls(
            timezone=settings.TIMEZONE,
            trend_months=settings.TREND_MONTHS,
            comparison_months=settings.COMPARISON_MONTHS,
            category_lookback_months=settings.CATEGORY_LOOKBACK_MONTHS,
            alert_threshold=settings.BUDGET_ALERT_THRESHOLD,
            deadline_days=settings.GOAL_DEADLINE_DAYS,
        )

    @property
    def timezone(self) -> tzinfo:
        return self._tz

    @property
    def alert_threshold(self) -> float:
        return self._alert_threshold

    # Trends

    def spending_trends(self, transactions: Iterable, months: Optional[int] = None, now=None) -> List[TimeSeriesPoint]:
        months = self._trend_months if months is None else months
        return timeseries.spending_trends(transactions, months=months, now=now, tz=self._tz)

    def daily_trend(self, transactions: Iterable, days: int = 30, now=None) -> List[DailyTrendPoint]:
        return timeseries.daily_trend(transactions, days=days, now=now, tz=self._tz)

    def monthly_comparison(
        self,
        transactions: Iterable,
        budgets: Iterable = (),
        months: Optional[int] = None,
        now=None,
    ) -> List[MonthlyComparison]:
        months = self._comparison_months if months is None else months
        return timeseries.monthly_comparison(transactions, budgets, months=months, now=now, tz=self._tz)

    def month_over_month(self, transactions: Iterable, now=None) -> Dict[str, Any]:
        """Current versus previous calendar month, with percentage changes."""
        last_month, current_month = timeseries.monthly_comparison(transactions, months=2, now=now, tz=self._tz)
        return {
            "current_month": {"income": current_month.income, "expenses": current_month.expenses},
            "last_month": {"income": last_month.income, "expenses": last_month.expenses},
            "change": {
                "income": timeseries.percentage_change(current_month.income, last_month.income),
                "expenses": timeseries.percentage_change(current_month.expenses, last_month.expenses),
            },
        }

    def spending_velocity(self, transactions: Iterable, now=None) -> SpendingVelocity:
        return timeseries.spending_velocity(transactions, now=now, tz=self._tz)

    # Categories

    def category_spending(
        self,
        transactions: Iterable,
        categories: Optional[Iterable] = None,
        months: Optional[int] = None,
        now=None,
    ) -> List[CategorySpending]:
        months = self._category_lookback_months if months is None else months
        return category_agg.category_spending(transactions, categories, months=months, now=now, tz=self._tz)

    def top_spending_categories(
        self,
        transactions: Iterable,
        categories: Optional[Iterable] = None,
        limit: int = 5,
        now=None,
    ) -> List[CategorySpending]:
        return self.category_spending(transactions, categories, now=now)[:limit]

    # Budgets and goals

    def budget_analysis(
        self,
        budgets: Iterable,
        transactions: Iterable,
        categories: Optional[Iterable] = None,
    ) -> List[BudgetStatus]:
        return budget_eval.evaluate_budgets(budgets, transactions, categories, tz=self._tz)

    def budget_alerts(
        self,
        budgets: Iterable,
        transactions: Iterable,
        categories: Optional[Iterable] = None,
    ) -> List[BudgetStatus]:
        return budget_eval.budget_alerts(self.budget_analysis(budgets, transactions, categories), self._alert_threshold)

    def goal_analysis(self, goals: Iterable, progresses=None, now=None) -> List[GoalStatus]:
        return goal_eval.evaluate_goals(goals, progresses, now=now, tz=self._tz)

    def goal_statistics(self, goals: Iterable, now=None) -> GoalStatistics:
        return goal_eval.goal_statistics(goals, deadline_days=self._deadline_days, now=now, tz=self._tz)

    # Composite views

    def financial_health_score(
        self,
        transactions: Iterable,
        budgets: Iterable = (),
        goals: Iterable = (),
        categories: Optional[Iterable] = None,
        now=None,
    ) -> HealthScore:
        transactions = coerce_transactions(transactions, self._tz)
        budgets = coerce_budgets(budgets, self._tz)
        today = reference_date(now, self._tz)

        monthly = self.monthly_comparison(transactions, budgets, now=today)
        budget_statuses = self.budget_analysis(budgets, transactions, categories)
        goal_statuses = self.goal_analysis(goals, now=today)
        return financial_health_score(monthly, budget_statuses, goal_statuses)

    def dashboard_summary(
        self,
        transactions: Iterable,
        budgets: Iterable = (),
        goals: Iterable = (),
        categories: Optional[Iterable] = None,
        now=None,
    ) -> DashboardSummary:
        transactions = coerce_transactions(transactions, self._tz)
        today = reference_date(now, self._tz)
        income, expenses, _ = timeseries.totals(transactions)
        (current_month,) = timeseries.monthly_comparison(transactions, months=1, now=today, tz=self._tz)
        rate = (current_month.savings / current_month.income * 100) if current_month.income > 0 else 0.0

        return DashboardSummary(
            total_income=income,
            total_expenses=expenses,
            savings_rate=rate,
            budget_status=self.budget_analysis(budgets, transactions, categories),
            goal_progress=goal_eval.goal_progresses(goals, now=today, tz=self._tz),
        )

    def financial_insights(
        self,
        transactions: Iterable,
        budgets: Iterable = (),
        goals: Iterable = (),
        categories: Optional[Iterable] = None,
        now=None,
    ) -> FinancialInsights:
        transactions = coerce_transactions(transactions, self._tz)
        goals = coerce_goals(goals, self._tz)
        categories = coerce_categories(categories)
        today = reference_date(now, self._tz)

        summary = self.dashboard_summary(transactions, budgets, goals, categories, now=today)
        alerts: List[str] = []
        insights: List[str] = []

        over = budget_eval.over_budget(summary.budget_status)
        near = budget_eval.budget_alerts(summary.budget_status, self._alert_threshold)
        if over:
            alerts.append(f"You're over budget in {len(over)} {_plural(len(over), 'category', 'categories')}")
        if near:
            alerts.append(
                f"You're approaching budget limits in {len(near)} {_plural(len(near), 'category', 'categories')}"
            )

        overdue = goal_eval.overdue_goals(goals, now=today, tz=self._tz)
        due_soon = goal_eval.goals_near_deadline(goals, days=self._deadline_days, now=today, tz=self._tz)
        if overdue:
            alerts.append(f"You have {len(overdue)} overdue {_plural(len(overdue), 'goal', 'goals')}")
        if due_soon:
            alerts.append(
                f"{len(due_soon)} {_plural(len(due_soon), 'goal', 'goals')} due within {self._deadline_days} days"
            )

        if summary.net_income > 0:
            insights.append(f"Your net worth has increased by ${summary.net_income:.2f}")
        elif summary.net_income < 0:
            insights.append(f"You've spent ${abs(summary.net_income):.2f} more than you've earned")

        (current_month,) = timeseries.monthly_comparison(transactions, months=1, now=today, tz=self._tz)
        if current_month.income > 0:
            rate = summary.savings_rate
            if rate > 20:
                insights.append(f"Excellent! You're saving {rate:.1f}% of your income this month")
            elif rate > 10:
                insights.append(f"Good job! You're saving {rate:.1f}% of your income this month")
            elif rate > 0:
                insights.append(
                    f"You're saving {rate:.1f}% of your income this month. Consider increasing your savings rate"
                )
            else:
                insights.append("You're spending more than you earn this month. Review your expenses")

        top = category_agg.current_month_spending(transactions, categories, limit=1, now=today, tz=self._tz)
        if top:
            insights.append(f"Your largest expense category this month is {top[0].category} (${top[0].amount:.2f})")

        logger.debug(f"Generated {len(alerts)} alerts and {len(insights)} insights")
        return FinancialInsights(alerts=alerts, insights=insights)
