from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class TimeSeriesPoint:
    """Income and expense sums for one bucket (``YYYY-MM`` or ``YYYY-MM-DD``)."""

    date: str
    income: float
    expenses: float

    @property
    def net(self) -> float:
        return self.income - self.expenses

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "income": self.income, "expenses": self.expenses, "net": self.net}


@dataclass(frozen=True)
class DailyTrendPoint:
    date: str
    value: float
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MonthlyComparison:
    month: str
    income: float
    expenses: float
    budgeted_expenses: float

    @property
    def savings(self) -> float:
        return self.income - self.expenses

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["savings"] = self.savings
        return data


@dataclass(frozen=True)
class CategorySpending:
    category: str
    amount: float
    percentage: float
    color: str
    transaction_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BudgetStatus:
    """Spending against one budget.

    ``percentage_used`` is uncapped so that 110% stays distinguishable from
    100%; ``display_percentage`` is the progress-bar value.
    """

    budget_id: str
    category_id: str
    category_name: str
    budgeted: float
    spent: float
    percentage_used: float
    status: str

    @property
    def remaining(self) -> float:
        return max(0.0, self.budgeted - self.spent)

    @property
    def display_percentage(self) -> float:
        return min(100.0, self.percentage_used)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["remaining"] = self.remaining
        data["display_percentage"] = self.display_percentage
        return data


@dataclass(frozen=True)
class GoalProgress:
    goal_id: str
    title: str
    progress: float
    target_amount: float
    current_amount: float
    days_remaining: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class GoalStatus:
    goal_id: str
    title: str
    target_amount: float
    current_amount: float
    progress: float
    days_remaining: int
    monthly_target: float
    on_track: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class GoalStatistics:
    total_goals: int
    active_goals: int
    completed_goals: int
    paused_goals: int
    total_target_amount: float
    total_current_amount: float
    overall_progress: float
    overdue_goals: int
    near_deadline_goals: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HealthFactor:
    score: float
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HealthScore:
    score: int
    category: str
    savings_rate: HealthFactor
    budget_adherence: HealthFactor
    goal_progress: HealthFactor
    expense_stability: HealthFactor
    recommendations: List[str] = field(default_factory=list)

    @property
    def factors(self) -> Dict[str, HealthFactor]:
        return {
            "savings_rate": self.savings_rate,
            "budget_adherence": self.budget_adherence,
            "goal_progress": self.goal_progress,
            "expense_stability": self.expense_stability,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "category": self.category,
            "factors": {name: factor.to_dict() for name, factor in self.factors.items()},
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class SpendingVelocity:
    daily: float
    weekly: float
    monthly: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DashboardSummary:
    total_income: float
    total_expenses: float
    savings_rate: float
    budget_status: List[BudgetStatus]
    goal_progress: List[GoalProgress]

    @property
    def net_income(self) -> float:
        return self.total_income - self.total_expenses

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_income": self.total_income,
            "total_expenses": self.total_expenses,
            "net_income": self.net_income,
            "savings_rate": self.savings_rate,
            "budget_status": [status.to_dict() for status in self.budget_status],
            "goal_progress": [progress.to_dict() for progress in self.goal_progress],
        }


@dataclass(frozen=True)
class FinancialInsights:
    alerts: List[str]
    insights: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"alerts": list(self.alerts), "insights": list(self.insights)}
