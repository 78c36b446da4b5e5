import pytest

from app.models.analytics import BudgetStatus, GoalStatus, MonthlyComparison
from app.utils.health_score import (
    BUDGET_TIP,
    GOAL_TIP,
    INVESTING_TIP,
    SAVINGS_TIP,
    STABILITY_TIP,
    categorize,
    coefficient_of_variation,
    financial_health_score,
)


def _months(incomes, expenses):
    return [
        MonthlyComparison(month=f"2024-{index + 1:02d}", income=income, expenses=expense, budgeted_expenses=0)
        for index, (income, expense) in enumerate(zip(incomes, expenses))
    ]


def _budget(percentage_used):
    return BudgetStatus(
        budget_id="b",
        category_id="Food",
        category_name="Food",
        budgeted=1000,
        spent=percentage_used * 10,
        percentage_used=percentage_used,
        status="over" if percentage_used > 100 else "under",
    )


def _goal(progress):
    return GoalStatus(
        goal_id="g",
        title="Goal",
        target_amount=1000,
        current_amount=progress * 10,
        progress=progress,
        days_remaining=100,
        monthly_target=10,
        on_track=True,
    )


def test_flat_expenses_are_perfectly_stable():
    result = financial_health_score(_months([4000] * 6, [2000] * 6))
    assert result.expense_stability.score == 100


def test_no_budgets_no_goals_default_to_neutral():
    # 25% savings rate with flat expenses
    result = financial_health_score(_months([4000] * 6, [3000] * 6))
    assert result.savings_rate.value == pytest.approx(25)
    assert result.savings_rate.score == 100
    assert result.budget_adherence.score == 50
    assert result.goal_progress.score == 50
    assert result.expense_stability.score == 100
    assert result.score == 75
    assert result.category == "good"
    assert result.recommendations == [BUDGET_TIP, GOAL_TIP]


def test_zero_income_scores_zero_savings():
    result = financial_health_score(_months([0] * 6, [0] * 6))
    assert result.savings_rate.value == 0
    assert result.savings_rate.score == 0
    assert result.expense_stability.score == 100
    assert result.score == 45
    assert result.category == "poor"
    assert result.recommendations == [SAVINGS_TIP, BUDGET_TIP, GOAL_TIP]


def test_budget_adherence_penalises_overspend():
    result = financial_health_score(_months([1000] * 6, [500] * 6), [_budget(110), _budget(50), _budget(250)])
    assert result.budget_adherence.score == pytest.approx(190 / 3)


def test_budget_exactly_used_scores_full_adherence():
    result = financial_health_score(_months([1000] * 6, [500] * 6), [_budget(100)])
    assert result.budget_adherence.score == 100


def test_goal_progress_is_the_mean():
    result = financial_health_score(_months([1000] * 6, [500] * 6), goal_statuses=[_goal(20), _goal(80)])
    assert result.goal_progress.score == 50


def test_volatile_expenses_lower_stability():
    result = financial_health_score(_months([5000] * 2, [1000, 3000]))
    assert result.expense_stability.score == pytest.approx(50)
    assert STABILITY_TIP in result.recommendations


def test_excellent_health_suggests_investing():
    result = financial_health_score(_months([5000] * 6, [2000] * 6), [_budget(100)], [_goal(100)])
    assert result.score == 100
    assert result.category == "excellent"
    assert result.recommendations == [INVESTING_TIP]


def test_composite_rounds_half_up():
    # 50 * 0.30 + 52 * 0.25 + 50 * 0.25 + 100 * 0.20 == 60.5
    result = financial_health_score(_months([1000] * 6, [900] * 6), [_budget(148)])
    assert result.savings_rate.score == pytest.approx(50)
    assert result.score == 61
    assert result.category == "fair"


def test_overspending_clamps_savings_at_zero():
    result = financial_health_score(_months([1000] * 6, [1500] * 6))
    assert result.savings_rate.value == pytest.approx(-50)
    assert result.savings_rate.score == 0


def test_category_thresholds():
    assert categorize(80) == "excellent"
    assert categorize(79) == "good"
    assert categorize(65) == "good"
    assert categorize(64) == "fair"
    assert categorize(50) == "fair"
    assert categorize(49) == "poor"


def test_coefficient_of_variation_guards():
    assert coefficient_of_variation([]) == 0
    assert coefficient_of_variation([0, 0, 0]) == 0
    assert coefficient_of_variation([1000, 3000]) == pytest.approx(50)


def test_to_dict_shape():
    data = financial_health_score(_months([4000] * 6, [3000] * 6)).to_dict()
    assert set(data) == {"score", "category", "factors", "recommendations"}
    assert set(data["factors"]) == {"savings_rate", "budget_adherence", "goal_progress", "expense_stability"}
    assert data["factors"]["savings_rate"]["score"] == 100
