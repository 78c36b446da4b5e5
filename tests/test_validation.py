from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pydantic
import pytest

from app.core.exceptions import ValidationError
from app.models.records import Transaction
from app.utils.categories import category_spending
from app.utils.timeseries import spending_trends
from app.utils.validation import coerce_budgets, coerce_goals, coerce_transactions

NOW = datetime(2024, 1, 31)


def test_non_numeric_amount_names_field_and_record():
    bad = [
        {"id": "ok", "type": "income", "amount": 10, "category": "Salary", "date": "2024-01-02"},
        {"id": "t-42", "type": "expense", "amount": "lots", "category": "Food", "date": "2024-01-03"},
    ]
    with pytest.raises(ValidationError) as excinfo:
        spending_trends(bad, now=NOW)
    error = excinfo.value
    assert error.record_type == "Transaction"
    assert error.record_id == "t-42"
    assert error.field == "amount"
    assert "t-42" in str(error) and "amount" in str(error)


def test_negative_amount_is_rejected():
    with pytest.raises(ValidationError) as excinfo:
        coerce_transactions([{"id": "t1", "type": "expense", "amount": -5, "category": "Food", "date": "2024-01-03"}])
    assert excinfo.value.field == "amount"


def test_unknown_transaction_type_is_rejected():
    with pytest.raises(ValidationError) as excinfo:
        coerce_transactions([{"id": "t1", "type": "refund", "amount": 5, "category": "Food", "date": "2024-01-03"}])
    assert excinfo.value.field == "type"


def test_missing_id_reports_position():
    with pytest.raises(ValidationError) as excinfo:
        coerce_transactions([{"type": "expense", "amount": 5, "category": "Food", "date": "2024-01-03"}])
    assert excinfo.value.record_id == "#0"
    assert excinfo.value.field == "id"


def test_non_mapping_record_is_rejected():
    with pytest.raises(ValidationError) as excinfo:
        coerce_budgets(["not a budget"])
    assert excinfo.value.record_type == "Budget"


def test_models_pass_through_untouched():
    transaction = Transaction(id="t1", type="income", amount=5, category="Salary", date=date(2024, 1, 3))
    assert coerce_transactions([transaction]) == [transaction]
    assert coerce_transactions(None) == []


def test_aware_datetimes_become_local_days():
    (transaction,) = coerce_transactions(
        [{"id": "t1", "type": "income", "amount": 5, "category": "Salary", "date": "2024-03-01T02:00:00Z"}],
        tz=timezone.utc,
    )
    assert transaction.date == date(2024, 3, 1)


def test_to_dict_for_error_payloads():
    error = ValidationError("Goal", "target_amount", "must be positive", record_id="g1")
    assert error.to_dict() == {
        "record_type": "Goal",
        "record_id": "g1",
        "field": "target_amount",
        "message": "must be positive",
    }


@pytest.mark.parametrize("amount", ["Infinity", float("inf"), float("nan"), True, False])
def test_non_finite_and_boolean_amounts_are_rejected(amount):
    with pytest.raises(ValidationError) as excinfo:
        coerce_transactions([{"id": "t1", "type": "income", "amount": amount, "category": "Salary", "date": "2024-01-03"}])
    assert excinfo.value.field == "amount"


def test_infinite_amount_never_reaches_percentages():
    transactions = [
        {"id": "t1", "type": "expense", "amount": "Infinity", "category": "Food", "date": "2024-01-03"},
        {"id": "t2", "type": "expense", "amount": 5, "category": "Rent", "date": "2024-01-04"},
    ]
    with pytest.raises(ValidationError) as excinfo:
        category_spending(transactions, now=NOW)
    assert excinfo.value.record_id == "t1"


def test_goal_amounts_must_be_finite_numbers():
    goal = {"id": "g1", "title": "Trip", "target_amount": 1000, "current_amount": 0, "target_date": "2024-06-30"}
    with pytest.raises(ValidationError) as excinfo:
        coerce_goals([dict(goal, target_amount="Infinity")])
    assert excinfo.value.field == "target_amount"
    with pytest.raises(ValidationError) as excinfo:
        coerce_goals([dict(goal, current_amount=True)])
    assert excinfo.value.field == "current_amount"


def test_same_timestamp_lands_in_same_month_as_mapping_or_model():
    tokyo = ZoneInfo("Asia/Tokyo")
    raw = {"id": "t1", "type": "income", "amount": 10, "category": "Salary", "date": "2024-05-31T20:00:00Z"}
    now = datetime(2024, 6, 15)

    from_mapping = spending_trends([raw], months=2, now=now, tz=tokyo)
    from_model = spending_trends([Transaction.model_validate(raw, context={"tz": tokyo})], months=2, now=now, tz=tokyo)
    assert from_mapping == from_model
    assert [(p.date, p.income) for p in from_mapping] == [("2024-05", 0.0), ("2024-06", 10.0)]


def test_aware_datetime_without_zone_context_is_rejected():
    raw = {"id": "t1", "type": "income", "amount": 10, "category": "Salary", "date": "2024-05-31T20:00:00Z"}
    with pytest.raises(pydantic.ValidationError):
        Transaction(**raw)
    assert Transaction(**dict(raw, date="2024-05-31T20:00:00")).date == date(2024, 5, 31)
