from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


def local_day(value, info: ValidationInfo):
    """Reduce datetimes (or ISO datetime strings) to a calendar day.

    Aware datetimes are shifted into the ``tz`` passed through the validation
    context first, so month boundaries follow the configured timezone. Without
    that context an aware datetime has no well-defined local day and is
    rejected.
    """
    if isinstance(value, str) and "T" in value:
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            tz = (info.context or {}).get("tz")
            if tz is None:
                raise ValueError("timezone-aware datetime needs a tz validation context")
            value = value.astimezone(tz)
        return value.date()
    return value


def numeric_amount(value):
    # bool is an int subclass and would otherwise coerce to 0.0 or 1.0
    if isinstance(value, bool):
        raise ValueError("must be a number, not a boolean")
    return value


class Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", allow_inf_nan=False)

    id: str
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Transaction(Record):
    type: Literal["income", "expense"]
    amount: float = Field(ge=0)
    category: str
    description: str = ""
    date: date

    @field_validator("amount", mode="before")
    @classmethod
    def amount_value(cls, value):
        return numeric_amount(value)

    @field_validator("date", mode="before")
    @classmethod
    def occurrence_day(cls, value, info: ValidationInfo):
        return local_day(value, info)


class Budget(Record):
    category_id: str
    amount: float = Field(ge=0)
    period: Literal["monthly", "yearly"] = "monthly"
    start_date: date
    end_date: date

    @field_validator("amount", mode="before")
    @classmethod
    def amount_value(cls, value):
        return numeric_amount(value)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def period_days(cls, value, info: ValidationInfo):
        return local_day(value, info)

    @field_validator("end_date")
    @classmethod
    def check_period(cls, value: date, info: ValidationInfo) -> date:
        start = info.data.get("start_date")
        if start is not None and value < start:
            raise ValueError("must not be before start_date")
        return value


class Goal(Record):
    title: str
    description: str = ""
    target_amount: float = Field(gt=0)
    current_amount: float = Field(default=0.0, ge=0)
    target_date: date
    status: Literal["active", "completed", "paused"] = "active"

    @field_validator("target_amount", "current_amount", mode="before")
    @classmethod
    def amount_values(cls, value):
        return numeric_amount(value)

    @field_validator("target_date", mode="before")
    @classmethod
    def target_day(cls, value, info: ValidationInfo):
        return local_day(value, info)


class Category(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str
    type: Literal["income", "expense"] = "expense"
    color: Optional[str] = None
    icon: Optional[str] = None
