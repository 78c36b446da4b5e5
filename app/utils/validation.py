"""
Record validation
Turns caller-supplied records (pydantic models or plain mappings) into
validated domain models, reporting the first broken field of the first bad
record as an engine ``ValidationError``.
"""
from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Any, Iterable, List, Optional, Type, TypeVar

import pydantic
from pydantic import BaseModel

from app.core.exceptions import ValidationError
from app.models.records import Budget, Category, Goal, Transaction
from app.utils.periods import resolve_timezone

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _record_id(raw: Any, index: int) -> str:
    if isinstance(raw, BaseModel):
        raw_id = getattr(raw, "id", None)
    elif isinstance(raw, dict):
        raw_id = raw.get("id")
    else:
        raw_id = None
    return str(raw_id) if raw_id is not None else f"#{index}"


def coerce_records(
    records: Optional[Iterable[Any]],
    model: Type[ModelT],
    tz: Optional[tzinfo] = None,
) -> List[ModelT]:
    """Validate every record against ``model`` and return them in input order.

    Datetimes are localized into ``tz`` (UTC when omitted). Model instances
    pass through as they are: their days were fixed when they were built.
    """
    if records is None:
        return []
    context = {"tz": resolve_timezone(tz)}

    validated: List[ModelT] = []
    for index, raw in enumerate(records):
        if isinstance(raw, model):
            validated.append(raw)
            continue
        if isinstance(raw, BaseModel):
            raw = raw.model_dump()
        if not isinstance(raw, dict):
            raise ValidationError(
                model.__name__,
                "__root__",
                f"expected a mapping, got {type(raw).__name__}",
                record_id=f"#{index}",
            )
        try:
            validated.append(model.model_validate(raw, context=context))
        except pydantic.ValidationError as exc:
            error = exc.errors()[0]
            field = ".".join(str(part) for part in error["loc"]) or "__root__"
            record_id = _record_id(raw, index)
            logger.debug(f"Rejected {model.__name__} {record_id}: {field} {error['msg']}")
            raise ValidationError(model.__name__, field, error["msg"], record_id=record_id) from exc
    return validated


def coerce_transactions(records, tz: Optional[tzinfo] = None) -> List[Transaction]:
    return coerce_records(records, Transaction, tz)


def coerce_budgets(records, tz: Optional[tzinfo] = None) -> List[Budget]:
    return coerce_records(records, Budget, tz)


def coerce_goals(records, tz: Optional[tzinfo] = None) -> List[Goal]:
    return coerce_records(records, Goal, tz)


def coerce_categories(records) -> List[Category]:
    return coerce_records(records, Category)
