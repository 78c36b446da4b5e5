"""
Goal evaluation
Progress, pacing and deadline checks for savings goals.
"""
from __future__ import annotations

import logging
import math
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional

from app.core.exceptions import ValidationError
from app.models.analytics import GoalProgress, GoalStatistics, GoalStatus
from app.models.records import Goal
from app.utils.periods import reference_date, resolve_timezone
from app.utils.validation import coerce_goals

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = 30
# Expected progress assumes goals run over a nominal one-year horizon
HORIZON_MONTHS = 12
ON_TRACK_RATIO = 0.8


def _days_remaining(goal: Goal, today: date) -> int:
    return max(0, (goal.target_date - today).days)


def _months_remaining(days_remaining: int) -> int:
    return max(1, math.ceil(days_remaining / DAYS_PER_MONTH))


def _progress(goal: Goal) -> float:
    return min(100.0, goal.current_amount / goal.target_amount * 100)


def goal_progress(goal, now=None, tz=None) -> GoalProgress:
    zone = resolve_timezone(tz)
    (record,) = coerce_goals([goal], zone)
    today = reference_date(now, zone)
    return GoalProgress(
        goal_id=record.id,
        title=record.title,
        progress=_progress(record),
        target_amount=record.target_amount,
        current_amount=record.current_amount,
        days_remaining=_days_remaining(record, today),
    )


def goal_progresses(goals: Iterable, now=None, tz=None) -> List[GoalProgress]:
    zone = resolve_timezone(tz)
    return [goal_progress(goal, now=now, tz=zone) for goal in coerce_goals(goals, zone)]


def _snapshot_progress(progresses: Iterable[Any]) -> Dict[str, float]:
    """Progress by goal id, from ``GoalProgress`` items or ``{goal_id, progress}`` mappings."""
    snapshots: Dict[str, float] = {}
    for index, item in enumerate(progresses):
        if isinstance(item, GoalProgress):
            snapshots[item.goal_id] = item.progress
            continue
        if not isinstance(item, dict) or item.get("goal_id") is None:
            raise ValidationError("GoalProgress", "goal_id", "is required", record_id=f"#{index}")
        goal_id = str(item["goal_id"])
        value = item.get("progress", 0.0)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise ValidationError("GoalProgress", "progress", "must be a finite number", record_id=goal_id)
        snapshots[goal_id] = float(value)
    return snapshots


def evaluate_goals(
    goals: Iterable,
    progresses: Optional[Iterable[Any]] = None,
    now=None,
    tz=None,
) -> List[GoalStatus]:
    """Pace every goal against a linear schedule.

    Without ``progresses`` the snapshots are derived from the goals
    themselves; with an explicit collection (``GoalProgress`` items or
    mappings with ``goal_id`` and ``progress``), goals missing from it count
    as 0% progress and off track.
    """
    zone = resolve_timezone(tz)
    records = coerce_goals(goals, zone)
    today = reference_date(now, zone)
    if progresses is None:
        snapshots = {g.id: _progress(g) for g in records}
    else:
        snapshots = _snapshot_progress(progresses)

    statuses: List[GoalStatus] = []
    for goal in records:
        days_remaining = _days_remaining(goal, today)
        months_remaining = _months_remaining(days_remaining)
        monthly_target = (goal.target_amount - goal.current_amount) / months_remaining
        expected = max(0.0, 100 - (months_remaining / HORIZON_MONTHS) * 100)

        snapshot = snapshots.get(goal.id)
        progress = snapshot if snapshot is not None else 0.0
        on_track = snapshot is not None and progress >= expected * ON_TRACK_RATIO

        statuses.append(
            GoalStatus(
                goal_id=goal.id,
                title=goal.title,
                target_amount=goal.target_amount,
                current_amount=goal.current_amount,
                progress=progress,
                days_remaining=days_remaining,
                monthly_target=monthly_target,
                on_track=on_track,
            )
        )
    logger.debug(f"Evaluated {len(statuses)} goals as of {today.isoformat()}")
    return statuses


def recommended_monthly_contribution(goal, now=None, tz=None) -> float:
    zone = resolve_timezone(tz)
    (record,) = coerce_goals([goal], zone)
    months_remaining = _months_remaining(_days_remaining(record, reference_date(now, zone)))
    return max(0.0, record.target_amount - record.current_amount) / months_remaining


def overdue_goals(goals: Iterable, now=None, tz=None) -> List[Goal]:
    zone = resolve_timezone(tz)
    today = reference_date(now, zone)
    return [
        goal
        for goal in coerce_goals(goals, zone)
        if goal.status == "active" and goal.target_date < today and goal.current_amount < goal.target_amount
    ]


def goals_near_deadline(goals: Iterable, days: int = 30, now=None, tz=None) -> List[Goal]:
    zone = resolve_timezone(tz)
    today = reference_date(now, zone)
    horizon = today + timedelta(days=days)
    return [
        goal
        for goal in coerce_goals(goals, zone)
        if goal.status == "active" and today <= goal.target_date <= horizon and goal.current_amount < goal.target_amount
    ]


def goal_statistics(goals: Iterable, deadline_days: int = 30, now=None, tz=None) -> GoalStatistics:
    zone = resolve_timezone(tz)
    records = coerce_goals(goals, zone)
    total_target = sum((g.target_amount for g in records), 0.0)
    total_current = sum((g.current_amount for g in records), 0.0)
    overall = min(100.0, total_current / total_target * 100) if total_target > 0 else 0.0

    return GoalStatistics(
        total_goals=len(records),
        active_goals=sum(1 for g in records if g.status == "active"),
        completed_goals=sum(1 for g in records if g.status == "completed"),
        paused_goals=sum(1 for g in records if g.status == "paused"),
        total_target_amount=total_target,
        total_current_amount=total_current,
        overall_progress=overall,
        overdue_goals=len(overdue_goals(records, now=now, tz=zone)),
        near_deadline_goals=len(goals_near_deadline(records, days=deadline_days, now=now, tz=zone)),
    )
