"""Recurrence: next occurrence of a repeating task and the completion lifecycle."""

from __future__ import annotations

import logging
from calendar import monthrange
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional

from mustdo.engine.presets import is_workday, to_local
from mustdo.engine.reminders import build_reminder_config, reminder_offset_minutes
from mustdo.models.repeat import (
    DailyRepeat,
    MonthlyRepeat,
    NoRepeat,
    RepeatRule,
    WeeklyRepeat,
    YearlyRepeat,
)
from mustdo.models.task import Completion, Task

logger = logging.getLogger(__name__)


def _clamped_date(year: int, month: int, day: int) -> date:
    last_day = monthrange(year, month)[1]
    return date(year, month, min(max(1, day), last_day))


def _next_daily(day: date, workday_only: bool) -> date:
    day += timedelta(days=1)
    if workday_only:
        while not is_workday(day):
            day += timedelta(days=1)
    return day


def _next_weekly(day: date, days: tuple[int, ...]) -> date:
    current = day.isoweekday()
    later = [d for d in days if d > current]
    target = min(later) if later else min(days) + 7
    return day + timedelta(days=target - current)


def _next_monthly(day: date, month_day: int) -> date:
    year, month = (day.year + 1, 1) if day.month == 12 else (day.year, day.month + 1)
    return _clamped_date(year, month, month_day)


def _next_yearly(day: date, month: int, month_day: int) -> date:
    return _clamped_date(day.year + 1, min(12, max(1, month)), month_day)


def next_occurrence(
    rule: RepeatRule, completed_due_at: int, tz: Optional[tzinfo] = None
) -> Optional[int]:
    """Due time following ``completed_due_at`` under ``rule``; None for no repeat.

    The wall-clock time of day of ``completed_due_at`` is kept.
    """
    if isinstance(rule, NoRepeat):
        return None
    base = to_local(completed_due_at, tz)
    day = base.date()
    if isinstance(rule, DailyRepeat):
        next_day = _next_daily(day, rule.workday_only)
    elif isinstance(rule, WeeklyRepeat):
        next_day = _next_weekly(day, rule.days)
    elif isinstance(rule, MonthlyRepeat):
        next_day = _next_monthly(day, rule.day)
    elif isinstance(rule, YearlyRepeat):
        next_day = _next_yearly(day, rule.month, rule.day)
    else:
        raise TypeError(f"unsupported repeat rule: {rule!r}")
    return int(datetime.combine(next_day, base.time(), tzinfo=tz).timestamp())


def renew(task: Task, next_due_at: int, now: int) -> Task:
    """Fresh open occurrence of ``task`` due at ``next_due_at``."""
    reminder = build_reminder_config(
        task.reminder.kind, next_due_at, reminder_offset_minutes(task), now)
    return task.model_copy(
        update={
            "id": f"{task.id}-{now}",
            "due_at": next_due_at,
            "completed": False,
            "completed_at": None,
            "created_at": now,
            "updated_at": now,
            "reminder": reminder,
        }
    )


def complete_task(task: Task, now: int, tz: Optional[tzinfo] = None) -> Completion:
    """Mark ``task`` done; a repeating task also yields its next occurrence.

    Completing drops any pending snooze so nothing fires for the closed task.
    """
    completed = task.model_copy(
        update={
            "completed": True,
            "completed_at": now,
            "updated_at": now,
            "reminder": task.reminder.model_copy(update={"snoozed_until": None}),
        }
    )
    next_due_at = next_occurrence(task.repeat, task.due_at, tz)
    if next_due_at is None:
        return Completion(completed=completed)
    logger.debug("task %s repeats; next due %s", task.id, next_due_at)
    return Completion(completed=completed, renewed=renew(task, next_due_at, now))


def reopen_task(task: Task, now: int) -> Task:
    return task.model_copy(
        update={"completed": False, "completed_at": None, "updated_at": now})
