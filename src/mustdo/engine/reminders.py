"""Reminder policy: effective targets, due checks and reminder transitions.

Every operation is pure. It takes a task snapshot, an explicit ``now`` and
(where relevant) the re-notify ``ReminderPolicy``, and returns a new snapshot.
Polling is level-triggered: a target fires when ``now`` has reached it and
it is later than the last target recorded in ``last_fired_at``.
"""

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Iterable, Optional

from mustdo.engine.presets import reschedule_due_at, snooze_until
from mustdo.models.events import ForcedDue, NormalDue, PollResult, ReminderEvent
from mustdo.models.reminder import (
    NORMAL_REMINDER_LEAD_SEC,
    ReminderConfig,
    ReminderKind,
    ReminderPolicy,
    ReschedulePreset,
    SnoozePreset,
)
from mustdo.models.task import Task

logger = logging.getLogger(__name__)


class ReminderStateError(ValueError):
    """Raised for a transition the reminder's kind does not allow."""


def _with_reminder(task: Task, **changes) -> Task:
    return task.model_copy(update={"reminder": task.reminder.model_copy(update=changes)})


def default_target(task: Task) -> int:
    if task.reminder.kind == ReminderKind.NORMAL:
        return task.due_at - NORMAL_REMINDER_LEAD_SEC
    return task.due_at


def effective_target(task: Task) -> Optional[int]:
    """Snooze wins over the stored schedule, which wins over the kind's default."""
    reminder = task.reminder
    if reminder.kind == ReminderKind.NONE:
        return None
    if reminder.snoozed_until is not None:
        return reminder.snoozed_until
    if reminder.remind_at is not None:
        return reminder.remind_at
    return default_target(task)


def pending_target(task: Task) -> Optional[int]:
    """The target this task will fire at next, or None if nothing is pending."""
    reminder = task.reminder
    if task.completed or reminder.kind == ReminderKind.NONE:
        return None
    if reminder.kind == ReminderKind.FORCED and reminder.forced_dismissed:
        return None
    target = effective_target(task)
    if reminder.last_fired_at is not None and reminder.last_fired_at >= target:
        return None
    return target


def is_due(task: Task, now: int) -> bool:
    target = pending_target(task)
    return target is not None and now >= target


def reminder_offset_minutes(task: Task) -> int:
    """Configured reminder lead in whole minutes (never negative).

    Falls back to the distance between ``remind_at`` and ``due_at`` for state
    that predates the stored offset.
    """
    if task.reminder.kind == ReminderKind.NONE:
        return 0
    if task.reminder.offset_minutes is not None:
        return task.reminder.offset_minutes
    remind_at = task.reminder.remind_at
    if remind_at is None:
        remind_at = default_target(task)
    return max(0, (task.due_at - remind_at + 30) // 60)


def build_reminder_config(
    kind: ReminderKind, due_at: int, offset_minutes: int, now: int
) -> ReminderConfig:
    """Fresh reminder state for ``kind``, ``offset_minutes`` before ``due_at``.

    A target that would already be in the past is clamped to ``now`` so the
    reminder fires on the next poll instead of never.
    """
    if kind == ReminderKind.NONE:
        return ReminderConfig()
    offset = max(0, offset_minutes)
    return ReminderConfig(
        kind=kind,
        remind_at=max(due_at - offset * 60, now),
        offset_minutes=offset,
    )


def fire(task: Task, now: int, policy: Optional[ReminderPolicy] = None) -> Task:
    """Record delivery of the current target and re-arm when the policy allows.

    Re-arming moves ``remind_at`` to ``target + interval`` (skipping whole
    intervals already behind ``now``) and bumps ``repeat_fired_count``. A
    consumed snooze is cleared. Firing a task that is not due is a no-op.
    """
    if not is_due(task, now):
        return task
    reminder = task.reminder
    target = effective_target(task)
    changes = {"last_fired_at": target, "snoozed_until": None}

    policy = policy or ReminderPolicy()
    interval = policy.repeat_interval_sec
    under_cap = (
        policy.repeat_max_times == 0
        or reminder.repeat_fired_count < policy.repeat_max_times
    )
    if interval > 0 and under_cap:
        next_at = target + interval
        if next_at <= now:
            next_at += ((now - next_at) // interval + 1) * interval
        changes["remind_at"] = next_at
        changes["repeat_fired_count"] = reminder.repeat_fired_count + 1

    logger.debug("fired reminder task=%s target=%s", task.id, target)
    return _with_reminder(task, **changes)


def snooze(
    task: Task, preset: SnoozePreset, now: int, tz: Optional[tzinfo] = None
) -> Task:
    if task.reminder.kind == ReminderKind.NONE:
        raise ReminderStateError("task has no reminder to snooze")
    return _with_reminder(
        task,
        snoozed_until=snooze_until(preset, now, tz),
        forced_dismissed=False,
    )


def dismiss_forced(task: Task) -> Task:
    """Suppress the current forced occurrence; the schedule is left as is."""
    if task.reminder.kind != ReminderKind.FORCED:
        raise ReminderStateError("only forced reminders can be dismissed")
    if task.reminder.forced_dismissed:
        return task
    return _with_reminder(task, forced_dismissed=True)


def reschedule(
    task: Task, preset: ReschedulePreset, now: int, tz: Optional[tzinfo] = None
) -> Task:
    """Move the due time and rebuild the reminder with the task's current offset."""
    due_at = reschedule_due_at(task.due_at, preset, now, tz)
    reminder = build_reminder_config(
        task.reminder.kind, due_at, reminder_offset_minutes(task), now)
    return task.model_copy(
        update={"due_at": due_at, "reminder": reminder, "updated_at": now})


def _due_key(task: Task) -> tuple[bool, int, str]:
    return (not task.important, task.due_at, task.id)


def collect_due(tasks: Iterable[Task], now: int) -> list[Task]:
    """Due tasks, important first, then earliest due."""
    return sorted((t for t in tasks if is_due(t, now)), key=_due_key)


def poll(
    tasks: Iterable[Task], now: int, policy: Optional[ReminderPolicy] = None
) -> PollResult:
    """Fire everything due at ``now`` and describe what to deliver.

    Forced reminders become a queue of single ``ForcedDue`` events; normal
    reminders are batched into one ``NormalDue`` event.
    """
    fired = [fire(task, now, policy) for task in collect_due(tasks, now)]
    forced = [t for t in fired if t.reminder.kind == ReminderKind.FORCED]
    normal = [t for t in fired if t.reminder.kind == ReminderKind.NORMAL]

    events: list[ReminderEvent] = [
        ForcedDue(task=task, index=index, total=len(forced))
        for index, task in enumerate(forced, start=1)
    ]
    if normal:
        events.append(NormalDue(tasks=normal))
    return PollResult(now=now, events=events, updated=fired)


def upcoming(tasks: Iterable[Task]) -> list[tuple[int, Task]]:
    """Pending reminders ordered by the time they will fire."""
    pending = [(pending_target(t), t) for t in tasks]
    return sorted(
        ((target, t) for target, t in pending if target is not None),
        key=lambda item: (item[0], item[1].id),
    )
