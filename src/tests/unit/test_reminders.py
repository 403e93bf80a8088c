"""Unit tests for the reminder policy."""

from datetime import timezone

import pytest

from mustdo.engine import reminders
from mustdo.engine.reminders import ReminderStateError
from mustdo.models.events import ForcedDue, NormalDue
from mustdo.models.reminder import (
    ReminderKind,
    ReminderPolicy,
    ReschedulePreset,
    SnoozePreset,
)
from mustdo.models.task import Task

DUE = 100_000


def _task(**overrides) -> Task:
    data = {
        "id": "t1",
        "title": "Task",
        "due_at": DUE,
        "created_at": 1_000,
        "updated_at": 1_000,
    }
    data.update(overrides)
    return Task.model_validate(data)


def test_effective_target_defaults_by_kind() -> None:
    normal = _task(reminder={"kind": "normal"})
    forced = _task(reminder={"kind": "forced"})
    assert reminders.effective_target(normal) == DUE - 600
    assert reminders.effective_target(forced) == DUE
    assert reminders.effective_target(_task()) is None


def test_snooze_overrides_schedule() -> None:
    task = _task(reminder={"kind": "normal", "remind_at": DUE - 60, "snoozed_until": DUE + 300})
    assert reminders.effective_target(task) == DUE + 300
    assert not reminders.is_due(task, DUE)
    assert reminders.is_due(task, DUE + 300)


def test_completed_task_is_never_due() -> None:
    task = _task(completed=True, completed_at=DUE, reminder={"kind": "forced"})
    assert not reminders.is_due(task, DUE + 10)


def test_fire_without_policy_fires_once() -> None:
    task = _task(reminder={"kind": "normal"})
    fired = reminders.fire(task, DUE - 600)
    assert fired.reminder.last_fired_at == DUE - 600
    assert fired.reminder.remind_at is None
    assert not reminders.is_due(fired, DUE + 3600)


def test_fire_when_not_due_is_noop() -> None:
    task = _task(reminder={"kind": "forced"})
    assert reminders.fire(task, DUE - 1) == task


def test_fire_rearms_until_max_times() -> None:
    policy = ReminderPolicy(repeat_interval_sec=300, repeat_max_times=2)
    task = _task(reminder={"kind": "normal"})

    task = reminders.fire(task, DUE - 600, policy)
    assert task.reminder.remind_at == DUE - 300
    assert task.reminder.repeat_fired_count == 1

    task = reminders.fire(task, DUE - 300, policy)
    assert task.reminder.remind_at == DUE
    assert task.reminder.repeat_fired_count == 2

    task = reminders.fire(task, DUE, policy)
    assert task.reminder.last_fired_at == DUE
    assert task.reminder.repeat_fired_count == 2
    assert reminders.pending_target(task) is None


def test_fire_skips_missed_intervals() -> None:
    policy = ReminderPolicy(repeat_interval_sec=300)
    task = _task(reminder={"kind": "forced", "remind_at": 1_000})
    fired = reminders.fire(task, 2_000, policy)
    assert fired.reminder.remind_at == 2_200
    assert reminders.fire(fired, 2_000, policy) == fired


def test_fire_consumes_snooze() -> None:
    task = _task(reminder={"kind": "forced", "snoozed_until": DUE + 300})
    fired = reminders.fire(task, DUE + 300)
    assert fired.reminder.snoozed_until is None
    assert fired.reminder.last_fired_at == DUE + 300
    assert not reminders.is_due(fired, DUE + 600)


def test_negative_policy_values_clamp_to_zero() -> None:
    policy = ReminderPolicy(repeat_interval_sec=-5, repeat_max_times=-1)
    assert policy.repeat_interval_sec == 0
    assert policy.repeat_max_times == 0


def test_dismissed_forced_is_not_due_until_snoozed() -> None:
    task = reminders.dismiss_forced(_task(reminder={"kind": "forced"}))
    assert task.reminder.forced_dismissed
    assert not reminders.is_due(task, DUE + 10)

    snoozed = reminders.snooze(task, SnoozePreset.M5, DUE + 10, timezone.utc)
    assert not snoozed.reminder.forced_dismissed
    assert snoozed.reminder.snoozed_until == DUE + 310
    assert reminders.is_due(snoozed, DUE + 310)


def test_dismiss_non_forced_raises() -> None:
    with pytest.raises(ReminderStateError):
        reminders.dismiss_forced(_task(reminder={"kind": "normal"}))


def test_snooze_without_reminder_raises() -> None:
    with pytest.raises(ReminderStateError):
        reminders.snooze(_task(), SnoozePreset.M15, DUE)


def test_reminder_offset_rounds_to_minutes() -> None:
    assert reminders.reminder_offset_minutes(_task(reminder={"kind": "normal"})) == 10
    assert reminders.reminder_offset_minutes(
        _task(reminder={"kind": "forced", "remind_at": DUE - 89})) == 1
    assert reminders.reminder_offset_minutes(
        _task(reminder={"kind": "forced", "remind_at": DUE - 29})) == 0
    assert reminders.reminder_offset_minutes(
        _task(reminder={"kind": "forced", "remind_at": DUE + 120})) == 0
    assert reminders.reminder_offset_minutes(_task()) == 0


def test_build_reminder_config_clamps_past_target() -> None:
    config = reminders.build_reminder_config(ReminderKind.NORMAL, DUE, 30, now=DUE - 60)
    assert config.remind_at == DUE - 60
    assert reminders.build_reminder_config(ReminderKind.NONE, DUE, 30, DUE).remind_at is None


def test_reschedule_keeps_offset() -> None:
    task = _task(reminder={"kind": "normal", "remind_at": DUE - 600, "last_fired_at": DUE - 600})
    moved = reminders.reschedule(task, ReschedulePreset.PLUS_1H, 5_000, timezone.utc)
    assert moved.due_at == DUE + 3600
    assert moved.reminder.remind_at == DUE + 3000
    assert moved.reminder.last_fired_at is None
    assert moved.updated_at == 5_000


def test_collect_due_orders_important_then_due() -> None:
    a = _task(id="a", due_at=DUE + 50, reminder={"kind": "forced", "remind_at": DUE})
    b = _task(id="b", due_at=DUE + 10, reminder={"kind": "forced", "remind_at": DUE})
    c = _task(id="c", due_at=DUE + 90, important=True, reminder={"kind": "normal", "remind_at": DUE})
    later = _task(id="d", reminder={"kind": "normal", "remind_at": DUE + 999})
    due = reminders.collect_due([a, b, c, later], DUE)
    assert [t.id for t in due] == ["c", "b", "a"]


def test_poll_queues_forced_and_batches_normal() -> None:
    tasks = [
        _task(id="f1", reminder={"kind": "forced", "remind_at": DUE}),
        _task(id="f2", due_at=DUE + 5, reminder={"kind": "forced", "remind_at": DUE}),
        _task(id="n1", reminder={"kind": "normal", "remind_at": DUE}),
        _task(id="quiet"),
    ]
    result = reminders.poll(tasks, DUE)

    assert result.now == DUE
    assert {t.id for t in result.updated} == {"f1", "f2", "n1"}
    forced = [e for e in result.events if isinstance(e, ForcedDue)]
    assert [(e.task.id, e.index, e.total) for e in forced] == [("f1", 1, 2), ("f2", 2, 2)]
    normal = [e for e in result.events if isinstance(e, NormalDue)]
    assert len(normal) == 1
    assert [t.id for t in normal[0].tasks] == ["n1"]

    assert reminders.poll(result.updated, DUE).events == []


def test_upcoming_orders_by_fire_time() -> None:
    tasks = [
        _task(id="late", reminder={"kind": "forced"}),
        _task(id="early", reminder={"kind": "normal"}),
        _task(id="none"),
    ]
    assert [(at, t.id) for at, t in reminders.upcoming(tasks)] == [
        (DUE - 600, "early"),
        (DUE, "late"),
    ]


def test_fire_twice_at_same_instant_is_idempotent() -> None:
    policy = ReminderPolicy(repeat_interval_sec=600)
    task = _task(reminder={"kind": "forced", "remind_at": DUE - 1800})
    once = reminders.fire(task, DUE - 1800, policy)
    assert once.reminder.repeat_fired_count == 1
    assert reminders.fire(once, DUE - 1800, policy) == once


def test_dismiss_forced_twice_is_idempotent() -> None:
    task = _task(reminder={"kind": "forced"})
    once = reminders.dismiss_forced(task)
    assert reminders.dismiss_forced(once) == once


def _nagging_task(times: int) -> Task:
    policy = ReminderPolicy(repeat_interval_sec=600)
    config = reminders.build_reminder_config(ReminderKind.FORCED, DUE, 30, now=0)
    task = _task(reminder=config)
    for _ in range(times):
        task = reminders.fire(task, reminders.effective_target(task), policy)
    return task


def test_offset_survives_renotify() -> None:
    task = _nagging_task(4)
    assert task.reminder.remind_at == DUE + 600
    assert task.reminder.repeat_fired_count == 4
    assert reminders.reminder_offset_minutes(task) == 30


def test_reschedule_after_renotify_keeps_configured_lead() -> None:
    task = _nagging_task(2)
    moved = reminders.reschedule(task, ReschedulePreset.PLUS_1H, DUE, timezone.utc)
    assert moved.due_at - moved.reminder.remind_at == 1800
    assert moved.reminder.offset_minutes == 30
    assert moved.reminder.repeat_fired_count == 0


def test_build_reminder_config_records_offset() -> None:
    config = reminders.build_reminder_config(ReminderKind.NORMAL, DUE, 30, now=DUE - 60)
    assert config.offset_minutes == 30
    assert reminders.build_reminder_config(ReminderKind.NONE, DUE, 30, DUE).offset_minutes is None
