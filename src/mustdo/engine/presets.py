"""Clock presets: default and quick due times, snooze and reschedule targets.

Every function takes ``now`` as integer epoch seconds and an optional ``tz``.
``tz=None`` means the host's local zone. Nothing here reads the clock.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional

from mustdo.models.reminder import ReschedulePreset, SnoozePreset
from mustdo.models.task import DuePreset

DEFAULT_DUE_HOUR = 18
MORNING_HOUR = 9
SUNDAY = 7  # ISO weekday, matching repeat rules

QUICK_DUE_OFFSET_MINUTES = {
    DuePreset.PLUS_30M: 30,
    DuePreset.PLUS_1H: 60,
    DuePreset.PLUS_2H: 120,
    DuePreset.PLUS_4H: 240,
}
QUICK_DUE_DAY_OFFSETS = {
    DuePreset.TODAY_1800: 0,
    DuePreset.TOMORROW_1800: 1,
    DuePreset.DAY_AFTER_1800: 2,
}
SNOOZE_MINUTES = {
    SnoozePreset.M5: 5,
    SnoozePreset.M15: 15,
    SnoozePreset.H1: 60,
}


def to_local(ts: int, tz: Optional[tzinfo] = None) -> datetime:
    return datetime.fromtimestamp(ts, tz)


def local_day_at(day: date, hour: int, minute: int, tz: Optional[tzinfo] = None) -> int:
    """Epoch seconds of ``day`` at ``hour:minute`` wall-clock time."""
    return int(datetime.combine(day, time(hour, minute), tzinfo=tz).timestamp())


def is_workday(day: date) -> bool:
    return day.isoweekday() <= 5


def truncate_to_minute(now: int, tz: Optional[tzinfo] = None) -> int:
    local = to_local(now, tz).replace(second=0, microsecond=0)
    return int(local.timestamp())


def default_due_at(now: int, tz: Optional[tzinfo] = None) -> int:
    """Today at 18:00, or tomorrow at 18:00 once today's slot has passed."""
    today = to_local(now, tz).date()
    target = local_day_at(today, DEFAULT_DUE_HOUR, 0, tz)
    if now > target:
        target = local_day_at(today + timedelta(days=1), DEFAULT_DUE_HOUR, 0, tz)
    return target


def relative_due_at(now: int, minutes: int, tz: Optional[tzinfo] = None) -> int:
    return truncate_to_minute(now, tz) + minutes * 60


def day_offset_at(
    now: int, days: int, hour: int, minute: int, tz: Optional[tzinfo] = None
) -> int:
    day = to_local(now, tz).date() + timedelta(days=days)
    return local_day_at(day, hour, minute, tz)


def tomorrow_at(now: int, hour: int, minute: int, tz: Optional[tzinfo] = None) -> int:
    return day_offset_at(now, 1, hour, minute, tz)


def next_sunday_at(
    now: int,
    hour: int = DEFAULT_DUE_HOUR,
    minute: int = 0,
    tz: Optional[tzinfo] = None,
) -> int:
    """The coming Sunday at ``hour:minute``; a week later once it has passed."""
    today = to_local(now, tz).date()
    sunday = today + timedelta(days=(SUNDAY - today.isoweekday()) % 7)
    target = local_day_at(sunday, hour, minute, tz)
    if now > target:
        target = local_day_at(sunday + timedelta(days=7), hour, minute, tz)
    return target


def next_workday_at(now: int, hour: int, minute: int, tz: Optional[tzinfo] = None) -> int:
    """Today at ``hour:minute`` if that is still ahead on a weekday, else the next Mon-Fri."""
    day = to_local(now, tz).date()
    target = local_day_at(day, hour, minute, tz)
    if is_workday(day) and now <= target:
        return target
    day += timedelta(days=1)
    while not is_workday(day):
        day += timedelta(days=1)
    return local_day_at(day, hour, minute, tz)


def quick_due_at(preset: DuePreset, now: int, tz: Optional[tzinfo] = None) -> int:
    if preset in QUICK_DUE_OFFSET_MINUTES:
        return relative_due_at(now, QUICK_DUE_OFFSET_MINUTES[preset], tz)
    if preset in QUICK_DUE_DAY_OFFSETS:
        return day_offset_at(now, QUICK_DUE_DAY_OFFSETS[preset], DEFAULT_DUE_HOUR, 0, tz)
    return next_sunday_at(now, DEFAULT_DUE_HOUR, 0, tz)


def snooze_until(preset: SnoozePreset, now: int, tz: Optional[tzinfo] = None) -> int:
    if preset in SNOOZE_MINUTES:
        return now + SNOOZE_MINUTES[preset] * 60
    return tomorrow_at(now, MORNING_HOUR, 0, tz)


def reschedule_due_at(
    due_at: int, preset: ReschedulePreset, now: int, tz: Optional[tzinfo] = None
) -> int:
    """New due time for a user-initiated reschedule.

    Relative presets push from the later of the current due time and ``now``
    so an overdue task is never rescheduled into the past.
    """
    base = max(due_at, now)
    if preset == ReschedulePreset.PLUS_10M:
        return base + 10 * 60
    if preset == ReschedulePreset.PLUS_1H:
        return base + 60 * 60
    if preset == ReschedulePreset.TOMORROW_1800:
        return tomorrow_at(now, DEFAULT_DUE_HOUR, 0, tz)
    return next_workday_at(now, MORNING_HOUR, 0, tz)
