"""Reminder schemas: per-task reminder state, re-notify policy, presets."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

# Normal reminders default to ten minutes before the due time.
NORMAL_REMINDER_LEAD_SEC = 10 * 60
DEFAULT_REMINDER_OFFSET_MINUTES = 10


class ReminderKind(str, Enum):
    """How a reminder is surfaced."""

    NONE = "none"
    NORMAL = "normal"
    FORCED = "forced"


class SnoozePreset(str, Enum):
    M5 = "m5"
    M15 = "m15"
    H1 = "h1"
    TOMORROW_0900 = "tomorrow_0900"


class ReschedulePreset(str, Enum):
    PLUS_10M = "+10m"
    PLUS_1H = "+1h"
    TOMORROW_1800 = "tomorrow_1800"
    NEXT_WORKDAY_0900 = "next_workday_0900"


class ReminderConfig(BaseModel):
    """Reminder state stored on a task.

    ``remind_at`` is the scheduled target, ``snoozed_until`` overrides it while
    set, and ``last_fired_at`` records the last target that was delivered.
    ``offset_minutes`` is the configured lead before ``due_at``; re-notify moves
    ``remind_at`` but never this value.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    kind: ReminderKind = ReminderKind.NONE
    remind_at: Optional[int] = None
    snoozed_until: Optional[int] = None
    forced_dismissed: bool = False
    last_fired_at: Optional[int] = None
    repeat_fired_count: int = 0
    offset_minutes: Optional[int] = None

    @field_validator("repeat_fired_count", mode="before")
    @classmethod
    def count_not_negative(cls, v: Optional[int]) -> int:
        if v is None:
            return 0
        return max(0, int(v))


class ReminderPolicy(BaseModel):
    """Re-notify cadence supplied by the settings provider.

    ``repeat_interval_sec == 0`` disables re-notify; ``repeat_max_times == 0``
    means "until the task is completed".
    """

    model_config = ConfigDict(frozen=True)

    repeat_interval_sec: int = 0
    repeat_max_times: int = 0

    @field_validator("repeat_interval_sec", "repeat_max_times", mode="before")
    @classmethod
    def clamp_not_negative(cls, v: Optional[int]) -> int:
        if v is None:
            return 0
        return max(0, int(v))


class SnoozeRequest(BaseModel):
    """Body for POST /api/reminders/{task_id}/snooze."""

    preset: SnoozePreset


class RescheduleRequest(BaseModel):
    """Body for POST /api/reminders/{task_id}/reschedule."""

    preset: ReschedulePreset
