"""Reminder settings API schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# One day; longer cadences make little sense for nagging reminders.
MAX_REPEAT_INTERVAL_SEC = 24 * 60 * 60


class ReminderSettingsResponse(BaseModel):
    """Re-notify settings returned by GET /api/settings/reminders."""

    model_config = ConfigDict(from_attributes=True)

    reminder_repeat_interval_sec: int = Field(
        description="Seconds between repeated notifications; 0 disables repeats",
        examples=[300],
    )
    reminder_repeat_max_times: int = Field(
        description="Maximum repeats per reminder; 0 repeats until completed",
        examples=[3],
    )


class ReminderSettingsUpdate(BaseModel):
    """Partial reminder settings for PATCH /api/settings/reminders."""

    reminder_repeat_interval_sec: Optional[int] = Field(
        default=None, ge=0, le=MAX_REPEAT_INTERVAL_SEC)
    reminder_repeat_max_times: Optional[int] = Field(default=None, ge=0)
