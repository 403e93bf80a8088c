"""Reminder events handed to the notification layer."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from mustdo.models.task import Task


class ForcedDue(BaseModel):
    """A blocking reminder; surfaced one at a time as ``index`` of ``total``."""

    model_config = ConfigDict(frozen=True)

    type: Literal["forced_due"] = "forced_due"
    task: Task
    index: int
    total: int


class NormalDue(BaseModel):
    """Passive reminders that may be shown together."""

    model_config = ConfigDict(frozen=True)

    type: Literal["normal_due"] = "normal_due"
    tasks: list[Task]


ReminderEvent = Annotated[Union[ForcedDue, NormalDue], Field(discriminator="type")]


class PollResult(BaseModel):
    """Outcome of one poll: events to deliver and task snapshots to persist."""

    model_config = ConfigDict(frozen=True)

    now: int
    events: list[ReminderEvent] = []
    updated: list[Task] = []


class UpcomingReminder(BaseModel):
    """A pending reminder and the time it will fire."""

    fires_at: int
    task: Task
