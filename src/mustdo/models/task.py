"""Task schemas: the domain record handed to the engine plus API bodies."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from mustdo.models.reminder import ReminderConfig, ReminderKind
from mustdo.models.repeat import NoRepeat, RepeatRule

QUADRANT_MIN = 1
QUADRANT_MAX = 4
INBOX_PROJECT_ID = "inbox"


class SortMode(str, Enum):
    """Ordering used inside each importance partition."""

    DUE = "due"
    CREATED = "created"
    MANUAL = "manual"


class ViewTab(str, Enum):
    """List tabs; ``done`` overrides the active sort mode."""

    TODO = "todo"
    TODAY = "today"
    OPEN = "open"
    ALL = "all"
    DONE = "done"


class ViewScope(str, Enum):
    """Main-window scopes: due today or overdue, important, or one project."""

    TODAY = "today"
    IMPORTANT = "important"
    PROJECT = "project"


class ReorderDirection(str, Enum):
    UP = "up"
    DOWN = "down"


class DuePreset(str, Enum):
    TODAY_1800 = "today_1800"
    TOMORROW_1800 = "tomorrow_1800"
    DAY_AFTER_1800 = "day_after_1800"
    NEXT_SUNDAY_1800 = "next_sunday_1800"
    PLUS_30M = "+30m"
    PLUS_1H = "+1h"
    PLUS_2H = "+2h"
    PLUS_4H = "+4h"


def _check_quadrant(v: int) -> int:
    if not (QUADRANT_MIN <= v <= QUADRANT_MAX):
        raise ValueError(
            f"quadrant must be between {QUADRANT_MIN} and {QUADRANT_MAX}")
    return v


class Step(BaseModel):
    """Checklist item inside a task."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    title: str
    completed: bool = False
    created_at: int
    completed_at: Optional[int] = None


class Task(BaseModel):
    """A task snapshot. Timestamps are integer seconds since the epoch."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    project_id: str = INBOX_PROJECT_ID
    title: str
    notes: Optional[str] = None
    due_at: int
    important: bool = False
    completed: bool = False
    completed_at: Optional[int] = None
    created_at: int
    updated_at: int
    sort_order: int = 0
    quadrant: int = QUADRANT_MIN
    steps: list[Step] = []
    tags: list[str] = []
    reminder: ReminderConfig = Field(default_factory=ReminderConfig)
    repeat: RepeatRule = Field(default_factory=NoRepeat)

    @model_validator(mode="before")
    @classmethod
    def default_sort_order(cls, data: Any) -> Any:
        # Legacy rows without a manual key sort by creation time.
        if isinstance(data, dict) and not data.get("sort_order"):
            data = {**data, "sort_order": int(data.get("created_at") or 0) * 1000}
        return data

    @field_validator("quadrant")
    @classmethod
    def quadrant_in_range(cls, v: int) -> int:
        return _check_quadrant(v)

    @field_validator("steps", "tags", mode="before")
    @classmethod
    def coerce_none_to_list(cls, v: Any) -> list:
        if v is None:
            return []
        return v


class TaskCreate(BaseModel):
    """Schema for creating a task.

    ``#tag`` tokens in the title are moved into ``tags``. When neither
    ``due_at`` nor ``due_preset`` is given the task is due at the default
    18:00 slot.
    """

    title: str
    notes: Optional[str] = None
    due_at: Optional[int] = None
    due_preset: Optional[DuePreset] = None
    important: bool = False
    quadrant: int = QUADRANT_MIN
    project_id: str = INBOX_PROJECT_ID
    tags: list[str] = []
    steps: list[str] = []
    reminder_kind: ReminderKind = ReminderKind.NONE
    reminder_offset_minutes: Optional[int] = None
    repeat: RepeatRule = Field(default_factory=NoRepeat)

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("title must not be empty")
        return v.strip()

    @field_validator("quadrant")
    @classmethod
    def quadrant_in_range(cls, v: int) -> int:
        return _check_quadrant(v)


class TaskUpdate(BaseModel):
    """Schema for updating a task (all fields optional)."""

    title: Optional[str] = None
    notes: Optional[str] = None
    due_at: Optional[int] = None
    important: Optional[bool] = None
    project_id: Optional[str] = None
    tags: Optional[list[str]] = None
    steps: Optional[list[Step]] = None
    reminder_kind: Optional[ReminderKind] = None
    reminder_offset_minutes: Optional[int] = None
    repeat: Optional[RepeatRule] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        if not v.strip():
            raise ValueError("title must not be empty")
        return v.strip()


class TaskBatchDelete(BaseModel):
    """Body for deleting several tasks at once."""

    ids: list[str]

    @field_validator("ids")
    @classmethod
    def ids_not_empty(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("ids must not be empty")
        return v


class TaskMove(BaseModel):
    """Manual reorder request within the currently displayed list."""

    direction: ReorderDirection
    tab: ViewTab = ViewTab.ALL
    project_id: Optional[str] = None


class QuadrantMove(BaseModel):
    quadrant: int

    @field_validator("quadrant")
    @classmethod
    def quadrant_in_range(cls, v: int) -> int:
        return _check_quadrant(v)


class TaskReorderItem(BaseModel):
    """Single item for reorder body."""

    id: str
    sort_order: int


class TaskReorder(BaseModel):
    """Schema for reorder request."""

    items: list[TaskReorderItem]

    @model_validator(mode="after")
    def items_not_empty(self) -> "TaskReorder":
        if not self.items:
            raise ValueError("items must not be empty")
        return self


class Completion(BaseModel):
    """Completed task plus the renewed occurrence for repeating tasks."""

    completed: Task
    renewed: Optional[Task] = None


class QuadrantBoard(BaseModel):
    quadrants: dict[int, list[Task]]
    counts: dict[int, dict[str, int]]


class DueSection(BaseModel):
    id: str
    tasks: list[Task]
