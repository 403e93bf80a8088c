"""SQLAlchemy Base and declarative models."""

import uuid
from typing import Optional

from sqlalchemy import JSON, BigInteger, ForeignKey, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from mustdo.models.reminder import ReminderKind
from mustdo.models.task import INBOX_PROJECT_ID


class Base(DeclarativeBase):
    type_annotation_map = {int: BigInteger()}

    id: Mapped[str] = mapped_column(
        String(128), primary_key=True, index=True, default=lambda: str(uuid.uuid4())
    )
    # Epoch seconds, written by the service layer from the request clock.
    created_at: Mapped[int] = mapped_column(default=0)
    updated_at: Mapped[int] = mapped_column(default=0)


# MODELS

class ProjectRecord(Base):
    __tablename__ = "project"

    name: Mapped[str]
    pinned: Mapped[bool] = mapped_column(default=False)
    sort_order: Mapped[int] = mapped_column(default=0)
    deleted_at: Mapped[Optional[int]]


class TaskRecord(Base):
    __tablename__ = "task"

    project_id: Mapped[str] = mapped_column(
        String(64), index=True, default=INBOX_PROJECT_ID)
    title: Mapped[str]
    notes: Mapped[Optional[str]]
    due_at: Mapped[int] = mapped_column(index=True)
    important: Mapped[bool] = mapped_column(default=False)
    completed: Mapped[bool] = mapped_column(default=False, index=True)
    completed_at: Mapped[Optional[int]]
    sort_order: Mapped[int] = mapped_column(default=0)
    quadrant: Mapped[int] = mapped_column(default=1)
    steps: Mapped[list] = mapped_column(JSON, default=list)
    tags: Mapped[list] = mapped_column(JSON, default=list)

    # Reminder state, flattened
    reminder_kind: Mapped[ReminderKind] = mapped_column(
        SAEnum(ReminderKind, name="reminder_kind"),
        default=ReminderKind.NONE,
    )
    remind_at: Mapped[Optional[int]]
    snoozed_until: Mapped[Optional[int]]
    forced_dismissed: Mapped[bool] = mapped_column(default=False)
    last_fired_at: Mapped[Optional[int]]
    repeat_fired_count: Mapped[int] = mapped_column(default=0)
    reminder_offset_minutes: Mapped[Optional[int]]

    repeat: Mapped[dict] = mapped_column(JSON, default=lambda: {"type": "none"})
    recurrence_parent_id: Mapped[Optional[str]] = mapped_column(
        String(128),
        ForeignKey("task.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
    deleted_at: Mapped[Optional[int]]


class AppSettings(Base):
    """Singleton row (id="default") holding user-editable reminder settings."""

    __tablename__ = "settings"

    reminder_repeat_interval_sec: Mapped[int] = mapped_column(default=0)
    reminder_repeat_max_times: Mapped[int] = mapped_column(default=0)
