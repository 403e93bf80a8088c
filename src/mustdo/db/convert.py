"""Mapping between ``task`` rows and the engine's ``Task`` snapshots."""

from mustdo.db.schema import TaskRecord
from mustdo.models.task import Task


def to_domain(row: TaskRecord) -> Task:
    return Task.model_validate(
        {
            "id": row.id,
            "project_id": row.project_id,
            "title": row.title,
            "notes": row.notes,
            "due_at": row.due_at,
            "important": row.important,
            "completed": row.completed,
            "completed_at": row.completed_at,
            "created_at": row.created_at,
            "updated_at": row.updated_at,
            "sort_order": row.sort_order,
            "quadrant": row.quadrant,
            "steps": row.steps,
            "tags": row.tags,
            "reminder": {
                "kind": row.reminder_kind,
                "remind_at": row.remind_at,
                "snoozed_until": row.snoozed_until,
                "forced_dismissed": row.forced_dismissed,
                "last_fired_at": row.last_fired_at,
                "repeat_fired_count": row.repeat_fired_count,
                "offset_minutes": row.reminder_offset_minutes,
            },
            "repeat": row.repeat or {"type": "none"},
        }
    )


def write_row(row: TaskRecord, task: Task) -> TaskRecord:
    """Copy every engine-owned field of ``task`` onto ``row``."""
    row.id = task.id
    row.project_id = task.project_id
    row.title = task.title
    row.notes = task.notes
    row.due_at = task.due_at
    row.important = task.important
    row.completed = task.completed
    row.completed_at = task.completed_at
    row.created_at = task.created_at
    row.updated_at = task.updated_at
    row.sort_order = task.sort_order
    row.quadrant = task.quadrant
    row.steps = [step.model_dump(mode="json") for step in task.steps]
    row.tags = list(task.tags)

    reminder = task.reminder
    row.reminder_kind = reminder.kind
    row.remind_at = reminder.remind_at
    row.snoozed_until = reminder.snoozed_until
    row.forced_dismissed = reminder.forced_dismissed
    row.last_fired_at = reminder.last_fired_at
    row.repeat_fired_count = reminder.repeat_fired_count
    row.reminder_offset_minutes = reminder.offset_minutes

    row.repeat = task.repeat.model_dump(mode="json")
    return row
