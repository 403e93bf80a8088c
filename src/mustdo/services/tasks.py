"""Task service: CRUD, completion with recurrence, manual and quadrant moves."""

import logging
import uuid
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import func

from mustdo.db.convert import to_domain, write_row
from mustdo.db.schema import TaskRecord
from mustdo.engine import ordering, recurrence, visibility
from mustdo.engine.presets import default_due_at, quick_due_at
from mustdo.engine.reminders import build_reminder_config, reminder_offset_minutes
from mustdo.engine.tags import extract_tags_from_title, normalize_tags
from mustdo.models.reminder import DEFAULT_REMINDER_OFFSET_MINUTES, ReminderKind
from mustdo.models.task import (
    Completion,
    SortMode,
    Step,
    Task,
    TaskBatchDelete,
    TaskCreate,
    TaskMove,
    TaskReorder,
    TaskUpdate,
)
from mustdo.services.base import BaseService

logger = logging.getLogger(__name__)

_PLAIN_FIELDS = ("title", "notes", "important", "steps", "repeat")


class TaskService(BaseService):
    def _next_sort_order(self, session, now: int) -> int:
        max_order = (
            self._active_tasks(session)
            .with_entities(func.max(TaskRecord.sort_order))
            .scalar()
        )
        next_order = now * 1000
        if max_order is not None and max_order >= next_order:
            next_order = max_order + 1
        return next_order

    def get_tasks(
        self,
        project_id: Optional[str] = None,
        completed: Optional[bool] = None,
        sort: SortMode = SortMode.DUE,
    ) -> list[Task]:
        with self.session as session:
            q = self._active_tasks(session)
            if project_id is not None:
                q = q.filter(TaskRecord.project_id == project_id)
            if completed is not None:
                q = q.filter(TaskRecord.completed.is_(completed))
            tasks = [to_domain(row) for row in q.all()]
        return ordering.sort_with_pinned_important(tasks, sort)

    def create_task(self, data: TaskCreate, now: int) -> Task:
        title, title_tags = extract_tags_from_title(data.title)
        if not title:
            raise HTTPException(
                status_code=422, detail="title must not be empty")

        if data.due_at is not None:
            due_at = data.due_at
        elif data.due_preset is not None:
            due_at = quick_due_at(data.due_preset, now, self.tz)
        else:
            due_at = default_due_at(now, self.tz)

        offset = data.reminder_offset_minutes
        if offset is None:
            offset = DEFAULT_REMINDER_OFFSET_MINUTES

        with self.session as session:
            task = Task(
                id=str(uuid.uuid4()),
                project_id=self._project_id_or_inbox(session, data.project_id),
                title=title,
                notes=data.notes or None,
                due_at=due_at,
                important=data.important,
                created_at=now,
                updated_at=now,
                sort_order=self._next_sort_order(session, now),
                quadrant=data.quadrant,
                steps=[
                    Step(id=str(uuid.uuid4()), title=s.strip(), created_at=now)
                    for s in data.steps
                    if s.strip()
                ],
                tags=normalize_tags([*data.tags, *title_tags]),
                reminder=build_reminder_config(
                    data.reminder_kind, due_at, offset, now),
                repeat=data.repeat,
            )
            session.add(write_row(TaskRecord(), task))
            session.commit()
        logger.info("created task %s due_at=%s", task.id, task.due_at)
        return task

    def get_task(self, task_id: str) -> Task:
        with self.session as session:
            return to_domain(self._get_task_row(session, task_id))

    def update_task(self, task_id: str, data: TaskUpdate, now: int) -> Task:
        fields = data.model_fields_set
        with self.session as session:
            row = self._get_task_row(session, task_id)
            task = to_domain(row)

            changes = {
                name: getattr(data, name)
                for name in _PLAIN_FIELDS
                if name in fields and getattr(data, name) is not None
            }
            if "tags" in fields and data.tags is not None:
                changes["tags"] = normalize_tags(data.tags)
            if "project_id" in fields and data.project_id is not None:
                changes["project_id"] = self._project_id_or_inbox(session, data.project_id)

            due_at = task.due_at
            if "due_at" in fields and data.due_at is not None:
                due_at = data.due_at
            # Editing the due time or reminder resets the reminder schedule.
            if fields & {"due_at", "reminder_kind", "reminder_offset_minutes"}:
                kind = data.reminder_kind or task.reminder.kind
                offset = data.reminder_offset_minutes
                if offset is None and task.reminder.kind == ReminderKind.NONE:
                    offset = DEFAULT_REMINDER_OFFSET_MINUTES
                elif offset is None:
                    offset = reminder_offset_minutes(task)
                changes["due_at"] = due_at
                changes["reminder"] = build_reminder_config(kind, due_at, offset, now)

            changes["updated_at"] = now
            task = task.model_copy(update=changes)
            write_row(row, task)
            session.commit()
        return task

    def delete_task(self, task_id: str, now: int) -> None:
        with self.session as session:
            row = self._get_task_row(session, task_id)
            row.deleted_at = now
            session.commit()

    def delete_tasks(self, data: TaskBatchDelete, now: int) -> int:
        """Soft delete every listed task; unknown ids are skipped."""
        with self.session as session:
            deleted = (
                self._active_tasks(session)
                .filter(TaskRecord.id.in_(data.ids))
                .update({TaskRecord.deleted_at: now}, synchronize_session=False)
            )
            session.commit()
        logger.info("deleted %d task(s)", deleted)
        return deleted

    def complete_task(self, task_id: str, now: int) -> Completion:
        with self.session as session:
            row = self._get_task_row(session, task_id)
            task = to_domain(row)
            if task.completed:
                raise HTTPException(
                    status_code=409, detail="Task is already completed")

            result = recurrence.complete_task(task, now, self.tz)
            write_row(row, result.completed)
            if result.renewed is not None:
                renewed_row = write_row(TaskRecord(), result.renewed)
                renewed_row.recurrence_parent_id = task.id
                session.add(renewed_row)
                logger.info(
                    "task %s renewed as %s due_at=%s",
                    task.id, result.renewed.id, result.renewed.due_at,
                )
            session.commit()
        return result

    def reopen_task(self, task_id: str, now: int) -> Task:
        with self.session as session:
            row = self._get_task_row(session, task_id)
            task = to_domain(row)
            if not task.completed:
                raise HTTPException(
                    status_code=409, detail="Task is not completed")
            task = recurrence.reopen_task(task, now)
            write_row(row, task)
            session.commit()
        return task

    def move_task(self, task_id: str, data: TaskMove, now: int) -> list[Task]:
        """Swap manual order with the nearest same-group neighbour in the list.

        Returns the list in manual order after the move; unchanged when the
        task is already at the edge of its group.
        """
        with self.session as session:
            rows = self._active_tasks(session)
            if data.project_id is not None:
                rows = rows.filter(TaskRecord.project_id == data.project_id)
            rows_by_id = {row.id: row for row in rows.all()}
            if task_id not in rows_by_id:
                self._get_task_row(session, task_id)
                raise HTTPException(
                    status_code=409, detail="Task is not in this list")

            tasks = {row_id: to_domain(row) for row_id, row in rows_by_id.items()}
            listed = visibility.visible_tasks(
                tasks.values(), data.tab, now, SortMode.MANUAL, self.tz)
            index = next((i for i, t in enumerate(listed) if t.id == task_id), None)
            if index is None:
                raise HTTPException(
                    status_code=409, detail="Task is not in this list")
            target = ordering.find_reorder_target(listed, task_id, data.direction)
            if target is None:
                return listed

            mover, other = ordering.swap_sort_order(listed[index], listed[target], now)
            for task in (mover, other):
                write_row(rows_by_id[task.id], task)
                tasks[task.id] = task
            session.commit()
            logger.info("moved task %s %s", task_id, data.direction.value)
        return visibility.visible_tasks(
            tasks.values(), data.tab, now, SortMode.MANUAL, self.tz)

    def move_to_quadrant(self, task_id: str, quadrant: int, now: int) -> Task:
        with self.session as session:
            row = self._get_task_row(session, task_id)
            task = ordering.move_to_quadrant(to_domain(row), quadrant, now)
            write_row(row, task)
            session.commit()
        return task

    def reorder(self, data: TaskReorder, now: int) -> None:
        with self.session as session:
            for item in data.items:
                self._active_tasks(session).filter(
                    TaskRecord.id == item.id,
                ).update(
                    {TaskRecord.sort_order: item.sort_order, TaskRecord.updated_at: now},
                    synchronize_session=False,
                )
            session.commit()
