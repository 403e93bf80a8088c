"""Reminder service: polling and the snooze / dismiss / reschedule commands."""

import logging

from fastapi import HTTPException

from mustdo.db.convert import to_domain, write_row
from mustdo.db.schema import TaskRecord
from mustdo.engine import reminders
from mustdo.models.events import PollResult, UpcomingReminder
from mustdo.models.reminder import ReminderKind, ReschedulePreset, SnoozePreset
from mustdo.models.task import Task
from mustdo.services.base import BaseService
from mustdo.services.settings import SettingsService

logger = logging.getLogger(__name__)


class ReminderService(BaseService):
    def _armed_rows(self, session) -> dict[str, TaskRecord]:
        q = self._active_tasks(session).filter(
            TaskRecord.completed.is_(False),
            TaskRecord.reminder_kind != ReminderKind.NONE,
        )
        return {row.id: row for row in q.all()}

    def poll(self, now: int) -> PollResult:
        """Fire every reminder due at ``now`` and persist the fired snapshots."""
        policy = SettingsService(self.session).reminder_policy()
        with self.session as session:
            rows = self._armed_rows(session)
            result = reminders.poll(
                [to_domain(row) for row in rows.values()], now, policy)
            for task in result.updated:
                write_row(rows[task.id], task)
            session.commit()
        if result.updated:
            logger.info(
                "poll at %s fired %d reminder(s): %s",
                now, len(result.updated), [t.id for t in result.updated],
            )
        return result

    def get_upcoming(self) -> list[UpcomingReminder]:
        with self.session as session:
            tasks = [to_domain(row) for row in self._armed_rows(session).values()]
        return [
            UpcomingReminder(fires_at=fires_at, task=task)
            for fires_at, task in reminders.upcoming(tasks)
        ]

    def _transition(self, task_id: str, change) -> Task:
        with self.session as session:
            row = self._get_task_row(session, task_id)
            try:
                task = change(to_domain(row))
            except reminders.ReminderStateError as e:
                raise HTTPException(status_code=409, detail=str(e)) from e
            write_row(row, task)
            session.commit()
        return task

    def snooze(self, task_id: str, preset: SnoozePreset, now: int) -> Task:
        task = self._transition(
            task_id, lambda t: reminders.snooze(t, preset, now, self.tz))
        logger.info(
            "snoozed task %s until %s", task_id, task.reminder.snoozed_until)
        return task

    def dismiss(self, task_id: str) -> Task:
        task = self._transition(task_id, reminders.dismiss_forced)
        logger.info("dismissed forced reminder for task %s", task_id)
        return task

    def reschedule(self, task_id: str, preset: ReschedulePreset, now: int) -> Task:
        task = self._transition(
            task_id, lambda t: reminders.reschedule(t, preset, now, self.tz))
        logger.info("rescheduled task %s to due_at=%s", task_id, task.due_at)
        return task
