"""Shared service logic."""

from datetime import tzinfo
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Query, Session

from mustdo.db.schema import ProjectRecord, TaskRecord
from mustdo.models.task import INBOX_PROJECT_ID


class BaseService:
    """Base service with session injection."""

    def __init__(self, session: Session, tz: Optional[tzinfo] = None) -> None:
        self.session = session
        self.tz = tz

    @staticmethod
    def _active_tasks(session: Session) -> Query:
        return session.query(TaskRecord).filter(TaskRecord.deleted_at.is_(None))

    @staticmethod
    def _active_projects(session: Session) -> Query:
        return session.query(ProjectRecord).filter(ProjectRecord.deleted_at.is_(None))

    def _get_task_row(self, session: Session, task_id: str) -> TaskRecord:
        row = (
            self._active_tasks(session)
            .filter(TaskRecord.id == task_id)
            .first()
        )
        if not row:
            raise HTTPException(status_code=404, detail="Task not found")
        return row

    def _project_id_or_inbox(self, session: Session, project_id: Optional[str]) -> str:
        """Blank or unknown project ids fall back to the inbox."""
        if not project_id or not project_id.strip() or project_id == INBOX_PROJECT_ID:
            return INBOX_PROJECT_ID
        exists = (
            self._active_projects(session)
            .filter(ProjectRecord.id == project_id)
            .first()
        )
        return project_id if exists else INBOX_PROJECT_ID
