"""Project service: CRUD with computed task_count, manual order and soft delete."""

import logging
import uuid

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from mustdo.db.schema import ProjectRecord, TaskRecord
from mustdo.models.project import (
    INBOX_PROJECT_NAME,
    ProjectCreate,
    ProjectSwap,
    ProjectUpdate,
)
from mustdo.models.task import INBOX_PROJECT_ID
from mustdo.services.base import BaseService

logger = logging.getLogger(__name__)


class ProjectService(BaseService):
    def _ensure_inbox(self, session: Session, now: int) -> None:
        """The inbox always exists and sorts first."""
        if session.get(ProjectRecord, INBOX_PROJECT_ID) is None:
            session.add(
                ProjectRecord(
                    id=INBOX_PROJECT_ID,
                    name=INBOX_PROJECT_NAME,
                    pinned=True,
                    sort_order=0,
                    created_at=now,
                    updated_at=now,
                )
            )
            session.commit()

    def _get_project_row(self, session: Session, project_id: str) -> ProjectRecord:
        project = (
            self._active_projects(session)
            .filter(ProjectRecord.id == project_id)
            .first()
        )
        if not project:
            raise HTTPException(
                status_code=404, detail="Project not found")
        return project

    def _open_task_count(self, session: Session, project_id: str) -> int:
        return (
            self._active_tasks(session)
            .filter(
                TaskRecord.project_id == project_id,
                TaskRecord.completed.is_(False),
            )
            .count()
        )

    def get_projects(self, now: int) -> list[tuple[ProjectRecord, int]]:
        """List non-deleted projects with task_count (non-deleted, incomplete)."""
        with self.session as session:
            self._ensure_inbox(session, now)
            projects = (
                self._active_projects(session)
                .order_by(ProjectRecord.sort_order.asc(), ProjectRecord.name.asc())
                .all()
            )
            return [
                (project, self._open_task_count(session, project.id))
                for project in projects
            ]

    def get_project(self, project_id: str, now: int) -> tuple[ProjectRecord, int]:
        """Get single project with task_count. 404 if not found or soft-deleted."""
        with self.session as session:
            if project_id == INBOX_PROJECT_ID:
                self._ensure_inbox(session, now)
            project = self._get_project_row(session, project_id)
            return (project, self._open_task_count(session, project_id))

    def create_project(self, data: ProjectCreate, now: int) -> ProjectRecord:
        with self.session as session:
            max_order = (
                self._active_projects(session)
                .with_entities(func.max(ProjectRecord.sort_order))
                .scalar()
            )
            sort_order = now * 1000
            if max_order is not None and max_order >= sort_order:
                sort_order = max_order + 1
            project = ProjectRecord(
                id=str(uuid.uuid4()),
                name=data.name,
                pinned=data.pinned,
                sort_order=sort_order,
                created_at=now,
                updated_at=now,
            )
            session.add(project)
            session.commit()
            session.refresh(project)
            logger.info("created project %s", project.id)
            return project

    def update_project(
        self, project_id: str, data: ProjectUpdate, now: int
    ) -> ProjectRecord:
        with self.session as session:
            if project_id == INBOX_PROJECT_ID:
                self._ensure_inbox(session, now)
            project = self._get_project_row(session, project_id)
            update_data = data.model_dump(exclude_unset=True, exclude_none=True)
            for key, value in update_data.items():
                setattr(project, key, value)
            project.updated_at = now
            session.commit()
            session.refresh(project)
            return project

    def swap_sort_order(self, data: ProjectSwap, now: int) -> list[tuple[ProjectRecord, int]]:
        """Exchange the manual order of two projects; returns the new list."""
        with self.session as session:
            self._ensure_inbox(session, now)
            first = self._get_project_row(session, data.first_id)
            second = self._get_project_row(session, data.second_id)
            first.sort_order, second.sort_order = second.sort_order, first.sort_order
            first.updated_at = now
            second.updated_at = now
            session.commit()
        return self.get_projects(now)

    def delete_project(self, project_id: str, now: int) -> None:
        """Soft delete project; its tasks move to the inbox first."""
        if project_id == INBOX_PROJECT_ID:
            raise HTTPException(
                status_code=409, detail="The inbox cannot be deleted")
        with self.session as session:
            project = self._get_project_row(session, project_id)
            moved = (
                self._active_tasks(session)
                .filter(TaskRecord.project_id == project_id)
                .update(
                    {TaskRecord.project_id: INBOX_PROJECT_ID, TaskRecord.updated_at: now},
                    synchronize_session=False,
                )
            )
            project.deleted_at = now
            session.commit()
        logger.info("deleted project %s; %d task(s) moved to inbox", project_id, moved)
