from typing import Optional

from fastapi import HTTPException

from mustdo.db.convert import to_domain
from mustdo.db.schema import TaskRecord
from mustdo.engine import ordering, visibility
from mustdo.models.task import (
    DueSection,
    QuadrantBoard,
    SortMode,
    Task,
    ViewScope,
    ViewTab,
)
from mustdo.services.base import BaseService


class ViewService(BaseService):
    def _load(self, project_id: Optional[str] = None) -> list[Task]:
        with self.session as session:
            q = self._active_tasks(session)
            if project_id is not None:
                q = q.filter(TaskRecord.project_id == project_id)
            return [to_domain(row) for row in q.all()]

    def get_tab(
        self,
        tab: ViewTab,
        now: int,
        sort: SortMode = SortMode.DUE,
        query: str = "",
        scope: Optional[ViewScope] = None,
        project_id: Optional[str] = None,
    ) -> list[Task]:
        """Tasks on ``tab`` in display order, narrowed by scope and search text."""
        if scope == ViewScope.PROJECT and project_id is None:
            raise HTTPException(
                status_code=422,
                detail="project_id is required for the project scope",
            )
        tasks = self._load()
        if scope is not None:
            tasks = visibility.filter_by_scope(tasks, scope, now, self.tz, project_id)
        elif project_id is not None:
            tasks = [t for t in tasks if t.project_id == project_id]
        tasks = visibility.filter_by_query(tasks, query)
        return visibility.visible_tasks(tasks, tab, now, sort, self.tz)

    def get_quadrants(
        self, sort: SortMode = SortMode.DUE, project_id: Optional[str] = None
    ) -> QuadrantBoard:
        """Eisenhower board: each quadrant ordered, plus total/completed counts."""
        tasks = self._load(project_id)
        groups = ordering.group_by_quadrant(tasks)
        return QuadrantBoard(
            quadrants={
                q: ordering.sort_with_pinned_important(members, sort)
                for q, members in groups.items()
            },
            counts=ordering.quadrant_counts(tasks),
        )

    def get_sections(
        self,
        now: int,
        sort: SortMode = SortMode.DUE,
        project_id: Optional[str] = None,
    ) -> list[DueSection]:
        """Ordered tasks split into overdue / today / tomorrow / future / completed."""
        tasks = ordering.sort_with_pinned_important(self._load(project_id), sort)
        return [
            DueSection(id=section_id, tasks=members)
            for section_id, members in visibility.due_sections(tasks, now, self.tz)
        ]
