"""Search service: token search over title, notes, steps and tags."""

from typing import List, Optional

from mustdo.db.convert import to_domain
from mustdo.db.schema import TaskRecord
from mustdo.engine import ordering, visibility
from mustdo.models.task import Task
from mustdo.services.base import BaseService

MAX_QUERY_LEN = 100
SEARCH_LIMIT = 50


class SearchService(BaseService):
    """Search tasks by query; matching is done by the engine predicate."""

    def _normalize_query(self, q: str) -> Optional[str]:
        """Strip and validate search query. Returns None if invalid."""
        if not q or not isinstance(q, str):
            return None
        s = q.strip()
        if not s or len(s) > MAX_QUERY_LEN:
            return None
        return s

    def search(
        self,
        q: str,
        project_id: Optional[str] = None,
        include_completed: bool = False,
    ) -> List[Task]:
        """
        Return tasks where every query token occurs in the title, notes, step
        titles or tags, optionally filtered by project_id and include_completed.
        Results are in due order with important tasks first, limited to 50.
        """
        normalized = self._normalize_query(q)
        if not normalized:
            return []

        with self.session as session:
            rows = self._active_tasks(session)
            if project_id is not None:
                rows = rows.filter(TaskRecord.project_id == project_id)
            if not include_completed:
                rows = rows.filter(TaskRecord.completed.is_(False))
            tasks = [to_domain(row) for row in rows.all()]

        found = visibility.filter_by_query(tasks, normalized)
        return ordering.sort_with_pinned_important(found)[:SEARCH_LIMIT]
