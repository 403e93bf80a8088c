from typing import Optional

from fastapi import APIRouter, Query

from mustdo.core.deps import SearchServiceDep
from mustdo.models.task import Task

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=list[Task])
def search(
    search_service: SearchServiceDep,
    q: str = Query("", description="Search tokens; #tag matches tags and text"),
    project_id: Optional[str] = Query(None, description="Filter by project"),
    include_completed: bool = Query(
        False, description="Include completed tasks"),
) -> list[Task]:
    """Search tasks; every token must match. Max 50 results."""
    return search_service.search(
        q=q,
        project_id=project_id,
        include_completed=include_completed,
    )
