"""Views API: tabs, quadrant board, due sections."""

from typing import Optional

from fastapi import APIRouter, Query

from mustdo.core.deps import NowDep, ViewServiceDep
from mustdo.engine.ordering import cycle_sort_mode
from mustdo.models.task import (
    DueSection,
    QuadrantBoard,
    SortMode,
    Task,
    ViewScope,
    ViewTab,
)

router = APIRouter(prefix="/views", tags=["views"])


@router.get("/tabs/{tab}", response_model=list[Task])
def get_tab(
    tab: ViewTab,
    view_service: ViewServiceDep,
    now: NowDep,
    sort: SortMode = Query(SortMode.DUE, description="Ignored on the done tab"),
    q: str = Query("", description="Search tokens"),
    scope: Optional[ViewScope] = None,
    project_id: Optional[str] = None,
) -> list[Task]:
    """Tasks on one tab (todo, today, open, all, done) in display order."""
    return view_service.get_tab(
        tab, now, sort=sort, query=q, scope=scope, project_id=project_id)


@router.get("/quadrants", response_model=QuadrantBoard)
def get_quadrants(
    view_service: ViewServiceDep,
    sort: SortMode = SortMode.DUE,
    project_id: Optional[str] = None,
) -> QuadrantBoard:
    return view_service.get_quadrants(sort=sort, project_id=project_id)


@router.get("/sections", response_model=list[DueSection])
def get_sections(
    view_service: ViewServiceDep,
    now: NowDep,
    sort: SortMode = SortMode.DUE,
    project_id: Optional[str] = None,
) -> list[DueSection]:
    """Overdue, today, tomorrow, future and completed sections."""
    return view_service.get_sections(now, sort=sort, project_id=project_id)


@router.get("/sort-modes/{mode}/next")
def next_sort_mode(mode: SortMode) -> dict[str, SortMode]:
    """Sort mode that follows ``mode`` in the due -> created -> manual cycle."""
    return {"mode": cycle_sort_mode(mode)}
