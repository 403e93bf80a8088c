"""Tasks API."""

from typing import Optional

from fastapi import APIRouter, Query, Response

from mustdo.core.deps import NowDep, TaskServiceDep
from mustdo.models.task import (
    Completion,
    QuadrantMove,
    SortMode,
    Task,
    TaskBatchDelete,
    TaskCreate,
    TaskMove,
    TaskReorder,
    TaskUpdate,
)

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("/", response_model=list[Task])
def list_tasks(
    task_service: TaskServiceDep,
    project_id: Optional[str] = None,
    completed: Optional[bool] = None,
    sort: SortMode = Query(
        SortMode.DUE,
        description="Ordering inside the important / other partitions",
    ),
) -> list[Task]:
    """List tasks with optional filters (non-deleted only), important first."""
    return task_service.get_tasks(
        project_id=project_id,
        completed=completed,
        sort=sort,
    )


@router.post("/", response_model=Task, status_code=201)
def create_task(body: TaskCreate, task_service: TaskServiceDep, now: NowDep) -> Task:
    """Create task. Due time defaults to the next 18:00; #tags in the title are extracted."""
    return task_service.create_task(body, now)


@router.patch("/reorder", status_code=204, response_class=Response)
def reorder_tasks(body: TaskReorder, task_service: TaskServiceDep, now: NowDep) -> None:
    """Batch update sort_order for given task ids."""
    task_service.reorder(body, now)


@router.post("/batch-delete", response_model=dict[str, int])
def delete_tasks(body: TaskBatchDelete, task_service: TaskServiceDep, now: NowDep) -> dict[str, int]:
    """Soft delete several tasks; returns how many were deleted."""
    return {"deleted": task_service.delete_tasks(body, now)}


@router.get("/{task_id}", response_model=Task)
def get_task(task_id: str, task_service: TaskServiceDep) -> Task:
    return task_service.get_task(task_id)


@router.patch("/{task_id}", response_model=Task)
def update_task(
    task_id: str,
    body: TaskUpdate,
    task_service: TaskServiceDep,
    now: NowDep,
) -> Task:
    """Update task. Changing due_at or the reminder re-arms the reminder."""
    return task_service.update_task(task_id, body, now)


@router.delete("/{task_id}", status_code=204, response_class=Response)
def delete_task(task_id: str, task_service: TaskServiceDep, now: NowDep) -> None:
    """Soft delete task."""
    task_service.delete_task(task_id, now)


@router.post("/{task_id}/complete", response_model=Completion)
def complete_task(task_id: str, task_service: TaskServiceDep, now: NowDep) -> Completion:
    """Complete task; a repeating task also yields its next occurrence."""
    return task_service.complete_task(task_id, now)


@router.post("/{task_id}/reopen", response_model=Task)
def reopen_task(task_id: str, task_service: TaskServiceDep, now: NowDep) -> Task:
    return task_service.reopen_task(task_id, now)


@router.post("/{task_id}/move", response_model=list[Task])
def move_task(
    task_id: str,
    body: TaskMove,
    task_service: TaskServiceDep,
    now: NowDep,
) -> list[Task]:
    """Move one step up or down in the tab's manual order; returns the tab list."""
    return task_service.move_task(task_id, body, now)


@router.post("/{task_id}/quadrant", response_model=Task)
def move_to_quadrant(
    task_id: str,
    body: QuadrantMove,
    task_service: TaskServiceDep,
    now: NowDep,
) -> Task:
    return task_service.move_to_quadrant(task_id, body.quadrant, now)
