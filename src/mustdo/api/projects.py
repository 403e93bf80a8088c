"""Projects API."""

from fastapi import APIRouter, Response

from mustdo.core.deps import NowDep, ProjectServiceDep
from mustdo.models.project import (
    ProjectCreate,
    ProjectResponse,
    ProjectSwap,
    ProjectUpdate,
)

router = APIRouter(prefix="/projects", tags=["projects"])


def _with_count(project, count: int) -> ProjectResponse:
    return ProjectResponse.model_validate(project).model_copy(
        update={"task_count": count}
    )


@router.get("/", response_model=list[ProjectResponse])
def list_projects(project_service: ProjectServiceDep, now: NowDep) -> list[ProjectResponse]:
    """List non-deleted projects with task_count; the inbox is always present."""
    return [
        _with_count(project, count)
        for project, count in project_service.get_projects(now)
    ]


@router.post("/", response_model=ProjectResponse, status_code=201)
def create_project(
    body: ProjectCreate, project_service: ProjectServiceDep, now: NowDep
) -> ProjectResponse:
    """Create project."""
    project = project_service.create_project(body, now)
    return ProjectResponse.model_validate(project)


@router.post("/swap-sort-order", response_model=list[ProjectResponse])
def swap_sort_order(
    body: ProjectSwap, project_service: ProjectServiceDep, now: NowDep
) -> list[ProjectResponse]:
    """Swap the manual order of two projects; returns the reordered list."""
    return [
        _with_count(project, count)
        for project, count in project_service.swap_sort_order(body, now)
    ]


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: str,
    project_service: ProjectServiceDep,
    now: NowDep,
) -> ProjectResponse:
    """Get single project with task_count."""
    return _with_count(*project_service.get_project(project_id, now))


@router.patch("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: str,
    body: ProjectUpdate,
    project_service: ProjectServiceDep,
    now: NowDep,
) -> ProjectResponse:
    """Update project."""
    project_service.update_project(project_id, body, now)
    return _with_count(*project_service.get_project(project_id, now))


@router.delete("/{project_id}", status_code=204, response_class=Response)
def delete_project(
    project_id: str,
    project_service: ProjectServiceDep,
    now: NowDep,
) -> None:
    """Soft delete project; its tasks move to the inbox. The inbox itself is kept."""
    project_service.delete_project(project_id, now)
