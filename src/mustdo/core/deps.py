"""Central place for FastAPI dependencies and shared *Dep type aliases."""

import time
from datetime import tzinfo
from typing import Annotated, Optional

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from mustdo.core.config import settings
from mustdo.db.session import get_db
from mustdo.scheduler import ReminderOutbox, outbox
from mustdo.services.projects import ProjectService
from mustdo.services.reminders import ReminderService
from mustdo.services.search import SearchService
from mustdo.services.settings import SettingsService
from mustdo.services.tasks import TaskService
from mustdo.services.views import ViewService

SessionDep = Annotated[Session, Depends(get_db)]


def get_now(
    now: Annotated[
        Optional[int],
        Query(ge=0, description="Clock override in epoch seconds"),
    ] = None,
) -> int:
    """Current time in epoch seconds; an explicit ``now`` wins."""
    if now is not None:
        return now
    return int(time.time())


def get_tz() -> Optional[tzinfo]:
    """Zone for calendar math; None means the host's local zone."""
    return settings.tz


NowDep = Annotated[int, Depends(get_now)]
TzDep = Annotated[Optional[tzinfo], Depends(get_tz)]


def get_task_service(session: SessionDep, tz: TzDep) -> TaskService:
    """Provide TaskService for this request."""
    return TaskService(session, tz)


def get_project_service(session: SessionDep) -> ProjectService:
    """Provide ProjectService for this request."""
    return ProjectService(session)


def get_view_service(session: SessionDep, tz: TzDep) -> ViewService:
    """Provide ViewService for this request."""
    return ViewService(session, tz)


def get_search_service(session: SessionDep) -> SearchService:
    """Provide SearchService for this request."""
    return SearchService(session)


def get_reminder_service(session: SessionDep, tz: TzDep) -> ReminderService:
    """Provide ReminderService for this request."""
    return ReminderService(session, tz)


def get_settings_service(session: SessionDep) -> SettingsService:
    """Provide SettingsService for this request."""
    return SettingsService(session)


TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
ViewServiceDep = Annotated[ViewService, Depends(get_view_service)]
SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]
ReminderServiceDep = Annotated[ReminderService, Depends(get_reminder_service)]
SettingsServiceDep = Annotated[SettingsService, Depends(get_settings_service)]


def get_outbox() -> ReminderOutbox:
    """Events queued by the background poller."""
    return outbox


OutboxDep = Annotated[ReminderOutbox, Depends(get_outbox)]
