"""Reminders API."""

from fastapi import APIRouter

from mustdo.core.deps import NowDep, OutboxDep, ReminderServiceDep
from mustdo.models.events import PollResult, ReminderEvent, UpcomingReminder
from mustdo.models.reminder import RescheduleRequest, SnoozeRequest
from mustdo.models.task import Task

router = APIRouter(prefix="/reminders", tags=["reminders"])


@router.post("/poll", response_model=PollResult)
def poll_reminders(reminder_service: ReminderServiceDep, now: NowDep) -> PollResult:
    """Fire every reminder due at ``now``; forced reminders come one event each."""
    return reminder_service.poll(now)


@router.get("/pending", response_model=list[ReminderEvent])
def drain_pending(outbox: OutboxDep) -> list[ReminderEvent]:
    """Events fired by the background poller since the last call."""
    return outbox.drain()


@router.get("/upcoming", response_model=list[UpcomingReminder])
def get_upcoming_reminders(reminder_service: ReminderServiceDep) -> list[UpcomingReminder]:
    """Pending reminders ordered by fire time."""
    return reminder_service.get_upcoming()


@router.post("/{task_id}/snooze", response_model=Task)
def snooze_reminder(
    task_id: str,
    body: SnoozeRequest,
    reminder_service: ReminderServiceDep,
    now: NowDep,
) -> Task:
    return reminder_service.snooze(task_id, body.preset, now)


@router.post("/{task_id}/dismiss", response_model=Task)
def dismiss_reminder(task_id: str, reminder_service: ReminderServiceDep) -> Task:
    """Dismiss the current forced reminder occurrence."""
    return reminder_service.dismiss(task_id)


@router.post("/{task_id}/reschedule", response_model=Task)
def reschedule_task(
    task_id: str,
    body: RescheduleRequest,
    reminder_service: ReminderServiceDep,
    now: NowDep,
) -> Task:
    """Move the due time by a preset and re-arm the reminder."""
    return reminder_service.reschedule(task_id, body.preset, now)
