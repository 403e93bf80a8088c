from fastapi import APIRouter

from mustdo.core.deps import SettingsServiceDep
from mustdo.models.settings import ReminderSettingsResponse, ReminderSettingsUpdate

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/reminders", response_model=ReminderSettingsResponse)
def get_reminder_settings(settings_service: SettingsServiceDep) -> ReminderSettingsResponse:
    """Get re-notify settings (singleton); auto-creates default row if missing."""
    settings = settings_service.get_or_create_settings()
    return ReminderSettingsResponse.model_validate(settings)


@router.patch("/reminders", response_model=ReminderSettingsResponse)
def patch_reminder_settings(
    body: ReminderSettingsUpdate,
    settings_service: SettingsServiceDep,
) -> ReminderSettingsResponse:
    """Update re-notify settings (partial)."""
    settings = settings_service.update_reminder_settings(body)
    return ReminderSettingsResponse.model_validate(settings)
