import logging

from mustdo.core.config import settings as app_settings
from mustdo.db.schema import AppSettings
from mustdo.models.reminder import ReminderPolicy
from mustdo.models.settings import ReminderSettingsUpdate
from mustdo.services.base import BaseService

logger = logging.getLogger(__name__)


class SettingsService(BaseService):

    def get_or_create_settings(self) -> AppSettings:
        settings = (
            self.session.query(AppSettings).filter(
                AppSettings.id == "default").first()
        )
        if not settings:
            settings = AppSettings(
                id="default",
                reminder_repeat_interval_sec=app_settings.reminder_repeat_interval_sec,
                reminder_repeat_max_times=app_settings.reminder_repeat_max_times,
            )
            self.session.add(settings)
            self.session.commit()
            self.session.refresh(settings)
        return settings

    def update_reminder_settings(self, data: ReminderSettingsUpdate) -> AppSettings:
        settings = self.get_or_create_settings()
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        for key, value in update_data.items():
            setattr(settings, key, value)
        self.session.commit()
        self.session.refresh(settings)
        logger.info("reminder settings updated: %s", update_data)
        return settings

    def reminder_policy(self) -> ReminderPolicy:
        """Snapshot of the re-notify settings for one poll."""
        settings = self.get_or_create_settings()
        return ReminderPolicy(
            repeat_interval_sec=settings.reminder_repeat_interval_sec,
            repeat_max_times=settings.reminder_repeat_max_times,
        )
