from datetime import tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MUSTDO_")

    app_name: str = "MustDo API"
    debug: bool = False
    # SQLite by default; set MUSTDO_DATABASE_URL for PostgreSQL
    database_url: str = "sqlite:///./mustdo.db"
    # IANA zone for calendar math (e.g. "Europe/Berlin"); unset = host local time
    timezone: Optional[str] = None

    # Seed values for the persisted reminder settings row
    reminder_repeat_interval_sec: int = 0
    reminder_repeat_max_times: int = 0

    poller_enabled: bool = False
    poll_interval_sec: float = 30.0

    log_level: str = "INFO"
    log_dir: Optional[str] = None

    @property
    def tz(self) -> Optional[tzinfo]:
        """Zone passed to the engine; None means the host's local zone."""
        return ZoneInfo(self.timezone) if self.timezone else None


settings = Settings()
