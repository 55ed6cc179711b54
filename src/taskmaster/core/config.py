"""Application settings for the TaskMaster service."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration values."""

    model_config = SettingsConfigDict(
        env_prefix="TASKMASTER_",
        env_file=".env",
        case_sensitive=False,
    )

    database_url: str = Field(
        default="sqlite:///./taskmaster.db",
        description="SQLAlchemy database URL for the record store.",
    )
    refresh_interval_seconds: int = Field(
        default=60,
        ge=1,
        description="Interval of the background dashboard refresh.",
    )
    notify_window_hours: int = Field(default=24, ge=1)
    urgent_window_hours: int = Field(default=6, ge=1)
    upcoming_limit: int = Field(default=5, ge=1)
    vip_threshold: float = Field(
        default=20000,
        description="Total projected spend above which a student counts as VIP.",
    )
    delete_policy: Literal["restrict", "cascade", "nullify"] = Field(
        default="restrict",
        description="What happens to assignments when their student or writer is deleted.",
    )
    restore_replace_default: bool = Field(
        default=False,
        description="Clear existing records before a restore unless the request says otherwise.",
    )
    seed_demo_data: bool = False
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
