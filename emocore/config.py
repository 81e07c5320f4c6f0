"""
Service configuration.

Settings come from ``EMOCORE_*`` environment variables, falling back to the
defaults declared on ``Settings``.
"""

import os
from collections.abc import Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

from .normalizer import DAILY_MOOD_HOUR, CalendarPolicy

ENV_PREFIX = "EMOCORE_"


class Settings(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(8000, ge=1, le=65535)
    log_level: str = "info"
    timezone: str | None = Field(
        None, description="IANA zone for daily mood dates; unset keeps each timestamp's zone"
    )
    daily_mood_hour: int = Field(DAILY_MOOD_HOUR, ge=0, le=23)

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.lower()
        if value not in {"critical", "error", "warning", "info", "debug"}:
            raise ValueError(f"Unknown log level: {value}")
        return value

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str | None) -> str | None:
        if value:
            try:
                ZoneInfo(value)
            except ZoneInfoNotFoundError as e:
                raise ValueError(f"Unknown time zone: {value}") from e
        return value or None

    def calendar_policy(self) -> CalendarPolicy:
        zone = ZoneInfo(self.timezone) if self.timezone else None
        return CalendarPolicy(timezone=zone, daily_mood_hour=self.daily_mood_hour)


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Load settings from the environment, merging with defaults."""
    if environ is None:
        environ = os.environ

    values = {
        name: environ[ENV_PREFIX + name.upper()]
        for name in Settings.model_fields
        if ENV_PREFIX + name.upper() in environ
    }
    return Settings.model_validate(values)
