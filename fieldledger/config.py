"""
Configuration settings for fieldledger.

Uses Pydantic Settings to load environment variables for logging and for the
business assumptions the dashboard applies when it has no real figures
(expense share of revenue, parts share, payroll normalization). The engine
functions never read these settings themselves; the CLI passes them in as
explicit parameters.
"""
from __future__ import annotations

from datetime import tzinfo
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Calendar bucketing; unset keeps timestamps in whatever zone they arrive in
    timezone: Optional[str] = Field(None, alias="LEDGER_TIMEZONE")

    # Roll-up assumptions
    expense_ratio: float = Field(0.33, alias="LEDGER_EXPENSE_RATIO")
    parts_ratio: float = Field(0.20, alias="LEDGER_PARTS_RATIO")
    hours_per_week: float = Field(40.0, alias="LEDGER_HOURS_PER_WEEK")
    weeks_per_month: float = Field(4.33, alias="LEDGER_WEEKS_PER_MONTH")
    hours_per_record: Optional[float] = Field(None, alias="LEDGER_HOURS_PER_RECORD")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("timezone")
    @classmethod
    def _known_zone(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        try:
            ZoneInfo(value)
        except ZoneInfoNotFoundError as exc:
            raise ValueError(f"unknown time zone {value!r}") from exc
        return value

    def tzinfo(self) -> Optional[tzinfo]:
        """Resolve the configured IANA zone, or None for no conversion."""
        return ZoneInfo(self.timezone) if self.timezone else None

    def effective_hours_per_record(self) -> float:
        """
        Hours credited to each hourly record.

        Falls back to a full month of work (hours_per_week * weeks_per_month)
        when no explicit value is configured.
        """
        if self.hours_per_record is not None:
            return self.hours_per_record
        return self.hours_per_week * self.weeks_per_month


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
