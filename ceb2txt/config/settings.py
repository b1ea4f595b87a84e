from __future__ import annotations

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class OutputSettings(BaseModel):
    base_path: str = "."
    timezone: str | None = None

    @validator("timezone")
    def ensure_known_zone(cls, value: str | None) -> str | None:
        if not value:
            return None
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown time zone {value!r}.") from exc
        return value

    def tzinfo(self) -> ZoneInfo | None:
        # None means the system's local time zone.
        return ZoneInfo(self.timezone) if self.timezone else None


class StoreSettings(BaseModel):
    dsn: str = "sqlite://"


class LoggingSettings(BaseModel):
    level: str = "WARNING"

    @validator("level")
    def normalize_level(cls, value: str) -> str:
        return value.upper()


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_file_encoding="utf-8",
        env_prefix="CEB2TXT_",
        env_nested_delimiter="__",
    )

    output: OutputSettings = Field(default_factory=OutputSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache()
def get_settings() -> AppSettings:
    return AppSettings()  # type: ignore[arg-type]
