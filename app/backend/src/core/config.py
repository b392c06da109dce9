"""Application configuration utilities."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings derived from environment variables."""

    schedule_storage_path: str = Field(
        default="storage/schedule_snapshot.json", alias="SCHEDULE_STORAGE_PATH"
    )
    preferences_storage_path: str = Field(
        default="storage/user_preferences.json", alias="PREFERENCES_STORAGE_PATH"
    )
    default_company_name: str = Field(
        default="MaidCentral", alias="DEFAULT_COMPANY_NAME"
    )
    invalid_record_policy: Literal["fail", "skip"] = Field(
        default="fail", alias="INVALID_RECORD_POLICY"
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @property
    def skip_invalid_records(self) -> bool:
        """Return ``True`` when invalid records are dropped instead of failing."""

        return self.invalid_record_policy == "skip"


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings"]
