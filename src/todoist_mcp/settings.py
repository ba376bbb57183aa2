"""Runtime configuration loaded from the environment or a .env file."""

from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from todoist_mcp.constants import DEFAULT_API_URL, DEFAULT_LIFELOG_URL, DEFAULT_TIMEOUT


class Settings(BaseSettings):
    todoist_api_token: str = ""
    todoist_api_url: str = DEFAULT_API_URL
    todoist_timeout: float = DEFAULT_TIMEOUT

    limitless_api_key: str = ""
    limitless_api_url: str = Field(
        default=DEFAULT_LIFELOG_URL,
        validation_alias=AliasChoices("limitless_api_url", "limitless_base_url"),
    )

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def lifelog_enabled(self) -> bool:
        return bool(self.limitless_api_key)


@lru_cache
def get_settings() -> Settings:
    return Settings()
