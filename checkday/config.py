"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./checkday.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        default="change-me",
        description="Secret key for signing JWT tokens",
        min_length=1,
    )
    access_token_expire_minutes: int = Field(
        default=60 * 24,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used to render notification timestamps",
    )
    notification_default_page_size: int = Field(
        default=10,
        description="Page size used when the client does not ask for one",
        gt=0,
    )
    notification_page_size_max: int = Field(
        default=100,
        description="Largest page size accepted by the notification query API",
        gt=0,
    )
    ws_send_queue_size: int = Field(
        default=100,
        description="Outbound messages buffered per websocket before sends are dropped",
        gt=0,
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )

    @field_validator("notification_page_size_max")
    @classmethod
    def _validate_page_size_max(cls, value: int, info) -> int:
        default_size = info.data.get("notification_default_page_size")
        if default_size is not None and value < default_size:
            raise ValueError(
                "NOTIFICATION_PAGE_SIZE_MAX must not be smaller than "
                "NOTIFICATION_DEFAULT_PAGE_SIZE"
            )
        return value


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
