"""Runtime settings, read once from the environment at startup."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PORT = 3000
DEFAULT_JSON_LIMIT = 100 * 1024


class Settings(BaseSettings):
    """Service settings.

    Each field is read from the upper-cased environment variable of the same
    name (``PORT``, ``HOST``, ``LOG_LEVEL``, ``JSON_LIMIT``). Empty variables
    count as unset. Bad values raise ``pydantic.ValidationError``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    port: int = Field(DEFAULT_PORT, ge=0, le=65535)
    host: str = Field("0.0.0.0", min_length=1)
    log_level: Literal["debug", "info", "warning", "error", "critical"] = "info"
    json_limit: int = Field(DEFAULT_JSON_LIMIT, gt=0)

    @field_validator("log_level", mode="before")
    @classmethod
    def lower_log_level(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


def load_settings() -> Settings:
    return Settings()
