"""Configuration management for restform.

This module provides configuration settings for the restform transformers.
All configuration values can be overridden via environment variables or .env file.

Environment Variables:
    RESTFORM_RESPONSE_CASE_TYPE: Key casing of transformed responses
                                 (default: camel-case)
                                 Accepted values: camel-case, snake-case
    RESTFORM_NAIVE_TIMEZONE: IANA timezone applied to naive datetimes before
                             they are rendered as ISO-8601 (default: UTC)
    RESTFORM_MAX_DEPTH: Maximum nesting of related records (default: 32)
    RESTFORM_LOG_LEVEL: Logging level (default: INFO)
"""

from datetime import timezone, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from restform.case import CaseType


class Settings(BaseSettings):
    """Application settings for restform.

    Settings are read once at process start and treated as read-only
    afterwards; transformers copy the values they need at construction.
    """

    model_config = SettingsConfigDict(
        env_prefix="RESTFORM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Response formatting
    response_case_type: CaseType = CaseType.CAMEL
    naive_timezone: str = "UTC"

    # Relation traversal
    max_depth: int = 32

    # Logging configuration
    log_level: str = "INFO"

    @field_validator("naive_timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        if value.upper() != "UTC":
            try:
                ZoneInfo(value)
            except (KeyError, ValueError) as e:
                raise ValueError(f"Unknown timezone: {value!r}") from e
        return value

    @field_validator("max_depth")
    @classmethod
    def _check_max_depth(cls, value: int) -> int:
        if value < 0:
            raise ValueError("max_depth must not be negative")
        return value

    def get_timezone(self) -> tzinfo:
        """Get the timezone used for naive datetimes."""
        if self.naive_timezone.upper() == "UTC":
            return timezone.utc
        return ZoneInfo(self.naive_timezone)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    return Settings()


def reset_settings() -> None:
    """Drop the cached settings instance (useful for testing)."""
    get_settings.cache_clear()
