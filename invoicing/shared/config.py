"""Shared configuration management for the invoicing core.

Based on Pydantic Settings v2:
https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with the prefix 'APP_'.
    Example: APP_DEFAULT_CURRENCY=EUR
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    # Statement configuration
    default_currency: str = Field(
        default="USD",
        description="Currency used when the first invoice of a statement has none",
    )
    statement_title: str = Field(
        default="STATEMENT",
        description="Heading printed on generated statements",
    )

    metrics_enabled: bool = Field(
        default=True,
        description="Record Prometheus counters for recomputes and statements",
    )


def get_settings() -> Settings:
    """Factory function to get settings instance.

    Returns:
        Configured Settings instance
    """
    return Settings()
