"""Runtime settings and logging setup."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    retention_days: int = Field(default=30, gt=0)
    sweep_interval_hours: int = Field(default=24, gt=0)
    # Run scan + write under a per-(court, date) lock; one overlapping booking survives.
    serialize_partitions: bool = True
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="COURTGUARD_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the service process."""
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format=LOG_FORMAT,
    )
