# salon_scheduling/core/config.py
import logging
import os
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    database_url: str = Field(
        default="sqlite+pysqlite:///./salon_scheduling.db",
        description="SQLAlchemy URL of the booking store",
    )

    # Pool sizing (ignored for SQLite)
    db_pool_size: int = Field(default=5, ge=1)
    db_max_overflow: int = Field(default=5, ge=0)
    db_pool_timeout: int = Field(default=5, ge=1, description="Seconds to wait for a pooled connection")
    db_pool_recycle: int = Field(default=300, ge=1)
    db_statement_timeout_ms: int = Field(default=15000, ge=0)

    # Row-lock waits beyond this are reported as transient failures
    lock_timeout_ms: int = Field(default=5000, ge=0)

    # Retry policy for transient storage failures
    transaction_max_attempts: int = Field(default=3, ge=1, le=10)
    retry_base_delay_seconds: float = Field(default=0.1, ge=0)
    retry_max_delay_seconds: float = Field(default=2.0, ge=0)

    slow_operation_threshold_seconds: float = Field(default=1.0, ge=0)
    regeneration_horizon_days: int = Field(default=28, ge=1, le=366)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="SCHEDULING_",
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def _check_retry_bounds(self) -> "Settings":
        if self.retry_max_delay_seconds < self.retry_base_delay_seconds:
            raise ValueError("retry_max_delay_seconds must be >= retry_base_delay_seconds")
        return self


settings = Settings()
