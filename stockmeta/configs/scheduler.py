"""
Scheduler configuration settings.

Concurrency ceiling and queue behaviour for the analysis job runner.

Dependencies: pydantic_settings
System role: Job scheduler configuration
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class SchedulerSettings(BaseSettings):
    """Concurrency and lifecycle settings for the job scheduler."""

    model_config = SettingsConfigDict(
        env_prefix="SCHEDULER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    max_concurrent_requests: int = Field(
        default=3,
        ge=1,
        description="Maximum number of analysis calls in flight at once",
    )
    auto_start: bool = Field(
        default=False,
        description="Start processing as soon as a batch is submitted",
    )
    analysis_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Fail a job whose analysis call exceeds this many seconds",
    )
    preview_size: int = Field(
        default=256,
        ge=16,
        description="Longest edge in pixels of generated preview thumbnails",
    )
