"""
Base configuration settings.

Shared .env loading and logging options inherited by the aggregated
Settings class.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict
from pydantic import Field


class BaseSettings(PydanticBaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = Field(
        default=False,
        description="Log at DEBUG regardless of log_level",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    @property
    def effective_log_level(self) -> str:
        """Root log level to configure, forced to DEBUG in debug mode."""
        return "DEBUG" if self.debug else self.log_level.upper()
