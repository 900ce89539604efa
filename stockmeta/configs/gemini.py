"""
Gemini configuration settings.

Settings for the vision-language model used to generate stock metadata.

Dependencies: pydantic_settings
System role: Analysis client configuration
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class GeminiSettings(BaseSettings):
    """Google Gemini configuration for image analysis."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(
        default=None,
        description="Google AI Studio API key",
    )
    model: str = Field(
        default="gemini-3-flash-preview",
        description="Gemini model used for metadata generation",
    )
    temperature: float = Field(
        default=0.4,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for metadata generation",
    )
