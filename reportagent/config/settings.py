"""
Application settings and configuration management.

Uses Pydantic Settings for validation and environment variable support.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """LLM API configuration."""

    model: str = Field(
        default="gemini/gemini-2.5-flash",
        description="LiteLLM model string, e.g. 'gemini/gemini-2.5-flash', "
                    "'openai/gpt-4o', 'ollama/llama3'. The provider prefix tells LiteLLM "
                    "which API to route the request to.",
    )
    api_key: str = Field(default="", description="API key for the model's provider")
    temperature: float | None = Field(
        default=None,
        description="Sampling temperature. None leaves the provider default in place.",
    )

    model_config = SettingsConfigDict(env_prefix="LLM_")


class GenerationSettings(BaseSettings):
    """Per-call generation limits applied to every model turn."""

    max_output_tokens: int = Field(default=1024, gt=0, description="Maximum tokens in response")
    candidate_count: int = Field(default=1, ge=1, description="Number of candidates requested")
    thinking_budget: int = Field(
        default=0,
        ge=0,
        description="Extended thinking token budget. 0 disables thinking.",
    )
    default_system_directive: str | None = Field(
        default=None,
        description="System directive for the first turn. None sends no system message.",
    )

    model_config = SettingsConfigDict(env_prefix="GENERATION_")


class DataSettings(BaseSettings):
    """Report data source configuration."""

    cleaning_data_path: str = Field(
        default="data/cleaning_data.json",
        description="Path to the JSON file holding cleaning records",
    )
    default_window_days: int = Field(
        default=7,
        ge=0,
        description="Days before today used as the report start when no start date is given",
    )

    model_config = SettingsConfigDict(env_prefix="DATA_")


class Settings(BaseSettings):
    """Main application settings."""

    # Environment
    environment: Literal["development", "production"] = Field(
        default="development", description="Deployment environment"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_file: Path | None = Field(default=None, description="Log file path")

    # Sub-configurations
    llm: LLMSettings = Field(default_factory=LLMSettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    data: DataSettings = Field(default_factory=DataSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def load_settings(env_file: str | Path | None = None) -> Settings:
    """
    Load settings from file and environment.

    Args:
        env_file: Path to .env file (optional)

    Returns:
        Loaded settings instance
    """
    global _settings
    if env_file:
        _settings = Settings(_env_file=env_file)
    else:
        _settings = Settings()
    return _settings
