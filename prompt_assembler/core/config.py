"""Application configuration using Pydantic v2 Settings.

Centralized configuration that loads from environment variables
and provides type-safe access throughout the application.
"""

import logging
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Value shipped in .env.example; treated as unset.
OPENAI_KEY_PLACEHOLDER = "your-openai-api-key-here"


class ConfigurationError(Exception):
    """Raised when a component needs a setting that is not configured."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via
    environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # OpenAI
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key for placeholder extraction.",
    )
    openai_base_url: str | None = Field(
        default=None,
        description="Optional custom OpenAI-compatible base URL.",
    )
    llm_chat_model: str = Field(
        default="gpt-4o",
        description="Chat model used for extraction.",
    )
    llm_temperature: float | None = Field(
        default=0.1,
        description="Sampling temperature; unset for models that reject it.",
    )
    llm_timeout_seconds: float = Field(
        default=60.0,
        description="Timeout for one extraction call.",
    )

    # Template store
    store_type: Literal["local", "github"] = Field(
        default="local",
        description="Template store strategy: 'local' or 'github'.",
    )
    store_root: Path = Field(
        default=Path("."),
        description="Root directory of the local template store.",
    )
    templates_root: str = Field(
        default="templates",
        description="Store-relative directory holding one folder per template.",
    )

    # GitHub
    github_token: str = Field(
        default="",
        description="GitHub token with contents read/write permission.",
    )
    github_repo: str = Field(
        default="",
        description="Repository holding the templates, as owner/name.",
    )
    github_branch: str = Field(
        default="main",
        description="Branch the admin editor commits to.",
    )
    github_api_url: str = Field(
        default="https://api.github.com",
        description="GitHub API base URL.",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR.",
    )
    log_json: bool = Field(
        default=False,
        description="Render console logs as JSON.",
    )
    log_dir: Path | None = Field(
        default=Path("logs"),
        description="Directory for info.log and error.log; unset to log to console only.",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper()

    @property
    def openai_configured(self) -> bool:
        key = self.openai_api_key.strip()
        return bool(key) and key != OPENAI_KEY_PLACEHOLDER

    @property
    def github_configured(self) -> bool:
        return bool(self.github_token and self.github_repo)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global Settings instance.

    Returns:
        The singleton Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
