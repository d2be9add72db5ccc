"""Langman configuration settings."""

import json
from typing import Any, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LangmanSettings(BaseSettings):
    """Langman configuration settings.

    Environment Variables:
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        LOG_JSON: Render logs as JSON instead of the console renderer
        LANGMAN_DEBUG: Promote langman's internal debug logs to their real level
        LANGMAN_DEFAULT_LANGUAGE: Language used when a caller passes none
        LANGMAN_LANGUAGES: Languages to load (JSON list or comma separated)
        LANGMAN_FORMAT: Locale file format (yaml, json, toml)
        LANGMAN_RESOURCE_DIR: Directory holding bundled locale files
        LANGMAN_OUTPUT_DIR: Writable directory holding the live locale files
        LANGMAN_AUTO_UPDATE: Sync output files against bundled ones on build
    """

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    DEBUG: bool = Field(default=False, alias="LANGMAN_DEBUG")
    DEFAULT_LANGUAGE: str = Field(default="en", alias="LANGMAN_DEFAULT_LANGUAGE")
    LANGUAGES: Any = Field(default_factory=lambda: ["en"], alias="LANGMAN_LANGUAGES")
    FORMAT: str = Field(default="yaml", alias="LANGMAN_FORMAT")
    RESOURCE_DIR: Optional[str] = Field(default=None, alias="LANGMAN_RESOURCE_DIR")
    OUTPUT_DIR: Optional[str] = Field(default=None, alias="LANGMAN_OUTPUT_DIR")
    AUTO_UPDATE: bool = Field(default=True, alias="LANGMAN_AUTO_UPDATE")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("LANGUAGES", mode="before")
    @classmethod
    def _parse_languages(cls, v: Optional[Any]) -> List[str]:
        """Accept a JSON list, a comma separated string or a native list."""
        if v is None:
            return ["en"]

        if isinstance(v, (list, tuple)):
            return [str(item).strip() for item in v if str(item).strip()]

        if isinstance(v, str):
            s = v.strip()
            if s.startswith("["):
                try:
                    parsed = json.loads(s)
                except (json.JSONDecodeError, ValueError) as e:
                    raise ValueError(f"Invalid LANGMAN_LANGUAGES JSON: {e}") from e
                return cls._parse_languages(parsed)
            return [part.strip() for part in s.split(",") if part.strip()]

        raise ValueError("LANGMAN_LANGUAGES must be a list or a string")

    @field_validator("FORMAT")
    @classmethod
    def _normalize_format(cls, v: str) -> str:
        return v.strip().lower()


settings = LangmanSettings()


def get_settings() -> LangmanSettings:
    """Return the process-wide settings instance."""
    return settings
