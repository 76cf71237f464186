"""Settings for rowlink hosts.

The mapping core itself takes an explicit :class:`~rowlink.core.database.Database`;
``RowLinkSettings`` is what a host (the CLI, a script) reads to build one.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.

    - **Pydantic validation:** Type-checked at startup, not at first query
    - **Environment-driven:** Reads ``ROWLINK_*`` env vars and ``.env`` files
    - **Sensible defaults:** An in-memory database works out of the box

Examples:
    >>> from rowlink.core.settings import get_settings
    >>> settings = get_settings()
    >>> settings.database_url
    'memory'

Tags:
    settings, configuration, pydantic, environment, rowlink
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RowLinkSettings(BaseSettings):
    """Validated configuration read from ``ROWLINK_*`` environment variables.

    Fields
    ──────
    database_url : ``memory``, ``sqlite:///path`` or a bare SQLite file path
    log_level    : Structlog log level
    log_format   : ``console`` or ``json``
    echo_sql     : Log every statement at INFO instead of DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="ROWLINK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = Field(default="memory", description="Database URL or SQLite path")

    log_level: str = Field(default="INFO")
    log_format: Literal["console", "json"] = Field(default="console")
    echo_sql: bool = Field(default=False)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> RowLinkSettings:
    """Return the cached settings instance."""
    return RowLinkSettings()


def reset_settings() -> None:
    """Drop the cached settings (tests, env changes)."""
    get_settings.cache_clear()


__all__ = [
    "RowLinkSettings",
    "get_settings",
    "reset_settings",
]
