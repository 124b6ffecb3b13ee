"""Application and logging configuration models.

This module contains configuration models for application-level
settings and logging configuration.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field, field_validator

from reelmatch.shared.constants import Logging


class AppSettings(BaseModel):
    """Application configuration.

    Attributes:
        debug: Log at DEBUG unless the command line names a level
    """

    debug: bool = Field(default=False, description="Enable debug logging")


class LoggingSettings(BaseModel):
    """Logging configuration.

    Level, rotating JSON file output and console output. The level applies
    when the command line gives neither ``--log-level`` nor ``-v``.
    """

    level: str = Field(default=Logging.DEFAULT_LEVEL, description="Logging level")
    file: str | None = Field(default=None, description="JSON log file path (disabled when unset)")
    max_bytes: int = Field(
        default=Logging.MAX_BYTES,
        gt=0,
        description="Maximum log file size in bytes",
    )
    backup_count: int = Field(
        default=Logging.BACKUP_COUNT,
        ge=0,
        description="Number of backup log files to keep",
    )
    console_output: bool = Field(default=True, description="Enable console logging")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize the level name and reject unknown levels."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            msg = f"Unknown logging level: {v}"
            raise ValueError(msg)
        return level


__all__ = [
    "AppSettings",
    "LoggingSettings",
]
