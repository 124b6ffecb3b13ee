"""Configuration domain models."""

from __future__ import annotations

from .app_settings import AppSettings, LoggingSettings
from .matching_settings import EventSettings, MatchingSettings, QueueSettings
from .settings import Settings
from .storage_settings import StorageSettings

__all__ = [
    "AppSettings",
    "EventSettings",
    "LoggingSettings",
    "MatchingSettings",
    "QueueSettings",
    "Settings",
    "StorageSettings",
]
