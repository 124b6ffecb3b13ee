"""reelmatch Configuration Module

This module provides unified access to configuration models and settings
management:
- Settings: Main configuration facade
- Loader functions: get_config, load_settings, reload_config
- Domain models: App, Logging, Matching, Queue, Events, Storage settings
"""

from __future__ import annotations

from .loader import SettingsLoader, get_config, load_settings, reload_config
from .models import (
    AppSettings,
    EventSettings,
    LoggingSettings,
    MatchingSettings,
    QueueSettings,
    Settings,
    StorageSettings,
)

__all__ = [
    "AppSettings",
    "EventSettings",
    "LoggingSettings",
    "MatchingSettings",
    "QueueSettings",
    "Settings",
    "SettingsLoader",
    "StorageSettings",
    "get_config",
    "load_settings",
    "reload_config",
]
