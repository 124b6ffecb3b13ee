"""
reelmatch Constants Module

This module provides centralized constants for reelmatch. All magic values
are defined here to ensure consistency across the codebase.
"""

from .cli import CLICommands, CLIDefaults, CLIHelp, CLIOptions
from .matching import (
    FuzzyMatchingDefaults,
    RequestFieldAliases,
    StrategyConfidence,
    TitleNormalization,
    ValidationConstants,
)
from .system import (
    Application,
    EventChannelDefaults,
    EventNames,
    FileSystem,
    Logging,
    QueueDefaults,
    ReviewStatus,
)

__all__ = [
    "Application",
    "CLICommands",
    "CLIDefaults",
    "CLIHelp",
    "CLIOptions",
    "EventChannelDefaults",
    "EventNames",
    "FileSystem",
    "FuzzyMatchingDefaults",
    "Logging",
    "QueueDefaults",
    "RequestFieldAliases",
    "ReviewStatus",
    "StrategyConfidence",
    "TitleNormalization",
    "ValidationConstants",
]
