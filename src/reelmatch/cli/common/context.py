"""Global options of the reelmatch command line.

The main callback parses -v, --log-level and --json once and stores them in a
ContextVar; the match, resolve and review handlers read them back to pick the
logger level and to choose between rich tables and JSON envelopes.
"""

from __future__ import annotations

import contextvars
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class LogLevel(str, Enum):
    """Levels accepted by --log-level."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class CliContext(BaseModel):
    """Options shared by every reelmatch command.

    ``log_level`` stays None unless --log-level was given, so the configured
    ``logging.level`` applies by default.
    """

    verbose: int = Field(
        default=0,
        ge=0,
        description="Verbosity level (0 = normal, 1+ = verbose)",
    )

    log_level: Optional[LogLevel] = Field(
        default=None,
        description="Logging level given on the command line, if any",
    )

    json_output: bool = Field(
        default=False,
        description="Whether to output in JSON format",
    )

    def is_verbose(self) -> bool:
        """Check if verbose mode is enabled."""
        return self.verbose > 0

    def get_effective_log_level(self, default: str = LogLevel.INFO.value) -> str:
        """
        Get the effective log level after applying verbose override.

        Verbose forces DEBUG; otherwise an explicit --log-level wins over the
        configured default.
        """
        if self.is_verbose():
            return LogLevel.DEBUG.value
        if self.log_level is not None:
            return self.log_level.value
        return default


cli_context_var: contextvars.ContextVar[CliContext | None] = contextvars.ContextVar(
    "cli_context",
    default=None,
)


def get_cli_context() -> CliContext:
    """Return the options of the running command, or defaults outside one."""
    context = cli_context_var.get()
    if context is None:
        return CliContext()
    return context


def set_cli_context(context: CliContext) -> None:
    """Set the current CLI context."""
    cli_context_var.set(context)


def clear_cli_context() -> None:
    """Clear the current CLI context."""
    cli_context_var.set(None)
