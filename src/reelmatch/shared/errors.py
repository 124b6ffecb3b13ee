"""Errors raised by the matching pipeline.

Every failure carries an ErrorCode and an ErrorContext naming the batch and
request it belongs to. DomainError covers bad requests and matching rules,
InfrastructureError covers the catalog, the outcome store and input files,
ApplicationError covers configuration and job lifecycle.

Contexts are written to logs and to JSON CLI output through ``safe_dict``,
which drops the fields listed in SAFE_DICT_MASK_KEYS. Those default to the
pieces of a user's library layout (folder paths and raw titles) that should
not leak into shared log files.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]

# Library layout keys dropped from safe_dict, at top level and inside additional_data
SAFE_DICT_MASK_KEYS: tuple[str, ...] = ("folder_path", "folder_path_hint", "title")


class ErrorCode(str, Enum):
    """Error codes for reelmatch.

    This enum serves as the single source of truth for all error codes
    used throughout the application.
    """

    # File System Errors
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    FILE_READ_ERROR = "FILE_READ_ERROR"
    FILE_PERMISSION_DENIED = "FILE_PERMISSION_DENIED"

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    PARSING_ERROR = "PARSING_ERROR"
    RESOLUTION_FAILED = "RESOLUTION_FAILED"

    # Catalog and Persistence Errors
    CATALOG_LOAD_FAILED = "CATALOG_LOAD_FAILED"
    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"
    DATABASE_ERROR = "DATABASE_ERROR"
    OUTCOME_NOT_FOUND = "OUTCOME_NOT_FOUND"

    # Configuration Errors
    CONFIG_ERROR = "CONFIG_ERROR"
    INVALID_CONFIG = "INVALID_CONFIG"

    # Batch and Concurrency Errors
    JOB_ALREADY_RUNNING = "JOB_ALREADY_RUNNING"
    EVENT_HANDLER_FAILED = "EVENT_HANDLER_FAILED"

    # CLI Errors
    CLI_INVALID_ARGUMENTS = "CLI_INVALID_ARGUMENTS"
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"
    CLI_COMMAND_INTERRUPTED = "CLI_COMMAND_INTERRUPTED"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContextModel:
    """Where in a matching run an error happened.

    Attributes:
        operation: Operation that failed, e.g. ``record_match_outcome``
        file_path: Input file being read (catalog or request list)
        batch_id: Batch the failing request belongs to
        request_id: Id of the failing match request
        folder_path: Library folder involved (masked in safe_dict)
        additional_data: Extra primitive values (str, int, float, bool);
            Path, Enum and Decimal values are converted on construction
    """

    operation: str | None = None
    file_path: str | None = None
    batch_id: str | None = None
    request_id: str | None = None
    folder_path: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self, *, mask_keys: tuple[str, ...] | None = None) -> dict[str, Any]:
        """Export the context for logs and JSON output.

        Unset fields are omitted. Keys in ``mask_keys`` are dropped both as
        fields and as additional_data entries.

        Example:
            >>> context = ErrorContextModel(request_id="r1", folder_path="/movies/Heat (1995)")
            >>> context.safe_dict()
            {'request_id': 'r1', 'additional_data': {}}
        """
        if mask_keys is None:
            mask_keys = SAFE_DICT_MASK_KEYS

        data: dict[str, Any] = {}
        for name in ("operation", "file_path", "batch_id", "request_id", "folder_path"):
            value = getattr(self, name)
            if value is not None and name not in mask_keys:
                data[name] = value

        data["additional_data"] = {
            key: value for key, value in (self.additional_data or {}).items() if key not in mask_keys
        }
        return data


ErrorContext = ErrorContextModel


class ReelMatchError(Exception):
    """Base exception class for all reelmatch errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize ReelMatchError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error

        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error with code, message,
            masked context, and original_error (if present)
        """
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(ReelMatchError):
    """Domain-specific errors.

    These errors occur when matching rules are violated or domain
    constraints are not met, e.g. an invalid concurrency limit.
    """


class InfrastructureError(ReelMatchError):
    """Infrastructure-related errors.

    These errors occur when interacting with external collaborators
    such as the catalog store, the persistence sink or the file system.
    """


class ApplicationError(ReelMatchError):
    """Application-level errors.

    These errors occur at the application layer, typically
    related to configuration or job lifecycle.
    """


class CliError(ApplicationError):
    """CLI-specific error with an exit code for command-line operations."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        command: str | None = None,
        exit_code: int = 1,
    ):
        super().__init__(code, message, context, original_error)
        self.command = command
        self.exit_code = exit_code


def create_validation_error(
    message: str,
    field: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> DomainError:
    """Create a validation error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"field": field} if field else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return DomainError(
        ErrorCode.VALIDATION_ERROR,
        message,
        context,
        original_error,
    )


def create_config_error(
    message: str,
    config_key: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> ApplicationError:
    """Create a configuration error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"config_key": config_key} if config_key else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return ApplicationError(
        ErrorCode.CONFIG_ERROR,
        message,
        context,
        original_error,
    )


def create_cli_error(
    message: str,
    command: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
    exit_code: int = 1,
) -> CliError:
    """Create a CLI error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"command": command} if command else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return CliError(
        ErrorCode.CLI_UNEXPECTED_ERROR,
        message,
        context,
        original_error,
        command,
        exit_code,
    )
