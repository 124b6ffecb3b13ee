"""Runtime helpers shared by the command handlers.

Logging setup, store opening and JSON input loading.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from reelmatch.cli.common.context import CliContext
from reelmatch.config.loader import get_config
from reelmatch.config.models import Settings
from reelmatch.services.library_store import SQLiteLibraryStore
from reelmatch.shared.constants import Application
from reelmatch.shared.errors import (
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    create_validation_error,
)
from reelmatch.shared.logging import setup_structured_logger


def configure_logging(context: CliContext, settings: Settings | None = None) -> logging.Logger:
    """Configure the package logger from the CLI context and settings."""
    settings = settings or get_config()
    default_level = "DEBUG" if settings.app.debug else settings.logging.level
    return setup_structured_logger(
        Application.NAME,
        level=context.get_effective_log_level(default_level),
        log_file=settings.logging.file,
        use_rich_console=not context.json_output,
        console_output=settings.logging.console_output,
        max_bytes=settings.logging.max_bytes,
        backup_count=settings.logging.backup_count,
    )


def open_store(database: Path | None, settings: Settings | None = None) -> SQLiteLibraryStore:
    """Open the library store at --db or the configured database path."""
    settings = settings or get_config()
    return SQLiteLibraryStore(database or Path(settings.storage.database_path))


def load_json_list(path: Path, operation: str) -> list[dict[str, Any]]:
    """Read a JSON file holding a list of objects.

    A top-level object with an ``items`` list is accepted as well.

    Raises:
        InfrastructureError: If the file cannot be read or is not JSON
        DomainError: If the document is not a list of objects
    """
    try:
        with open(path, encoding="utf-8") as f:
            document = json.load(f)
    except FileNotFoundError as e:
        raise InfrastructureError(
            code=ErrorCode.FILE_NOT_FOUND,
            message=f"File not found: {path}",
            context=ErrorContext(file_path=str(path), operation=operation),
            original_error=e,
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise InfrastructureError(
            code=ErrorCode.FILE_READ_ERROR,
            message=f"Failed to read {path}: {e}",
            context=ErrorContext(file_path=str(path), operation=operation),
            original_error=e,
        ) from e
    except json.JSONDecodeError as e:
        raise InfrastructureError(
            code=ErrorCode.PARSING_ERROR,
            message=f"Invalid JSON in {path}: {e.msg} (line {e.lineno})",
            context=ErrorContext(file_path=str(path), operation=operation),
            original_error=e,
        ) from e

    if isinstance(document, dict) and isinstance(document.get("items"), list):
        document = document["items"]

    if not isinstance(document, list) or not all(isinstance(item, dict) for item in document):
        raise create_validation_error(
            f"{path} must contain a JSON list of objects",
            field="items",
            operation=operation,
        )

    return document
