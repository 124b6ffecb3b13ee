"""Import-catalog command handler."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console

from reelmatch.cli.common.context import get_cli_context
from reelmatch.cli.common.error_handler import format_json_output
from reelmatch.cli.common.runtime import load_json_list, open_store
from reelmatch.core.disambiguation.models import CatalogEntry
from reelmatch.shared.constants import CLICommands, CLIDefaults
from reelmatch.shared.errors import create_validation_error

logger = logging.getLogger(__name__)


def handle_import_catalog(file: Path, database: Path | None) -> int:
    """Load catalog entries from a JSON file into the library store.

    Returns:
        Exit code
    """
    context = get_cli_context()
    operation = "import_catalog"
    raw_entries = load_json_list(file, operation)

    entries: list[CatalogEntry] = []
    for index, raw in enumerate(raw_entries):
        try:
            entries.append(CatalogEntry.from_dict(raw))
        except (KeyError, TypeError, ValueError) as e:
            raise create_validation_error(
                f"Invalid catalog entry at index {index}: {e}",
                field="id",
                operation=operation,
                original_error=e,
            ) from e

    with open_store(database) as store:
        written = store.upsert_entries(entries)
        snapshot_size = len(store.load_catalog_snapshot())

    if context.json_output:
        typer.echo(
            format_json_output(
                CLICommands.IMPORT_CATALOG,
                success=True,
                data={"imported": written, "catalog_size": snapshot_size},
            ),
        )
    else:
        Console().print(
            f"[green]Imported {written} entries[/green] (catalog now holds {snapshot_size})",
        )

    return CLIDefaults.EXIT_SUCCESS
