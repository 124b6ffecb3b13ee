"""
reelmatch Typer CLI Application

Commands for loading a catalog, resolving references one at a time or in
batches, and reviewing ambiguous outcomes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Callable, Optional

import typer

from reelmatch.cli.catalog_handler import handle_import_catalog
from reelmatch.cli.common.context import CliContext, LogLevel, get_cli_context, set_cli_context
from reelmatch.cli.common.error_handler import handle_cli_error
from reelmatch.cli.common.options import (
    database_option,
    json_output_option,
    log_level_option,
    verbose_option,
    version_option,
)
from reelmatch.cli.common.runtime import configure_logging
from reelmatch.cli.match_handler import handle_match_command, handle_resolve_command
from reelmatch.cli.review_handler import handle_pending_command, handle_review_command
from reelmatch.services.library_store import ReviewDecision
from reelmatch.shared.constants import (
    Application,
    CLICommands,
    CLIDefaults,
    CLIHelp,
    CLIOptions,
)

__version__ = Application.VERSION


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=__version__))
        raise typer.Exit


def main_callback(
    verbose: int,
    log_level: Optional[LogLevel],
    json_output: bool,
    version: bool,
) -> None:
    """
    Process the common options.

    Called before any command; stores the parsed options in the CLI
    context and configures logging.
    """
    if version:
        version_callback(value=True)

    context = CliContext(
        verbose=verbose,
        log_level=log_level,
        json_output=json_output,
    )
    set_cli_context(context)
    configure_logging(context)


app = typer.Typer(
    name=CLIHelp.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    add_completion=False,
    rich_markup_mode=CLIHelp.APP_STYLE,
    no_args_is_help=True,
    invoke_without_command=True,
)


@app.callback()
def main(
    verbose: Annotated[int, verbose_option] = 0,
    log_level: Annotated[Optional[LogLevel], log_level_option] = None,
    json_output: Annotated[bool, json_output_option] = False,
    version: Annotated[bool, version_option] = False,
) -> None:
    """Main CLI callback with error handling."""
    try:
        main_callback(verbose, log_level, json_output, version)
    except typer.Exit:
        raise
    except Exception as e:
        exit_code = handle_cli_error(e, "main-callback", json_output=json_output)
        raise typer.Exit(exit_code) from e


def _run(command: str, handler: Callable[[], int]) -> None:
    """Run a handler, mapping errors and Ctrl-C to exit codes."""
    try:
        exit_code = handler()
    except (Exception, KeyboardInterrupt) as e:  # noqa: BLE001
        exit_code = handle_cli_error(e, command, json_output=get_cli_context().json_output)
    if exit_code != CLIDefaults.EXIT_SUCCESS:
        raise typer.Exit(exit_code)


@app.command(CLICommands.IMPORT_CATALOG)
def import_catalog_command(
    file: Path = typer.Argument(
        ...,
        help=CLIHelp.IMPORT_FILE_HELP,
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    database: Annotated[Optional[Path], database_option] = None,
) -> None:
    """
    Import catalog entries from a JSON file.

    Each entry needs an ``id`` and may carry ``folder_path``,
    ``parsed_title``, ``parsed_year`` and ``external_id``. Existing entries
    with the same id are replaced.

    Examples:
        reelmatch import-catalog catalog.json --db data/reelmatch.db
    """
    _run(CLICommands.IMPORT_CATALOG, lambda: handle_import_catalog(file, database))


@app.command(CLICommands.RESOLVE)
def resolve_command(
    title: str = typer.Argument(..., help=CLIHelp.RESOLVE_TITLE_HELP),
    year: Optional[int] = typer.Option(None, CLIOptions.YEAR, help=CLIHelp.YEAR_HELP),
    external_id: Optional[str] = typer.Option(
        None,
        CLIOptions.EXTERNAL_ID,
        help=CLIHelp.EXTERNAL_ID_HELP,
    ),
    path_hint: Optional[str] = typer.Option(None, CLIOptions.PATH, help=CLIHelp.PATH_HELP),
    database: Annotated[Optional[Path], database_option] = None,
) -> None:
    """
    Resolve a single reference against the catalog.

    Examples:
        reelmatch resolve "Inception" --year 2010
        reelmatch --json resolve "Halloween"
    """
    _run(
        CLICommands.RESOLVE,
        lambda: handle_resolve_command(title, year, external_id, path_hint, database),
    )


@app.command(CLICommands.MATCH)
def match_command(
    file: Path = typer.Argument(
        ...,
        help=CLIHelp.MATCH_FILE_HELP,
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    concurrency: Optional[int] = typer.Option(
        None,
        CLIOptions.CONCURRENCY,
        min=1,
        help=CLIHelp.CONCURRENCY_HELP,
    ),
    batch_id: Optional[str] = typer.Option(None, CLIOptions.BATCH_ID, help=CLIHelp.BATCH_ID_HELP),
    database: Annotated[Optional[Path], database_option] = None,
) -> None:
    """
    Resolve a batch of references with a concurrent worker pool.

    Every outcome is written to the outcome log. Press Ctrl-C to cancel;
    requests already in progress still complete.

    Examples:
        reelmatch match requests.json --concurrency 8
    """
    _run(CLICommands.MATCH, lambda: handle_match_command(file, concurrency, batch_id, database))


@app.command(CLICommands.PENDING)
def pending_command(
    limit: int = typer.Option(
        CLIDefaults.PENDING_LIMIT,
        CLIOptions.LIMIT,
        min=1,
        help=CLIHelp.LIMIT_HELP,
    ),
    include_all: bool = typer.Option(False, CLIOptions.ALL, help=CLIHelp.ALL_HELP),
    database: Annotated[Optional[Path], database_option] = None,
) -> None:
    """List outcomes awaiting review."""
    _run(CLICommands.PENDING, lambda: handle_pending_command(limit, include_all, database))


@app.command(CLICommands.REVIEW)
def review_command(
    outcome_id: int = typer.Argument(..., help=CLIHelp.REVIEW_ID_HELP),
    decision: ReviewDecision = typer.Argument(..., help=CLIHelp.REVIEW_DECISION_HELP),
    database: Annotated[Optional[Path], database_option] = None,
) -> None:
    """Confirm or reject a logged outcome."""
    _run(CLICommands.REVIEW, lambda: handle_review_command(outcome_id, decision, database))


if __name__ == "__main__":
    app()
