"""
Reusable Typer Options Module

Option definitions shared by the main callback and the commands.
"""

from __future__ import annotations

import typer

from reelmatch.shared.constants import CLIHelp, CLIOptions

# Verbose option - count-based for multiple -v flags
verbose_option = typer.Option(
    "--verbose",
    "-v",
    count=True,
    help="Enable verbose output (equivalent to --log-level DEBUG).",
)


log_level_option = typer.Option(
    "--log-level",
    case_sensitive=False,
    help="Set the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: logging.level from the configuration.",
)


json_output_option = typer.Option(
    "--json",
    help="Enable machine-readable JSON output instead of human-readable format.",
)


version_option = typer.Option(
    "--version",
    "-V",
    help="Show version information and exit.",
    is_eager=True,
)


database_option = typer.Option(
    CLIOptions.DATABASE,
    help=CLIHelp.DATABASE_HELP,
    dir_okay=False,
)
