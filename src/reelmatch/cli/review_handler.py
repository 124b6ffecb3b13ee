"""Pending and review command handlers."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from reelmatch.cli.common.context import get_cli_context
from reelmatch.cli.common.error_handler import format_json_output
from reelmatch.cli.common.runtime import open_store
from reelmatch.services.library_store import ReviewDecision
from reelmatch.shared.constants import CLICommands, CLIDefaults
from reelmatch.shared.errors import CliError, ErrorCode, ErrorContext

logger = logging.getLogger(__name__)


def handle_pending_command(limit: int, include_all: bool, database: Path | None) -> int:
    """List unreviewed outcomes (ambiguous only unless include_all)."""
    context = get_cli_context()

    with open_store(database) as store:
        if include_all:
            outcomes = store.get_pending_outcomes(limit)
        else:
            outcomes = store.get_ambiguous_outcomes(limit)
        counts = store.get_outcome_counts()

    if context.json_output:
        typer.echo(
            format_json_output(
                CLICommands.PENDING,
                success=True,
                data={
                    "pending": counts.pending,
                    "total": counts.total,
                    "outcomes": [outcome.to_dict() for outcome in outcomes],
                },
            ),
        )
        return CLIDefaults.EXIT_SUCCESS

    console = Console()
    table = Table(title=f"Pending review ({counts.pending} ambiguous of {counts.total} logged)")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Title")
    table.add_column("Year", justify="right")
    table.add_column("Method")
    table.add_column("Confidence", justify="right")
    table.add_column("Entry", justify="right")
    table.add_column("Reason")

    for outcome in outcomes:
        table.add_row(
            str(outcome.id),
            outcome.input_title,
            str(outcome.input_year or ""),
            outcome.method or "",
            f"{outcome.confidence:.2f}" if outcome.confidence is not None else "",
            str(outcome.matched_entry_id or ""),
            outcome.reason or "",
        )

    console.print(table)
    return CLIDefaults.EXIT_SUCCESS


def handle_review_command(outcome_id: int, decision: ReviewDecision, database: Path | None) -> int:
    """Confirm or reject one logged outcome."""
    context = get_cli_context()

    with open_store(database) as store:
        updated = store.review_outcome(outcome_id, decision)

    if not updated:
        raise CliError(
            ErrorCode.OUTCOME_NOT_FOUND,
            f"No match outcome with id {outcome_id}",
            ErrorContext(
                operation="review_outcome",
                additional_data={"outcome_id": outcome_id},
            ),
            command=CLICommands.REVIEW,
            exit_code=CLIDefaults.EXIT_ERROR,
        )

    if context.json_output:
        typer.echo(
            format_json_output(
                CLICommands.REVIEW,
                success=True,
                data={"id": outcome_id, "decision": decision.value, "reviewed": decision.status},
            ),
        )
    else:
        Console().print(f"Outcome {outcome_id} marked [bold]{decision.value}[/bold]")

    return CLIDefaults.EXIT_SUCCESS
