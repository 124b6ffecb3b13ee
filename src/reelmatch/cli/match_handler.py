"""Resolve and match command handlers.

``resolve`` runs the engine once in the foreground. ``match`` submits a
batch to the job manager and follows it through the event channel,
driving a rich progress bar from ``result`` events.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import typer
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn
from rich.table import Table

from reelmatch.cli.common.context import get_cli_context
from reelmatch.cli.common.error_handler import format_json_output
from reelmatch.cli.common.runtime import load_json_list, open_store
from reelmatch.config.loader import get_config
from reelmatch.core.disambiguation.engine import DisambiguationEngine
from reelmatch.core.disambiguation.jobs import DisambiguationJobManager
from reelmatch.core.disambiguation.models import BatchSummary, MatchRequest, MatchResult
from reelmatch.core.events.channel import ChannelEvent, EventChannel
from reelmatch.shared.constants import CLICommands, CLIDefaults, EventNames
from reelmatch.shared.errors import create_validation_error

logger = logging.getLogger(__name__)

_WAIT_INTERVAL_SECONDS = 0.2


def handle_resolve_command(
    title: str,
    year: int | None,
    external_id: str | None,
    path_hint: str | None,
    database: Path | None,
) -> int:
    """Resolve a single reference against the stored catalog."""
    context = get_cli_context()
    settings = get_config()
    request = MatchRequest(
        id="cli",
        title=title,
        year=year,
        external_id=external_id,
        folder_path_hint=path_hint,
    )

    with open_store(database, settings) as store:
        engine = DisambiguationEngine(store.load_catalog_snapshot(), settings=settings.matching)

    result = engine.resolve(request)

    if context.json_output:
        typer.echo(format_json_output(CLICommands.RESOLVE, success=True, data=result.to_dict()))
    else:
        _print_results(Console(), [result])

    return CLIDefaults.EXIT_SUCCESS


def handle_match_command(
    file: Path,
    concurrency: int | None,
    batch_id: str | None,
    database: Path | None,
) -> int:
    """Run a batch file through the queue runner.

    Ctrl-C requests cooperative cancellation; requests already being
    resolved finish and are persisted.
    """
    context = get_cli_context()
    settings = get_config()
    operation = "match_batch"
    requests = _load_requests(file, operation)

    channel = EventChannel(
        CLICommands.MATCH,
        replay_limit=settings.events.replay_limit,
        grace_period=settings.events.grace_period_seconds,
    )
    results: list[MatchResult] = []
    terminal: list[ChannelEvent] = []
    results_lock = threading.Lock()

    console = Console(stderr=context.json_output)
    progress = Progress(
        TextColumn("[bold blue]Matching"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        disable=context.json_output,
    )
    task_id = progress.add_task("match", total=len(requests))

    def on_event(event: ChannelEvent) -> None:
        with results_lock:
            if event.event == EventNames.RESULT:
                results.append(event.data)
                progress.advance(task_id)
            else:
                terminal.append(event)

    interrupted = False
    with open_store(database, settings) as store:
        manager = DisambiguationJobManager(channel, store, store, settings=settings)
        unsubscribe = channel.subscribe(on_event)
        try:
            with progress:
                manager.submit(requests, concurrency=concurrency, batch_id=batch_id)
                try:
                    while manager.running:
                        manager.wait(timeout=_WAIT_INTERVAL_SECONDS)
                except KeyboardInterrupt:
                    interrupted = True
                    manager.cancel()
                    manager.wait()
            summary = manager.wait()
        finally:
            unsubscribe()
            channel.close()

    if manager.last_error is not None:
        raise manager.last_error

    return _report_batch(console, context.json_output, summary, results, terminal, interrupted=interrupted)


def _load_requests(file: Path, operation: str) -> list[MatchRequest]:
    requests: list[MatchRequest] = []
    for index, raw in enumerate(load_json_list(file, operation)):
        try:
            requests.append(MatchRequest.from_dict(raw))
        except (TypeError, ValueError) as e:
            raise create_validation_error(
                f"Invalid match request at index {index}: {e}",
                field="id",
                operation=operation,
                original_error=e,
            ) from e

    if not requests:
        raise create_validation_error(
            f"{file} contains no match requests",
            field="items",
            operation=operation,
        )
    return requests


def _report_batch(  # pylint: disable=too-many-arguments
    console: Console,
    json_output: bool,
    summary: BatchSummary | None,
    results: list[MatchResult],
    terminal: list[ChannelEvent],
    *,
    interrupted: bool,
) -> int:
    exit_code = CLIDefaults.EXIT_INTERRUPTED if interrupted else CLIDefaults.EXIT_SUCCESS

    if json_output:
        typer.echo(
            format_json_output(
                CLICommands.MATCH,
                success=not interrupted,
                data={
                    "summary": summary.to_dict() if summary else None,
                    "events": [event.event for event in terminal],
                    "results": [result.to_dict() for result in results],
                },
            ),
        )
        return exit_code

    _print_results(console, results)
    if summary is None:
        return exit_code

    if summary.cancelled:
        console.print(
            f"[yellow]Batch cancelled[/yellow]: {summary.total} processed, "
            f"{summary.ambiguous} ambiguous",
        )
    else:
        console.print(
            f"[green]Batch {summary.batch_id} complete[/green]: {summary.total} processed, "
            f"{summary.ambiguous} ambiguous",
        )
    if summary.persist_failures:
        console.print(f"[red]{summary.persist_failures} outcomes could not be saved[/red]")
    return exit_code


def _print_results(console: Console, results: list[MatchResult]) -> None:
    table = Table(title="Match results")
    table.add_column("Request", style="cyan")
    table.add_column("Method")
    table.add_column("Confidence", justify="right")
    table.add_column("Match")
    table.add_column("Ambiguous")

    for result in results:
        match_label = "-"
        if result.match is not None:
            year = f" ({result.match.parsed_year})" if result.match.parsed_year else ""
            match_label = f"#{result.match.entry_id} {result.match.parsed_title or result.match.folder_path}{year}"
        table.add_row(
            result.request_id,
            result.method.value,
            f"{result.confidence:.2f}",
            match_label,
            result.ambiguous_reason.value if result.ambiguous_reason else "no",
        )

    console.print(table)
