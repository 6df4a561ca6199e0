"""``progresslog report|declare|data`` — write protocol lines to stdout.

Lets shell scripts take part in the protocol.  The step id defaults to
``PROGRESS_STEP_ID``, so a script launched by a parent job reports as the
sub-step the parent declared for it.
"""

from __future__ import annotations

import json
import sys
from typing import Optional

import typer
from rich.console import Console

from progresslog.config import ProgressSettings
from progresslog.sinks import SinkError
from progresslog.writer import InvalidArgumentError, ProgressWriter

err_console = Console(stderr=True)


def _writer(step_id: Optional[str]) -> ProgressWriter:
    settings = ProgressSettings()
    if step_id is not None:
        settings = settings.model_copy(update={"step_id": step_id})
    return ProgressWriter.from_settings(sys.stdout, settings)


def report_cmd(
    current: float = typer.Argument(..., help="Units of work done."),
    maximum: float = typer.Argument(1.0, help="Total units of work."),
    message: Optional[str] = typer.Option(
        None, "--message", "-m", help="Status message to attach."
    ),
    step_id: Optional[str] = typer.Option(
        None, "--step-id", "-s", help="Dotted step id (default: $PROGRESS_STEP_ID)."
    ),
) -> None:
    """Write one progress line."""
    try:
        _writer(step_id).report(current, maximum, message)
    except (InvalidArgumentError, SinkError) as exc:
        err_console.print(f"[bold red]Cannot report progress:[/bold red] {exc}")
        raise typer.Exit(code=1)


def declare_cmd(
    substep: str = typer.Argument(..., help="Id of the new sub-step."),
    title: str = typer.Argument(..., help="Display title of the sub-step."),
    contribution: Optional[float] = typer.Option(
        None,
        "--contribution",
        "-c",
        help="Share (0-1) of the parent's progress this step accounts for.",
    ),
    step_id: Optional[str] = typer.Option(
        None, "--step-id", "-s", help="Parent step id (default: $PROGRESS_STEP_ID)."
    ),
) -> None:
    """Write a sub-step declaration line."""
    try:
        _writer(step_id).declare_substep(substep, contribution, title)
    except (InvalidArgumentError, SinkError) as exc:
        err_console.print(f"[bold red]Cannot declare sub-step:[/bold red] {exc}")
        raise typer.Exit(code=1)


def data_cmd(
    payload: str = typer.Argument(..., help="JSON object to attach to the step."),
    step_id: Optional[str] = typer.Option(
        None, "--step-id", "-s", help="Dotted step id (default: $PROGRESS_STEP_ID)."
    ),
) -> None:
    """Write a structured-data line."""
    try:
        decoded = json.loads(payload)
        _writer(step_id).report_data(decoded)
    except json.JSONDecodeError as exc:
        err_console.print(f"[bold red]Invalid JSON:[/bold red] {exc}")
        raise typer.Exit(code=1)
    except (InvalidArgumentError, SinkError) as exc:
        err_console.print(f"[bold red]Cannot write data:[/bold red] {exc}")
        raise typer.Exit(code=1)
