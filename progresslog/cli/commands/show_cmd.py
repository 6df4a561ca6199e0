"""``progresslog show FILE`` — print the current status of a progress log."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from progresslog.monitor.table import StatusTableRenderer
from progresslog.parser import PayloadDecodeError, ProgressParser, ProgressSourceError

console = Console()


def show_cmd(
    log_file: Path = typer.Argument(..., help="File containing progress lines."),
) -> None:
    """Parse a progress log once and display its status tree."""
    if not log_file.exists():
        console.print(f"[bold red]Progress log not found:[/bold red] {log_file}")
        raise typer.Exit(code=1)

    try:
        with log_file.open("rb") as fh:
            status = ProgressParser(fh).parse()
    except (ProgressSourceError, PayloadDecodeError) as exc:
        console.print(f"[bold red]Progress log unreadable:[/bold red] {exc}")
        raise typer.Exit(code=1)

    StatusTableRenderer(console=console).print_snapshot(status, title=log_file.name)
