"""``progresslog watch FILE`` — live progress bars for a growing log.

Polls the file, parsing only newly appended lines, and repaints changed
bars in place.  Exits when the overall progress reaches 100% (unless
``--no-exit-on-complete``) or on Ctrl+C.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from progresslog.config import ProgressSettings
from progresslog.monitor.renderer import TTYRenderer, run_live
from progresslog.monitor.terminal import (
    ResizeWatcher,
    RichTerminal,
    TerminalUnavailableError,
)
from progresslog.parser import PayloadDecodeError, ProgressParser, ProgressSourceError

console = Console()


def watch_cmd(
    log_file: Path = typer.Argument(..., help="File containing progress lines."),
    refresh_hz: Optional[float] = typer.Option(
        None,
        "--refresh",
        "-r",
        help="Refresh rate in Hz (default: $PROGRESS_REFRESH_HZ or 2).",
    ),
    exit_on_complete: bool = typer.Option(
        True,
        "--exit-on-complete/--no-exit-on-complete",
        help="Stop once overall progress reaches 100%.",
    ),
) -> None:
    """Follow a progress log with live, minimal-repaint progress bars."""
    if not log_file.exists():
        console.print(f"[bold red]Progress log not found:[/bold red] {log_file}")
        raise typer.Exit(code=1)

    hz = refresh_hz if refresh_hz is not None else ProgressSettings().refresh_hz
    interval = 1.0 / max(hz, 0.1)

    with log_file.open("rb") as fh:
        renderer = TTYRenderer(
            ProgressParser(fh),
            RichTerminal(console),
            resize_watcher=ResizeWatcher(console),
        )
        try:
            run_live(
                renderer,
                interval=interval,
                sleep=time.sleep,
                stop_when_complete=exit_on_complete,
            )
        except TerminalUnavailableError as exc:
            console.print(f"[bold red]Cannot draw progress:[/bold red] {exc}")
            raise typer.Exit(code=1)
        except (ProgressSourceError, PayloadDecodeError) as exc:
            console.print(f"[bold red]Progress log unreadable:[/bold red] {exc}")
            raise typer.Exit(code=1)
