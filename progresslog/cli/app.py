"""Main Typer application — imports and registers all CLI commands.

Entry point: ``progresslog`` (configured via pyproject.toml scripts).

Commands: report, declare, data, show, watch.
"""

from __future__ import annotations

import logging

import typer

from progresslog.cli.commands.emit import data_cmd, declare_cmd, report_cmd
from progresslog.cli.commands.show_cmd import show_cmd
from progresslog.cli.commands.watch_cmd import watch_cmd
from progresslog.config import ProgressSettings

app = typer.Typer(
    name="progresslog",
    help="Progresslog: write, parse and display hierarchical progress logs.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def configure_logging() -> None:
    """Configure logging from PROGRESS_LOG_LEVEL before any command runs."""
    level = ProgressSettings().log_level.upper()
    logging.basicConfig(level=getattr(logging, level, logging.WARNING))


# Register subcommands
app.command(name="report", help="Write a progress line to stdout.")(report_cmd)
app.command(name="declare", help="Write a sub-step declaration to stdout.")(declare_cmd)
app.command(name="data", help="Write a structured-data line to stdout.")(data_cmd)
app.command(name="show", help="Show the status of a progress log.")(show_cmd)
app.command(name="watch", help="Follow a progress log with live bars.")(watch_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
