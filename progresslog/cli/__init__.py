"""Progresslog CLI — Typer-based command-line interface.

Provides the ``progresslog`` command with subcommands for emitting protocol
lines from shell scripts and for displaying a progress log, either once or
live.

All human-facing output uses Rich for formatted terminal display.
"""
