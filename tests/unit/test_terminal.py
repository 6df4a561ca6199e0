"""Unit tests for the Rich-backed terminal capabilities."""

from __future__ import annotations

import io

import pytest
from pydantic import ValidationError
from rich.console import Console

from progresslog.monitor.terminal import (
    ResizeWatcher,
    RichTerminal,
    TerminalCapabilities,
    TerminalMetrics,
    TerminalUnavailableError,
)


class TestRichTerminal:
    def test_control_sequences(self):
        assert RichTerminal.up == "\x1b[1A"
        assert RichTerminal.down == "\x1b[1B"
        assert RichTerminal.clear_eol == "\x1b[0K"

    def test_metrics_from_console(self):
        console = Console(file=io.StringIO(), force_terminal=True, width=100, height=30)
        assert RichTerminal(console).metrics() == TerminalMetrics(cols=100, rows=30)

    def test_not_a_terminal(self):
        console = Console(file=io.StringIO(), force_terminal=False)
        with pytest.raises(TerminalUnavailableError):
            RichTerminal(console).metrics()

    def test_write_goes_to_console_file(self):
        buf = io.StringIO()
        console = Console(file=buf, force_terminal=True, width=80, height=24)
        RichTerminal(console).write("\x1b[1Ahello\n")
        assert buf.getvalue() == "\x1b[1Ahello\n"

    def test_satisfies_protocol(self):
        assert isinstance(RichTerminal(Console(file=io.StringIO())), TerminalCapabilities)


class TestTerminalMetrics:
    def test_rows_must_leave_a_window(self):
        with pytest.raises(ValidationError):
            TerminalMetrics(cols=80, rows=1)


class TestResizeWatcher:
    def test_reports_change_once(self):
        console = Console(file=io.StringIO(), force_terminal=True, width=80, height=24)
        watcher = ResizeWatcher(console)
        assert watcher.poll() is False
        console.width = 120
        assert watcher.poll() is True
        assert watcher.poll() is False
