"""Shared test fixtures for Progresslog."""

from __future__ import annotations

import io
from collections.abc import Callable
from pathlib import Path

import pytest

from progresslog.monitor.terminal import TerminalMetrics
from progresslog.parser import ProgressParser
from progresslog.writer import ProgressWriter


class RecordingTerminal:
    """Terminal fake with readable control sequences and captured output."""

    up = "<UP>"
    down = "<DOWN>"
    clear_eol = "<CE>"

    def __init__(self, cols: int = 80, rows: int = 24) -> None:
        self.cols = cols
        self.rows = rows
        self.writes: list[str] = []
        self.metrics_calls = 0

    def metrics(self) -> TerminalMetrics:
        self.metrics_calls += 1
        return TerminalMetrics(cols=self.cols, rows=self.rows)

    def write(self, text: str) -> None:
        self.writes.append(text)


@pytest.fixture
def lines() -> list[str]:
    """Collects lines emitted through a callback destination."""
    return []


@pytest.fixture
def make_writer(lines: list[str]) -> Callable[..., ProgressWriter]:
    """Factory fixture: a writer whose lines land in ``lines``."""

    def _factory(**kwargs) -> ProgressWriter:
        kwargs.setdefault("environ", {})
        return ProgressWriter(lines.append, **kwargs)

    return _factory


@pytest.fixture
def stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    """An empty progress log file."""
    path = tmp_path / "progress.log"
    path.write_bytes(b"")
    return path


@pytest.fixture
def parse_text() -> Callable[[str], ProgressParser]:
    """Factory fixture: parse an in-memory string, return the parser."""

    def _factory(text: str, **kwargs) -> ProgressParser:
        parser = ProgressParser(text, **kwargs)
        parser.parse()
        return parser

    return _factory


@pytest.fixture
def terminal() -> RecordingTerminal:
    return RecordingTerminal()
