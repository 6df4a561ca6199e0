"""End-to-end: writers append to a shared log, a parser follows it, a
renderer repaints it.

Exercises ProgressWriter, the stream sink, ProgressParser and TTYRenderer
together over a real file, the way a job and its monitor share a log.
"""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from progresslog.monitor.renderer import TTYRenderer
from progresslog.monitor.terminal import RichTerminal
from progresslog.parser import ProgressParser
from progresslog.writer import ProgressWriter


class TestWriterParserRoundTrip:
    """Lines written by writers parse back into the expected tree."""

    def test_nested_job(self, log_path: Path):
        with log_path.open("a", encoding="utf-8") as out:
            job = ProgressWriter(out, environ={})
            fetch = job.declare_substep("fetch", 0.25, "Fetch")
            build = job.declare_substep("build", 0.75, "Build")
            fetch.report(1, message="done")
            build.report(3, 6, "linking")
            build.report_data({"warnings": 2})

        with log_path.open("rb") as fh:
            status = ProgressParser(fh).parse()

        assert [s.title for s in status.ordered_steps()] == ["Fetch", "Build"]
        assert status.steps["fetch"].message == "done"
        assert status.steps["build"].pos == 3
        assert status.steps["build"].max == 6
        assert status.steps["build"].data == {"warnings": 2}
        assert status.progress == pytest.approx(0.25 + 0.75 * 0.5)

    def test_child_process_reports_as_substep(self, log_path: Path):
        with log_path.open("a", encoding="utf-8") as out:
            parent = ProgressWriter(out, environ={})
            parent.declare_substep("child", 1, "Child job")
            # A child process sees PROGRESS_STEP_ID=child in its environment.
            child = ProgressWriter(out, environ={"PROGRESS_STEP_ID": "child"})
            child.report(0.4)

        with log_path.open("rb") as fh:
            status = ProgressParser(fh).parse()
        assert status.steps["child"].progress == pytest.approx(0.4)
        assert status.progress == pytest.approx(0.4)

    def test_interleaved_log_output_ignored(self, log_path: Path):
        with log_path.open("a", encoding="utf-8") as out:
            writer = ProgressWriter(out, environ={})
            out.write("INFO unrelated message\n")
            writer.report(0.3)
            out.write("DEBUG progress: is a word here\n")
        with log_path.open("rb") as fh:
            assert ProgressParser(fh).parse().progress == pytest.approx(0.3)


class TestLiveFollow:
    """A renderer following a log that is still being written."""

    def test_follow_growing_log(self, log_path: Path):
        screen = io.StringIO()
        console = Console(file=screen, force_terminal=True, width=60, height=20)

        with log_path.open("a", encoding="utf-8") as out, log_path.open("rb") as fh:
            writer = ProgressWriter(out, environ={}, squelch=0.1)
            step = writer.declare_substep("work", 1, "Work")
            renderer = TTYRenderer(ProgressParser(fh), RichTerminal(console))

            first = renderer.render()
            assert "Work" in first
            assert RichTerminal.up not in first

            step.report(5, 10)
            second = renderer.render()
            assert second.startswith(RichTerminal.up)
            assert " 50%" in second

            # Torn write: the parser must not see half a line.
            out.write("progress: work 9/1")
            out.flush()
            assert renderer.render() == ""
            out.write("0\n")
            out.flush()
            assert " 90%" in renderer.render()

        assert renderer.parser.status.progress == pytest.approx(0.9)
