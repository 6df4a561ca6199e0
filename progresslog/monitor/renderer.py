"""TTY renderer — live progress bars with minimal repaint.

Each ``render()`` parses newly appended progress, formats a frame of
plain-text bar lines, and diffs it against the previous frame.  Only rows
that changed *and are still on screen* are rewritten, using relative
cursor-up/down motion.  Lines the new frame adds are printed normally and
scroll the terminal, so the scrollback buffer stays consistent.

Screen model
------------
The cursor rests on the bottom row, which is always left blank.  The rows
above it (``rows - 1`` of them) form the live window holding the tail of
the previous frame.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from progresslog.models.status import StepSnapshot

if TYPE_CHECKING:
    from progresslog.monitor.terminal import (
        ResizeWatcher,
        TerminalCapabilities,
        TerminalMetrics,
    )
    from progresslog.parser import ProgressParser

logger = logging.getLogger(__name__)

# Title column never narrower than this.
MIN_TITLE_WIDTH = 10


def _bar_units(progress: float | None, width: int) -> tuple[str, int]:
    fraction = progress or 0.0
    return "=" * int(fraction * width + 0.000001), int(fraction * 100 + 0.000001)


def _step_message(step: StepSnapshot) -> str:
    message = step.message or ""
    if step.pos is not None and step.max is not None:
        message = f"({step.pos:g}/{step.max}) {message}"
    return message


class TTYRenderer:
    """Renders a parser's status tree to a terminal, repainting diffs only.

    Parameters
    ----------
    parser:
        Source of status snapshots; ``render()`` calls ``parser.parse()``.
    terminal:
        Geometry, control sequences and output.
    resize_watcher:
        Optional; when it reports a change the cached geometry is dropped.
        Without one, geometry is measured once and reused.
    """

    def __init__(
        self,
        parser: ProgressParser,
        terminal: TerminalCapabilities,
        *,
        resize_watcher: ResizeWatcher | None = None,
    ) -> None:
        self.parser = parser
        self.terminal = terminal
        self._resize_watcher = resize_watcher
        self._metrics: TerminalMetrics | None = None
        self._prev_lines: list[str] | None = None

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def metrics(self) -> TerminalMetrics:
        if self._metrics is None:
            self._metrics = self.terminal.metrics()
        return self._metrics

    def clear_metrics(self) -> None:
        """Drop cached geometry; the next render measures again."""
        self._metrics = None

    # ------------------------------------------------------------------
    # Frame formatting (no terminal I/O)
    # ------------------------------------------------------------------

    def format(self, status: StepSnapshot, dims: dict[str, Any]) -> str:
        """Build a frame: one bar per sub-step, a blank line, the total bar.

        *dims* must hold ``cols``; ``message_margin`` and ``title_width``
        are filled in.  The frame ends with a newline.
        """
        cols = dims["cols"]
        dims["message_margin"] = int(cols * 0.5)
        out: list[str] = []
        if status.steps:
            title_width = MIN_TITLE_WIDTH
            for step in status.steps.values():
                title_width = max(title_width, len(step.title or ""))
            dims["title_width"] = title_width
            for step in status.ordered_steps():
                out.append(self._format_step_line(step, dims))
            out.append("\n")
        out.append(self._format_main_line(status, dims))
        return "".join(out)

    @staticmethod
    def _format_main_line(status: StepSnapshot, dims: dict[str, Any]) -> str:
        width = max(dims["cols"] - 8, 0)
        bar, percent = _bar_units(status.progress, width)
        return f"[{bar:<{width}}] {percent:3d}%\n"

    @staticmethod
    def _format_step_line(step: StepSnapshot, dims: dict[str, Any]) -> str:
        margin = dims["message_margin"]
        title_width = dims["title_width"]
        width = max(dims["cols"] - margin - title_width - 11, 0)
        bar, percent = _bar_units(step.progress, width)
        title = (step.title or "")[:title_width]
        message = _step_message(step)[:margin]
        return f"  {title:<{title_width}} [{bar:<{width}}] {percent:3d}% {message}\n"

    # ------------------------------------------------------------------
    # Diffed repaint
    # ------------------------------------------------------------------

    def render(self) -> str:
        """Parse, format and repaint.  Returns the text written."""
        if self._resize_watcher is not None and self._resize_watcher.poll():
            self.clear_metrics()
        metrics = self.metrics
        cols, rows = metrics.cols, metrics.rows

        frame = self.format(self.parser.parse(), {"cols": cols, "rows": rows})
        output = self.diff(frame, rows)
        self.terminal.write(output)
        return output

    def diff(self, frame: str, rows: int) -> str:
        """Compute the terminal output turning the last frame into *frame*.

        Stores *frame* as the new previous frame.
        """
        prev = self._prev_lines if self._prev_lines is not None else []
        nxt = frame.split("\n")
        window = rows - 1
        if len(prev) > window:
            first_vis_line = len(prev) - window
            starting_row = 0
        else:
            first_vis_line = 0
            starting_row = window - len(prev)

        up, down = self.terminal.up, self.terminal.down
        clear_eol = self.terminal.clear_eol
        out: list[str] = []
        cursor_row = window

        def seek(dest_row: int) -> None:
            nonlocal cursor_row
            if cursor_row > dest_row:
                logger.debug("up %d", cursor_row - dest_row)
                out.append(up * (cursor_row - dest_row))
            elif dest_row > cursor_row:
                logger.debug("down %d", dest_row - cursor_row)
                out.append(down * (dest_row - cursor_row))
            cursor_row = dest_row

        i = first_vis_line
        while i < len(prev):
            line = nxt[i] if i < len(nxt) else ""
            if prev[i] != line:
                seek(i - first_vis_line + starting_row)
                logger.debug("print line %d: %s", i, line)
                out.append(clear_eol + line + "\n")
                cursor_row += 1
            i += 1
        seek(window)
        # New rows scroll the screen like ordinary output.
        while i < len(nxt):
            logger.debug("print line %d (wrap bottom): %s", i, nxt[i])
            out.append(nxt[i] + "\n")
            i += 1

        self._prev_lines = nxt
        return "".join(out)

    def reset(self) -> None:
        """Forget the previous frame; the next render prints in full."""
        self._prev_lines = None


def run_live(
    renderer: TTYRenderer,
    *,
    interval: float,
    sleep: Callable[[float], None],
    stop_when_complete: bool = True,
) -> StepSnapshot:
    """Render repeatedly until the root completes or Ctrl+C is pressed.

    Returns the last snapshot observed.
    """
    try:
        while True:
            renderer.render()
            status = renderer.parser.status
            if stop_when_complete and status.is_complete:
                return status
            sleep(interval)
    except KeyboardInterrupt:
        renderer.render()
        return renderer.parser.status
