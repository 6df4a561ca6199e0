"""Terminal capabilities used by the TTY renderer.

The renderer needs three things from a terminal: its geometry, the control
sequences for one-row cursor motion and clear-to-end-of-line, and a place
to write.  ``TerminalCapabilities`` captures exactly that, so tests can
substitute a recording fake.  ``RichTerminal`` is the real implementation
on top of a ``rich.console.Console``.

Window resizes are noticed by polling (``ResizeWatcher``) from the caller's
loop rather than through a signal handler.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field
from rich.console import Console
from rich.control import Control
from rich.segment import ControlType


class TerminalUnavailableError(RuntimeError):
    """Raised when terminal geometry cannot be determined."""


class TerminalMetrics(BaseModel):
    """Terminal size in character cells."""

    model_config = ConfigDict(frozen=True)

    cols: int = Field(gt=0)
    rows: int = Field(gt=1)


@runtime_checkable
class TerminalCapabilities(Protocol):
    """What the renderer needs from a terminal."""

    up: str
    down: str
    clear_eol: str

    def metrics(self) -> TerminalMetrics:
        """Current geometry.  Raises ``TerminalUnavailableError``."""
        ...

    def write(self, text: str) -> None:
        """Write raw text, control sequences included, and flush."""
        ...


class RichTerminal:
    """``TerminalCapabilities`` backed by a Rich ``Console``.

    Parameters
    ----------
    console:
        Console to measure and write to.  A new one is created if not
        provided.  It must be attached to a terminal (or created with
        ``force_terminal=True``).
    """

    up = str(Control((ControlType.CURSOR_UP, 1)))
    down = str(Control((ControlType.CURSOR_DOWN, 1)))
    clear_eol = str(Control((ControlType.ERASE_IN_LINE, 0)))

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def metrics(self) -> TerminalMetrics:
        if not self.console.is_terminal:
            raise TerminalUnavailableError(
                "output is not a terminal; cannot determine its size"
            )
        width, height = self.console.size
        if width <= 0 or height <= 1:
            raise TerminalUnavailableError(f"unusable terminal size {width}x{height}")
        return TerminalMetrics(cols=width, rows=height)

    def write(self, text: str) -> None:
        self.console.file.write(text)
        self.console.file.flush()


class ResizeWatcher:
    """Polls a console's size and reports when it has changed.

    Call ``poll()`` once per refresh; it returns ``True`` the first time a
    new size is observed.
    """

    def __init__(self, console: Console) -> None:
        self._console = console
        self._last = tuple(console.size)

    def poll(self) -> bool:
        current = tuple(self._console.size)
        if current != self._last:
            self._last = current
            return True
        return False
