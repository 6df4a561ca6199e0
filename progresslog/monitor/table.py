"""Rich table view of a status snapshot.

Non-interactive counterpart of ``TTYRenderer``: turns a ``StepSnapshot``
into a Rich ``Panel`` for one-shot display (``progresslog show``).

Color scheme
------------
- green  : complete
- yellow : in progress
- dim    : no progress reported yet
"""

from __future__ import annotations

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from progresslog.models.status import StepSnapshot


def _progress_style(step: StepSnapshot) -> str:
    if step.progress is None:
        return "dim"
    if step.progress >= 1.0:
        return "bold green"
    return "yellow"


def _percent(progress: float | None) -> str:
    if progress is None:
        return "[dim]-[/dim]"
    return f"{int(progress * 100 + 0.000001)}%"


class StatusTableRenderer:
    """Renders ``StepSnapshot`` trees as Rich renderables.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_snapshot(self, status: StepSnapshot, *, title: str = "Progress") -> Panel:
        """Render a snapshot as a Panel with a step table and a total bar."""
        parts: list = []
        if status.steps:
            parts.append(self._build_step_table(status))
            parts.append(Text(""))

        total = Table.grid(padding=(0, 1), expand=True)
        total.add_column(ratio=1)
        total.add_column(justify="right", width=5)
        total.add_row(
            ProgressBar(total=1.0, completed=status.progress or 0.0),
            _percent(status.progress),
        )
        parts.append(total)
        if status.message:
            parts.append(Text(status.message, style="dim"))

        return Panel(
            Group(*parts),
            title=f"[bold]{escape(title)}[/bold]",
            border_style="blue",
            padding=(1, 2),
        )

    def _build_step_table(self, status: StepSnapshot) -> Table:
        """One row per step, nested steps indented under their parent."""
        table = Table(show_header=True, header_style="bold cyan", expand=True)
        table.add_column("Step", min_width=12)
        table.add_column("Weight", justify="right", width=7)
        table.add_column("Progress", justify="right", width=9)
        table.add_column("Message", min_width=20)

        for step_id, step in status.walk():
            depth = step_id.count(".")
            style = _progress_style(step)
            name = step.title or step_id.rsplit(".", 1)[-1]
            weight = f"{step.contribution:.2f}" if step.contribution else "[dim]-[/dim]"
            message = step.message or ""
            if step.pos is not None and step.max is not None:
                message = f"({step.pos:g}/{step.max}) {message}".rstrip()
            table.add_row(
                f"{'  ' * depth}[{style}]{escape(name)}[/{style}]",
                weight,
                f"[{style}]{_percent(step.progress)}[/{style}]",
                escape(message) if message else "[dim]-[/dim]",
            )
        return table

    def print_snapshot(self, status: StepSnapshot, *, title: str = "Progress") -> None:
        """Print a single snapshot to the console."""
        self.console.print(self.render_snapshot(status, title=title))
