"""Progresslog: hierarchical, line-based progress reporting.

A writer emits throttled ``progress: ...`` lines to a file, logger, or
callback; a parser incrementally turns those lines back into a tree of
step statuses; a TTY renderer draws that tree with minimal repaint.
"""

__version__ = "0.1.0"

from progresslog.models.status import StepSnapshot, StepStatus
from progresslog.parser import ProgressParser
from progresslog.writer import ProgressWriter

__all__ = [
    "ProgressParser",
    "ProgressWriter",
    "StepSnapshot",
    "StepStatus",
    "__version__",
]
