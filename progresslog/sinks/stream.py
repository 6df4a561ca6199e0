"""Stream sink — writes newline-terminated lines to a file-like object."""

from __future__ import annotations

import logging
from typing import IO, Any

from progresslog.sinks import SinkError

logger = logging.getLogger(__name__)


class StreamSink:
    """Writes each line plus ``"\\n"`` and flushes immediately.

    Flushing after every line keeps the stream readable by a concurrent
    parser: a line is either fully visible or not visible at all.

    Parameters
    ----------
    stream:
        Any object with a ``write`` method.  ``flush`` is optional.
    """

    def __init__(self, stream: IO[str] | Any) -> None:
        self._stream = stream
        self._flush = getattr(stream, "flush", None)

    @property
    def sink_name(self) -> str:
        return "stream"

    @property
    def stream(self) -> Any:
        return self._stream

    def emit(self, line: str) -> None:
        try:
            self._stream.write(line + "\n")
            if callable(self._flush):
                self._flush()
        except Exception as exc:
            raise SinkError(f"failed to write progress line: {exc}") from exc
        logger.debug("StreamSink: wrote %r", line)
