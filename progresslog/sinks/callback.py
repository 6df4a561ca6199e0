"""Callback sink — hands each line to a user-supplied callable."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from progresslog.sinks import SinkError


class CallbackSink:
    """Calls ``callback(line)`` for every line; the line has no newline.

    The callback's return value is passed back to the caller of ``emit``.
    Exceptions raised by the callback surface as ``SinkError``.
    """

    def __init__(self, callback: Callable[[str], Any]) -> None:
        self._callback = callback

    @property
    def sink_name(self) -> str:
        return "callback"

    def emit(self, line: str) -> Any:
        try:
            return self._callback(line)
        except Exception as exc:
            raise SinkError(f"progress callback failed: {exc}") from exc
