"""Logger sink — forwards lines to an ``info``-level logging call."""

from __future__ import annotations

import logging
from typing import Any

from progresslog.sinks import SinkError


class LoggerSink:
    """Passes each line, without a newline, to ``target.info``.

    Parameters
    ----------
    target:
        A ``logging.Logger`` or any object exposing ``info(message)``.
    """

    def __init__(self, target: logging.Logger | Any) -> None:
        self._target = target

    @property
    def sink_name(self) -> str:
        return "logger"

    def emit(self, line: str) -> None:
        try:
            self._target.info(line)
        except Exception as exc:
            raise SinkError(f"logger rejected progress line: {exc}") from exc
