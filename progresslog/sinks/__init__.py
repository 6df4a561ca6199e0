"""Sink protocol and destination resolution for progress writers.

All sinks implement the ``ProgressSink`` protocol: a ``sink_name`` property
and an ``emit(line)`` method.  A writer resolves its destination to a sink
once, at construction; every emitted line then goes through ``emit``.

Accepted destinations
---------------------
- a ``ProgressSink`` (used as-is)
- a stream: any object with a ``write`` method (file, ``io.StringIO``, ...)
- a logger: any object with an ``info`` method (``logging.Logger``, ...)
- a callback: any callable taking the line as a string
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


class ConfigurationError(ValueError):
    """Raised when a writer is given an unusable destination or setting."""


class SinkError(RuntimeError):
    """Raised when a destination fails to accept a progress line."""


@runtime_checkable
class ProgressSink(Protocol):
    """Protocol that every progress destination adapter implements.

    Attributes
    ----------
    sink_name : str
        Short human-readable kind of the destination (``"stream"``,
        ``"logger"``, ``"callback"``).
    """

    @property
    def sink_name(self) -> str:
        """Return the kind of this sink."""
        ...

    def emit(self, line: str) -> Any:
        """Deliver one protocol line, given without its trailing newline.

        Implementations raise ``SinkError`` when the destination fails.
        """
        ...


def resolve_sink(destination: Any) -> ProgressSink:
    """Wrap *destination* in the matching sink adapter.

    Raises
    ------
    ConfigurationError
        If *destination* is none of the accepted shapes.
    """
    from progresslog.sinks.callback import CallbackSink
    from progresslog.sinks.logger import LoggerSink
    from progresslog.sinks.stream import StreamSink

    if destination is None:
        raise ConfigurationError("a progress destination is required")
    if isinstance(destination, ProgressSink):
        return destination
    if callable(getattr(destination, "write", None)):
        return StreamSink(destination)
    if callable(getattr(destination, "info", None)):
        return LoggerSink(destination)
    if callable(destination):
        return CallbackSink(destination)
    raise ConfigurationError(
        f"{destination!r} is not a stream, logger object, or callable"
    )


__all__ = [
    "ConfigurationError",
    "ProgressSink",
    "SinkError",
    "resolve_sink",
]
