"""ProgressWriter — throttled producer side of the progress protocol.

Formats progress updates as protocol lines and hands them to a sink.
Updates finer than ``squelch`` are suppressed, so a monotonic run from 0 to
1 produces at most ``1/squelch + 1`` lines however often ``report`` is
called.

Usage
-----
>>> import sys
>>> p = ProgressWriter(sys.stderr, squelch=0.1)
>>> for i in range(1000):
...     p.report(i + 1, 1000)
"""

from __future__ import annotations

import logging
import math
import os
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from progresslog import wire
from progresslog.sinks import ConfigurationError, ProgressSink, resolve_sink

if TYPE_CHECKING:
    from progresslog.config import ProgressSettings

logger = logging.getLogger(__name__)

DEFAULT_SQUELCH = 0.01
DEFAULT_PRECISION = 2

# Guards float round-off in quantization and suppression checks.
EPSILON = 1e-10

_UNSET: Any = object()

_SEGMENT_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


class InvalidArgumentError(ValueError):
    """Raised when a writer method is called with an unusable argument."""


class ProgressWriter:
    """Writes progress lines for one step to a destination.

    Parameters
    ----------
    destination:
        Stream, logger, callable, or ``ProgressSink``.  Validated once here;
        anything else raises ``ConfigurationError``.
    step_id:
        Dotted id of the step this writer reports for.  When omitted it is
        read from ``PROGRESS_STEP_ID`` in *environ*, which lets a child
        process report as a sub-step of its parent without extra wiring.
    squelch:
        Smallest progress change worth emitting.  Derived from *precision*
        when omitted (``10 ** -precision``).
    precision:
        Decimal digits in emitted numbers.  Derived from *squelch* when
        omitted.  With neither given: squelch 0.01, precision 2.
    environ:
        Environment mapping consulted for the default *step_id*.
        Defaults to ``os.environ``.
    """

    def __init__(
        self,
        destination: Any,
        *,
        step_id: str | None = _UNSET,
        squelch: float | None = None,
        precision: int | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._destination = destination
        self._sink: ProgressSink = resolve_sink(destination)
        if step_id is _UNSET:
            env = os.environ if environ is None else environ
            step_id = env.get(wire.STEP_ID_ENV_VAR) or None
        self._step_id: str | None = step_id
        self._squelch_setting: float | None = None
        self._precision_setting: int | None = None
        self._squelch = DEFAULT_SQUELCH
        self._precision = DEFAULT_PRECISION
        self._last_emitted: float | None = None
        self._configure(squelch, precision)

    @classmethod
    def from_settings(
        cls, destination: Any, settings: ProgressSettings
    ) -> ProgressWriter:
        """Build a writer from ``ProgressSettings`` (env-driven defaults)."""
        return cls(
            destination,
            step_id=settings.step_id,
            squelch=settings.squelch,
            precision=settings.precision,
        )

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    @property
    def destination(self) -> Any:
        return self._destination

    @property
    def sink(self) -> ProgressSink:
        return self._sink

    @property
    def step_id(self) -> str | None:
        return self._step_id

    @property
    def last_emitted(self) -> float | None:
        """Quantized progress of the last emitted ``report`` line."""
        return self._last_emitted

    @property
    def squelch(self) -> float:
        return self._squelch

    @squelch.setter
    def squelch(self, value: float | None) -> None:
        self._configure(value, self._precision_setting)

    @property
    def precision(self) -> int:
        return self._precision

    @precision.setter
    def precision(self, value: int | None) -> None:
        self._configure(self._squelch_setting, value)

    def _configure(self, squelch: float | None, precision: int | None) -> None:
        """Apply explicit settings and derive whichever one is missing.

        An explicit value is never overwritten by derivation; assigning
        ``None`` returns it to the derived default.
        """
        if squelch is not None and not 0 < squelch <= 1:
            raise ConfigurationError(f"squelch must be in (0, 1], got {squelch!r}")
        if precision is not None and (
            isinstance(precision, bool) or int(precision) != precision or precision < 0
        ):
            raise ConfigurationError(
                f"precision must be a non-negative integer, got {precision!r}"
            )
        self._squelch_setting = squelch
        self._precision_setting = None if precision is None else int(precision)

        if squelch is None and precision is None:
            self._squelch = DEFAULT_SQUELCH
            self._precision = DEFAULT_PRECISION
            return
        if precision is None:
            # 0.99999 rather than ceil(): 1/0.001 is 1000.0000000000001
            precision = int(math.log10(1 / squelch) + 0.99999)
        if squelch is None:
            squelch = 10.0 ** -precision
        self._squelch = squelch
        self._precision = int(precision)

    # ------------------------------------------------------------------
    # Emitting
    # ------------------------------------------------------------------

    def quantize(self, ratio: float) -> str:
        """Round *ratio* down to a multiple of ``squelch`` and format it."""
        steps = int(ratio / self._squelch + EPSILON)
        return f"{steps * self._squelch:.{self._precision}f}"

    def report(
        self, current: float, maximum: float = 1, message: str | None = None
    ) -> bool:
        """Report progress, unless it moved less than ``squelch``.

        With ``maximum == 1`` the body is the quantized ratio (clamped to
        [0, 1]).  Otherwise the body is ``current/maximum``, with *current*
        printed to ``precision`` digits when it is fractional.  *maximum*
        must be a positive whole number.

        Returns
        -------
        bool
            ``True`` if a line was emitted, ``False`` if it was suppressed.
            Whatever the destination itself returns is not passed on, so the
            result means the same for every destination; call
            ``writer.sink.emit`` directly to see a callback's return value.
        """
        if maximum == 0:
            raise InvalidArgumentError("maximum must be non-zero")
        if not math.isfinite(maximum) or maximum < 0 or int(maximum) != maximum:
            raise InvalidArgumentError(
                f"maximum must be a positive whole number, got {maximum!r}"
            )
        ratio = current / maximum
        if maximum == 1:
            ratio = min(max(ratio, 0.0), 1.0)
        formatted = self.quantize(ratio)
        quantized = float(formatted)
        if (
            self._last_emitted is not None
            and abs(quantized - self._last_emitted) + EPSILON < self._squelch
        ):
            return False
        self._last_emitted = quantized

        if maximum != 1:
            if int(current) == current:
                formatted = f"{int(current)}/{int(maximum)}"
            else:
                formatted = f"{current:.{self._precision}f}/{int(maximum)}"
        if message:
            formatted = f"{formatted} - {message}"
        self._write(formatted)
        return True

    def report_data(self, payload: Mapping[str, Any]) -> None:
        """Emit a structured-data line.  Never squelched."""
        if not isinstance(payload, Mapping):
            raise InvalidArgumentError(
                f"data must be a mapping, got {type(payload).__name__}"
            )
        self._write(wire.encode_data(payload))

    def declare_substep(
        self, step_id: str, contribution: float | None, title: str
    ) -> ProgressWriter:
        """Declare a named sub-step and return a writer for it.

        The child id is dotted onto this writer's ``step_id``.  The child
        shares destination and explicit squelch/precision settings.  A
        declaration line is written on every call; repeating it for the
        same id is harmless to readers.
        """
        if not title:
            raise InvalidArgumentError("sub-step title is required")
        if not step_id or not _SEGMENT_RE.match(step_id):
            raise InvalidArgumentError(f"invalid sub-step id {step_id!r}")
        if self._step_id:
            step_id = f"{self._step_id}.{step_id}"

        child = ProgressWriter(
            self._destination,
            step_id=step_id,
            squelch=self._squelch_setting,
            precision=self._precision_setting,
        )
        child._write(f"({contribution or 0:.{self._precision}f}) {title}")
        return child

    def _write(self, body: str) -> Any:
        return self._sink.emit(wire.format_line(self._step_id, body))
