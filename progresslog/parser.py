"""ProgressParser — incremental, resumable reader of the progress protocol.

The parser owns a mutable ``StepStatus`` tree and feeds it from a seekable
source.  Each ``parse()`` call resumes at ``input_pos``, processes every
complete (newline-terminated) line appended since, and returns a frozen
``StepSnapshot``.

A trailing line without its newline is never consumed: a writer may be in
the middle of appending it.  The offset stays in front of that line and the
next call picks it up once it is complete.  Offsets are therefore always at
line boundaries, which can never fall inside a multi-byte UTF-8 character.
A source that cannot seek, such as a pipe, has its torn bytes held back in
memory and completed on the next call instead.
"""

from __future__ import annotations

import io
import logging
import warnings
from collections.abc import Callable
from typing import IO, Any

from progresslog import wire
from progresslog.models.status import StepSnapshot, StepStatus

logger = logging.getLogger(__name__)

DataHook = Callable[[Any, Any], Any]


class ProgressSourceError(OSError):
    """Raised when the input cannot be read, or cannot be seeked to resume."""


class PayloadDecodeError(ValueError):
    """Raised when a structured-data line does not hold valid JSON."""


class ParseWarning(UserWarning):
    """Issued for a progress line whose body matches no known form."""


def merge_data(previous: Any, payload: Any) -> Any:
    """Data hook that merges each payload into the node's existing data."""
    if isinstance(previous, dict) and isinstance(payload, dict):
        return {**previous, **payload}
    return payload


class ProgressParser:
    """Parses progress lines from *input* into a status tree.

    Parameters
    ----------
    input:
        A seekable binary or text file object, or an in-memory ``str`` /
        ``bytes`` value.  In-memory values are re-wrapped on every call, so
        assigning a longer value to ``input`` continues from ``input_pos``.
    input_pos:
        Offset to resume from, e.g. one persisted from an earlier parser.
    data_hook:
        Optional ``hook(previous_data, payload) -> data`` applied to every
        decoded structured-data line instead of plain replacement.
    """

    def __init__(
        self,
        input: IO[bytes] | IO[str] | bytes | str | None = None,
        *,
        input_pos: int | None = None,
        data_hook: DataHook | None = None,
    ) -> None:
        self.input = input
        self.input_pos = input_pos
        self._data_hook = data_hook
        self._status = StepStatus()
        # Torn trailing line read from a source that cannot seek back to it.
        self._partial: bytes | str | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def status(self) -> StepSnapshot:
        """Frozen view of the current tree."""
        return self._status.snapshot()

    def reset(self) -> None:
        """Forget all parsed state and start over from the beginning."""
        self._status = StepStatus()
        self.input_pos = None
        self._partial = None

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def parse(self) -> StepSnapshot:
        """Consume newly appended complete lines and return a snapshot.

        Raises
        ------
        ProgressSourceError
            If the source cannot be read, or a resume is needed on a source
            that cannot seek.
        PayloadDecodeError
            If a ``{...}`` line is not valid JSON.
        """
        source = self._open_source()
        if self.input_pos is not None:
            self._seek(source, self.input_pos)
            pos = self.input_pos
        else:
            pos = self._tell(source)

        pending: dict[tuple[str, ...], tuple[int, StepStatus]] = {}
        while True:
            try:
                raw = source.readline()
            except OSError as exc:
                raise ProgressSourceError(f"cannot read progress source: {exc}") from exc
            if self._partial is not None:
                raw = self._partial + raw
                self._partial = None
            if not raw or raw[-1:] not in (b"\n", "\n"):
                if raw and pos is None:
                    self._partial = raw
                break
            pos = self._tell(source)
            if isinstance(raw, bytes):
                line = raw.decode("utf-8", errors="replace")
            else:
                line = raw
            self._apply_line(line.rstrip("\r\n"), pending)

        if pos != self.input_pos:
            logger.debug("parsed up to offset %s (was %s)", pos, self.input_pos)
        self.input_pos = pos

        # Deepest ancestors first, so parents see their children's new totals.
        for _, node in sorted(pending.values(), key=lambda item: item[0], reverse=True):
            node.aggregate()

        return self._status.snapshot()

    def _open_source(self) -> IO[bytes] | IO[str]:
        source = self.input
        if source is None:
            raise ProgressSourceError("no progress source configured")
        if isinstance(source, str):
            return io.BytesIO(source.encode("utf-8"))
        if isinstance(source, (bytes, bytearray)):
            return io.BytesIO(bytes(source))
        if not callable(getattr(source, "readline", None)):
            raise ProgressSourceError(f"{source!r} is not readable")
        return source

    @staticmethod
    def _tell(source: IO[Any]) -> int | None:
        seekable = getattr(source, "seekable", None)
        if not callable(seekable) or not seekable():
            return None
        try:
            return source.tell()
        except OSError as exc:
            raise ProgressSourceError(f"cannot read progress source: {exc}") from exc

    @staticmethod
    def _seek(source: IO[Any], offset: int) -> None:
        seekable = getattr(source, "seekable", None)
        if not callable(seekable) or not seekable():
            raise ProgressSourceError(
                "progress source is not seekable; cannot resume at offset "
                f"{offset}"
            )
        try:
            source.seek(offset)
        except (OSError, ValueError) as exc:
            raise ProgressSourceError(f"seek to {offset} failed: {exc}") from exc

    def _apply_line(
        self,
        line: str,
        pending: dict[tuple[str, ...], tuple[int, StepStatus]],
    ) -> None:
        match = wire.LINE_RE.match(line)
        if match is None:
            return
        step_id, remainder = match.group("step_id"), match.group("remainder")

        node = self._status
        ancestors: list[tuple[tuple[str, ...], StepStatus]] = []
        path: tuple[str, ...] = ()
        if step_id:
            for name in step_id.split("."):
                ancestors.append((path, node))
                path += (name,)
                node = node.child(name)

        progress = wire.PROGRESS_RE.match(remainder)
        if progress is not None:
            num = wire.parse_number(progress.group("num"))
            denom = progress.group("denom")
            if denom is not None and int(denom) == 0:
                self._warn(remainder)
                return
            message = progress.group("message")
            node.message = wire.strip_dash(message) if message is not None else None
            value = float(num)
            if denom is not None:
                node.pos = num
                node.max = int(denom)
                value = num / int(denom)
            node.progress = min(max(value, 0.0), 1.0)
            if node.contribution:
                for depth, (key, ancestor) in enumerate(ancestors):
                    pending[key] = (depth, ancestor)
            return

        declaration = wire.DECLARATION_RE.match(remainder)
        if declaration is not None:
            node.title = wire.strip_dash(declaration.group("title"))
            node.contribution = float(declaration.group("contribution"))
            return

        if remainder.startswith(wire.DATA_MARKER):
            try:
                payload = wire.decode_data(remainder)
            except ValueError as exc:
                raise PayloadDecodeError(
                    f"invalid data payload for step {step_id or '(root)'}: {exc}"
                ) from exc
            if self._data_hook is not None:
                payload = self._data_hook(node.data, payload)
            node.data = payload
            return

        self._warn(remainder)

    @staticmethod
    def _warn(remainder: str) -> None:
        logger.debug("skipping unrecognized progress body %r", remainder)
        warnings.warn(
            f'can\'t parse progress message "{remainder}"', ParseWarning, stacklevel=3
        )
