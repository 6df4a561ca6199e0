"""Wire format for the progress protocol.

One record per newline-terminated UTF-8 line::

    progress: [<step_id> ]<body>

where ``<body>`` is one of

- ``NUM[/DENOM][ [- ]MESSAGE]``  progress update
- ``(CONTRIB) [- ]TITLE``        sub-step declaration
- ``{...}``                      single-line JSON object

Lines without the ``progress: `` prefix are not part of the protocol and are
ignored by readers, so progress can be interleaved with ordinary log output.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any

PREFIX = "progress: "

STEP_ID_ENV_VAR = "PROGRESS_STEP_ID"

# step id segments: [A-Za-z][A-Za-z0-9_]*
LINE_RE = re.compile(
    r"^progress: (?:(?P<step_id>[A-Za-z][A-Za-z0-9_]*(?:\.[A-Za-z][A-Za-z0-9_]*)*) )?"
    r"(?P<remainder>.*)$"
)

PROGRESS_RE = re.compile(
    r"^(?P<num>\d+(?:\.\d*)?|\.\d+)(?:/(?P<denom>\d+))?(?: (?P<message>.*))?$"
)

DECLARATION_RE = re.compile(
    r"^\((?P<contribution>\d+(?:\.\d*)?|\.\d+)\) (?P<title>.*)$"
)

DATA_MARKER = "{"


def format_line(step_id: str | None, body: str) -> str:
    """Build a protocol line (without the trailing newline)."""
    if step_id:
        return f"{PREFIX}{step_id} {body}"
    return f"{PREFIX}{body}"


def strip_dash(text: str) -> str:
    """Remove the cosmetic ``"- "`` lead-in from a message or title."""
    return text[2:] if text.startswith("- ") else text


def encode_data(payload: Mapping[str, Any]) -> str:
    """Encode a mapping as canonical single-line JSON.

    Sorted keys, compact separators, ASCII-only output.  ``json`` escapes
    embedded newlines, so the result always fits on one protocol line.
    """
    return json.dumps(
        dict(payload), sort_keys=True, separators=(",", ":"), ensure_ascii=True
    )


def decode_data(text: str) -> Any:
    """Decode a structured-data body.  Raises ``ValueError`` on bad JSON."""
    return json.loads(text)


def parse_number(text: str) -> int | float:
    """Wire numbers keep their integer form when they have no fraction."""
    if "." in text:
        return float(text)
    return int(text)
