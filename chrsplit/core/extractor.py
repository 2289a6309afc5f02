"""Field extraction — locate one routing key inside a raw JSONL record.

The extractor never fails on bad input: malformed JSON, invalid UTF-8, a
non-object document or an unresolved path all come back as "not found",
and the router sends those records to the sentinel output.

Path syntax
-----------
``chr``            top-level key
``locus.chr``      nested object lookup
``calls.0.chr``    numeric segments index into arrays
``a\\.b``           escaped dot, matches the literal key ``"a.b"``

Coercion of non-string values
-----------------------------
Only exact string equality against declared categories matters, so
non-string values are rendered in their JSON text form:

- ``true`` / ``false`` → ``"true"`` / ``"false"``
- ``null``             → ``""`` (found)
- integers             → decimal text (``1`` → ``"1"``)
- floats               → shortest fixed-point text, never exponent form
  (``1.0`` → ``"1"``, ``1.5`` → ``"1.5"``, ``1.5e-7`` → ``"0.00000015"``)
- objects / arrays     → compact JSON, not the record's original spacing

Ambiguous documents
-------------------
- When an object repeats a key, the first value wins.
- A literal top-level key equal to the whole path takes precedence over the
  nested reading. With both ``{"a.b": "x"}`` and ``{"a": {"b": "y"}}``
  present, ``a.b`` yields ``"x"``. gjson would read ``a.b`` as the nested
  path only; use ``a\\.b`` to ask for the literal key explicitly.
"""

from __future__ import annotations

import json
import math
from decimal import Decimal
from typing import Any

_NOT_FOUND: tuple[str, bool] = ("", False)


def split_field_path(field_path: str) -> list[str]:
    """Split a dotted path into segments, honouring ``\\.`` escapes.

    Examples
    --------
    >>> split_field_path("locus.chr")
    ['locus', 'chr']
    >>> split_field_path(r"info\\.chr.name")
    ['info.chr', 'name']
    """
    segments: list[str] = []
    current: list[str] = []
    chars = iter(field_path)
    for ch in chars:
        if ch == "\\":
            escaped = next(chars, "")
            current.append(escaped)
        elif ch == ".":
            segments.append("".join(current))
            current = []
        else:
            current.append(ch)
    segments.append("".join(current))
    return segments


def stringify_value(value: Any) -> str:
    """Render a decoded JSON value as the string used for category matching."""
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return repr(value)
        if value.is_integer():
            return str(int(value))
        return format(Decimal(repr(value)), "f")
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _first_value_wins(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    obj: dict[str, Any] = {}
    for key, value in pairs:
        obj.setdefault(key, value)
    return obj


def _lookup(document: Any, segments: list[str]) -> tuple[Any, bool]:
    node = document
    for segment in segments:
        if isinstance(node, dict):
            if segment not in node:
                return None, False
            node = node[segment]
        elif isinstance(node, list):
            if not segment.isdigit():
                return None, False
            index = int(segment)
            if index >= len(node):
                return None, False
            node = node[index]
        else:
            return None, False
    return node, True


def extract_field(record: bytes, field_path: str) -> tuple[str, bool]:
    """Return ``(value, found)`` for *field_path* inside *record*.

    Parameters
    ----------
    record:
        Raw bytes of one JSONL line, without its terminator.
    field_path:
        Key or dotted path to look up (see module docstring).
    """
    try:
        document = json.loads(record, object_pairs_hook=_first_value_wins)
    except (ValueError, RecursionError):
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors.
        return _NOT_FOUND

    if not isinstance(document, dict):
        return _NOT_FOUND

    # Exact key first, so a literal "a.b" key wins over the nested path.
    if field_path in document:
        return stringify_value(document[field_path]), True

    segments = split_field_path(field_path)
    if len(segments) == 1 and segments[0] == field_path:
        return _NOT_FOUND

    value, found = _lookup(document, segments)
    if not found:
        return _NOT_FOUND
    return stringify_value(value), True
