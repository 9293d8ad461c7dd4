"""NJSON writer — renders a value tree back to text.

Output is canonical: map keys in insertion order, strings in "...",
characters in '...', doubles always with a '.', no comments. With
indent > 0 every element goes on its own line; indent == 0 gives a compact
single line.
"""
from __future__ import annotations

import io
import math
from decimal import Decimal
from typing import TextIO

from ..errors import UnserializableValueError
from ..values import INT_MAX, INT_MIN, Char, Value

_CONTROL_ESCAPES = {
    "\\": "\\\\",
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


def escape(text: str, quote: str) -> str:
    """Apply the inverse of the reader's escape table for a literal delimited by quote."""
    out: list[str] = []
    for ch in text:
        if ch == quote:
            out.append("\\" + ch)
        else:
            out.append(_CONTROL_ESCAPES.get(ch, ch))
    return "".join(out)


def format_float(value: float) -> str:
    """Positional decimal text for a finite float, always containing a '.'."""
    if not math.isfinite(value):
        raise UnserializableValueError(value, "non-finite doubles have no NJSON representation")
    # repr() gives the shortest round-tripping digits; Decimal drops the exponent
    text = format(Decimal(repr(value)), "f")
    if "." not in text:
        text += ".0"
    return text


def format_scalar(value: object) -> str:
    """Render a non-container value."""
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, int):
        if not INT_MIN <= value <= INT_MAX:
            raise UnserializableValueError(value, "integer outside the signed 64-bit range")
        return str(int(value))
    if isinstance(value, float):
        return format_float(value)
    if isinstance(value, Char):
        return "'" + escape(value, "'") + "'"
    if isinstance(value, str):
        return '"' + escape(value, '"') + '"'
    raise UnserializableValueError(value)


class Writer:
    """Write value trees to a text stream.

    Usage::

        with open("save.njson", "w", encoding="utf-8", newline="") as fh:
            Writer(fh, indent=4).write(tree)
    """

    def __init__(self, stream: TextIO, indent: int = 4) -> None:
        self._stream = stream
        self._indent = indent

    def write(self, value: Value) -> None:
        """Write one document (normally a map or an array) followed by a newline."""
        self._write_value(value, 0)
        self._stream.write("\n")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _newline(self, depth: int) -> str:
        if not self._indent:
            return ""
        return "\n" + " " * (self._indent * depth)

    def _write_value(self, value: object, depth: int) -> None:
        if isinstance(value, dict):
            self._write_map(value, depth)
        elif isinstance(value, list):
            self._write_array(value, depth)
        else:
            self._stream.write(format_scalar(value))

    def _write_map(self, value: dict, depth: int) -> None:
        if not value:
            self._stream.write("{}")
            return
        separator = ": " if self._indent else ":"
        self._stream.write("{")
        for position, (key, item) in enumerate(value.items()):
            if not isinstance(key, str):
                raise UnserializableValueError(key, "map keys must be strings")
            if position:
                self._stream.write(",")
            self._stream.write(self._newline(depth + 1))
            self._stream.write('"' + escape(key, '"') + '"' + separator)
            self._write_value(item, depth + 1)
        self._stream.write(self._newline(depth) + "}")

    def _write_array(self, value: list, depth: int) -> None:
        if not value:
            self._stream.write("[]")
            return
        self._stream.write("[")
        for position, item in enumerate(value):
            if position:
                self._stream.write(",")
            self._stream.write(self._newline(depth + 1))
            self._write_value(item, depth + 1)
        self._stream.write(self._newline(depth) + "]")


def write(stream: TextIO, value: Value, indent: int = 4) -> None:
    """Write value to stream as an NJSON document."""
    Writer(stream, indent=indent).write(value)


def dumps(value: Value, indent: int = 4) -> str:
    """Render value as an NJSON document string."""
    buf = io.StringIO()
    write(buf, value, indent=indent)
    return buf.getvalue()
