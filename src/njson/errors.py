"""Typed error hierarchy for reading, writing and mapping NJSON.

Every error extends NJsonError and carries its structured context as
attributes; the message is derived from that context so the CLI can print
it as-is.
"""
from __future__ import annotations

from typing import Any, Iterable

EOF_DISPLAY = "end of input"


def _show_char(character: str) -> str:
    return repr(character) if character else EOF_DISPLAY


class NJsonError(RuntimeError):
    """Base error for all NJSON operations."""


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class ParseError(NJsonError):
    """An unexpected character was found where a fixed set was required.

    Attributes:
        character: The offending character ("" at end of input)
        line: 1-based line of the offending character
        column: Column of the offending character on its line
        expected: Characters that would have been accepted instead
    """

    def __init__(
        self,
        character: str,
        line: int,
        column: int,
        expected: Iterable[str] = (),
        detail: str = "",
    ) -> None:
        self.character = character
        self.line = line
        self.column = column
        self.expected = frozenset(expected)
        self.detail = detail
        super().__init__(self._format())

    def _format(self) -> str:
        msg = f"Unexpected {_show_char(self.character)} at line {self.line}, column {self.column}"
        if self.detail:
            msg += f": {self.detail}"
        if self.expected:
            wanted = ", ".join(repr(c) for c in sorted(self.expected))
            msg += f" (expected one of {wanted})"
        return msg


class NotBooleanError(ParseError):
    """An alphabetic run starting with 't' or 'f' is neither 'true' nor 'false'."""

    def __init__(self, character: str, line: int, column: int, expected: Iterable[str] = ()) -> None:
        super().__init__(character, line, column, expected, detail="not boolean")


class NotNullError(ParseError):
    """An alphabetic run starting with 'n' is not 'null'."""

    def __init__(self, character: str, line: int, column: int, expected: Iterable[str] = ()) -> None:
        super().__init__(character, line, column, expected, detail="not null")


class MalformedNumberError(ParseError):
    """A captured number run does not convert to an int or a float.

    Attributes:
        text: The captured run of digits, '-' and '.'
    """

    def __init__(self, text: str, line: int, column: int) -> None:
        self.text = text
        super().__init__(text[:1], line, column, detail=f"malformed number {text!r}")


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


class UnserializableValueError(NJsonError):
    """A value outside the NJSON value model was handed to the writer.

    Attributes:
        value: The rejected value
    """

    def __init__(self, value: Any, detail: str = "") -> None:
        self.value = value
        reason = detail or f"type {type(value).__name__} has no NJSON representation"
        super().__init__(f"Cannot write {value!r}: {reason}")


# ---------------------------------------------------------------------------
# Object mapping
# ---------------------------------------------------------------------------


class MappingError(NJsonError):
    """Base error for converting between value trees and records."""


class NotMappableTypeError(MappingError):
    """Mapping was requested for a type that lacks the @mappable marker.

    Attributes:
        cls: The rejected type
    """

    def __init__(self, cls: type) -> None:
        self.cls = cls
        super().__init__(f"{cls.__qualname__} is not a mappable type")


class MissingRequiredFieldError(MappingError):
    """A required field's path is absent from the source tree.

    Attributes:
        path: Dotted path of the missing key
    """

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Missing key '{path}'")


class InvalidPathError(MappingError):
    """An intermediate path segment exists but is not a nested map.

    Attributes:
        path: Dotted path being resolved
        segment: The segment whose value is not a map
    """

    def __init__(self, path: str, segment: str = "") -> None:
        self.path = path
        self.segment = segment
        where = f" at segment '{segment}'" if segment else ""
        super().__init__(f"Wrong path '{path}'{where}: not a map")
