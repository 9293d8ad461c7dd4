"""NJSON reader — recursive descent over the Scanner.

NJSON is inspired by JSON but is NOT JSON:

  Integer    optional '-' and digits                      42, -3
  Double     same, with a '.' somewhere in the run        1.5, -.5, 2.
  String     "..." with escapes \\b \\t \\n \\f \\r \\" \\' \\\\
  Character  '...' holding one (possibly escaped) char    'x', '\\n'
  Boolean    true | false
  Null       null
  Map        { "key": value, ... }   insertion ordered
  Array      [ value, ... ]

Trailing commas are accepted in maps and arrays, comments (// and /* */)
may appear between any two tokens, and an unknown escape such as \\q is
kept verbatim as the two characters backslash and 'q'.

Every production dispatches on the current significant character and
leaves the scanner on the first significant character after itself.
"""
from __future__ import annotations

import logging
import math
from typing import TextIO

from ..errors import MalformedNumberError, NotBooleanError, NotNullError, ParseError
from ..values import INT_MAX, INT_MIN, Char, NJsonArray, NJsonMap, Value
from .scanner import EOF, Scanner

logger = logging.getLogger(__name__)

DIGITS = frozenset("0123456789")
NUMBER_CHARS = DIGITS | {"-", "."}
VALUE_STARTS = NUMBER_CHARS | frozenset("\"{['tfn")

ESCAPES = {
    "b": "\b",
    "t": "\t",
    "n": "\n",
    "f": "\f",
    "r": "\r",
    '"': '"',
    "'": "'",
    "\\": "\\",
}

BOOLEAN_KEYWORDS = {"true": True, "false": False}
NULL_KEYWORDS = {"null": None}

# Sentinel: no value starts at the current character (None is the null value)
_NOTHING = object()


class Reader:
    """Parse one NJSON document from a text stream.

    A Reader is single-use: create one per stream.

    Usage::

        with open("save.njson", encoding="utf-8", newline="") as fh:
            tree = Reader(fh).read_map()
    """

    def __init__(self, stream: TextIO) -> None:
        self._scanner = Scanner(stream)
        self._scanner.advance()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def read_map(self) -> NJsonMap:
        """Read a document whose root is a map."""
        self._check("{")
        return self._parse_map()

    def read_array(self) -> NJsonArray:
        """Read a document whose root is an array."""
        self._check("[")
        return self._parse_array()

    def read(self) -> NJsonMap | NJsonArray:
        """Read a document whose root is either a map or an array."""
        self._check("{", "[")
        if self._current == "{":
            return self._parse_map()
        return self._parse_array()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def _current(self) -> str:
        return self._scanner.current

    def _advance(self, in_literal: bool = False) -> str:
        return self._scanner.advance(in_literal)

    def _fail(self, *expected: str) -> ParseError:
        line, column = self._scanner.position
        return ParseError(self._current, line, column, expected)

    def _check(self, *expected: str) -> None:
        if self._current == EOF or self._current not in expected:
            raise self._fail(*expected)

    # ------------------------------------------------------------------
    # Productions
    # ------------------------------------------------------------------

    def _parse_value(self) -> object:
        ch = self._current
        if ch == '"':
            return self._parse_string()
        if ch in NUMBER_CHARS:
            return self._parse_number()
        if ch == "{":
            return self._parse_map()
        if ch in ("t", "f"):
            return self._parse_keyword(BOOLEAN_KEYWORDS, NotBooleanError)
        if ch == "'":
            return self._parse_character()
        if ch == "[":
            return self._parse_array()
        if ch == "n":
            return self._parse_keyword(NULL_KEYWORDS, NotNullError)
        return _NOTHING

    def _read_escaped(self) -> str:
        """Decode the character under the cursor, consuming an escape if present."""
        ch = self._current
        if ch != "\\":
            return ch
        escaped = self._advance(in_literal=True)
        if escaped == EOF:
            raise self._fail(*ESCAPES)
        return ESCAPES.get(escaped, "\\" + escaped)

    def _parse_string(self) -> str:
        parts: list[str] = []
        while True:
            ch = self._advance(in_literal=True)
            if ch == '"':
                break
            if ch == EOF:
                raise self._fail('"')
            parts.append(self._read_escaped())
        self._advance()
        return "".join(parts)

    def _parse_character(self) -> Char:
        ch = self._advance(in_literal=True)
        if ch in ("'", EOF):
            raise self._fail()
        decoded = self._read_escaped()
        if self._advance(in_literal=True) != "'":
            raise self._fail("'")
        self._advance()
        return Char(decoded[0])

    def _parse_number(self) -> int | float:
        line, column = self._scanner.position
        run = [self._current]
        while self._advance(in_literal=True) in NUMBER_CHARS and not self._scanner.crossed_break:
            run.append(self._current)
        self._scanner.settle()

        text = "".join(run)
        try:
            if "." in text:
                number = float(text)
            else:
                number = int(text)
        except ValueError:
            raise MalformedNumberError(text, line, column) from None
        if isinstance(number, float):
            # long runs overflow to inf, which the writer cannot emit
            if not math.isfinite(number):
                raise MalformedNumberError(text, line, column)
            return number
        if not INT_MIN <= number <= INT_MAX:
            raise MalformedNumberError(text, line, column)
        return number

    def _parse_keyword(self, keywords: dict[str, object], error: type[ParseError]) -> object:
        """Match one of a fixed keyword set with a prefix state machine.

        The state is the prefix read so far; each alphabetic character must
        keep it a prefix of some keyword, and the run must end on a keyword.
        """
        prefix = self._current
        while True:
            ch = self._advance(in_literal=True)
            if not ch.isalpha() or self._scanner.crossed_break:
                break
            allowed = _continuations(prefix, keywords)
            if ch not in allowed:
                line, column = self._scanner.position
                raise error(ch, line, column, allowed)
            prefix += ch

        if prefix not in keywords:
            line, column = self._scanner.position
            raise error(self._current, line, column, _continuations(prefix, keywords))
        self._scanner.settle()
        return keywords[prefix]

    def _parse_map(self) -> NJsonMap:
        elements: NJsonMap = {}
        while True:
            self._advance()
            self._check("}", '"')
            if self._current == "}":
                break
            key = self._parse_string()
            self._check(":")
            self._advance()
            value = self._parse_value()
            if value is _NOTHING:
                raise self._fail(*VALUE_STARTS)
            elements[key] = value
            self._check("}", ",")
            if self._current == "}":
                break
        self._advance()
        return elements

    def _parse_array(self) -> NJsonArray:
        elements: NJsonArray = []
        while True:
            self._advance()
            value = self._parse_value()
            if value is _NOTHING:
                if self._current != "]":
                    raise self._fail("]", *VALUE_STARTS)
                break
            elements.append(value)
            self._check("]", ",")
            if self._current == "]":
                break
        self._advance()
        return elements


def _continuations(prefix: str, keywords: dict[str, object]) -> frozenset[str]:
    """Characters that extend prefix towards at least one keyword."""
    return frozenset(
        word[len(prefix)]
        for word in keywords
        if len(word) > len(prefix) and word.startswith(prefix)
    )


# ---------------------------------------------------------------------------
# Module-level shortcuts
# ---------------------------------------------------------------------------


def read_map(stream: TextIO) -> NJsonMap:
    """Parse a map-rooted document from stream."""
    return Reader(stream).read_map()


def read_array(stream: TextIO) -> NJsonArray:
    """Parse an array-rooted document from stream."""
    return Reader(stream).read_array()


def read(stream: TextIO) -> Value:
    """Parse a map- or array-rooted document from stream."""
    tree = Reader(stream).read()
    logger.debug("Parsed %s document with %d top-level entries", type(tree).__name__, len(tree))
    return tree
