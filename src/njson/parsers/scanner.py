"""Single-character lookahead cursor over an NJSON text stream.

The scanner hides everything the grammar treats as insignificant:

  - line breaks (CR and LF) are never returned, inside literals included
  - outside literals, runs of spaces/tabs are skipped
  - outside literals, // line comments and /* block comments */ are skipped

Literal mode (strings, characters, number and keyword runs) is selected per
call to advance(); the reader calls settle() after a token read in literal
mode so that whitespace and comments following it are skipped too.

crossed_break tells whether the last advance() absorbed a line break, which
ends a number or keyword run.
"""
from __future__ import annotations

from typing import TextIO

EOF = ""

_LINE_BREAKS = frozenset("\r\n")
_SPACES = frozenset(" \t")


class Scanner:
    """Forward-only cursor tracking line and column of the current character.

    Usage::

        scanner = Scanner(io.StringIO('{"a": 1}'))
        scanner.advance()      # '{'
        scanner.position       # (1, 1)
    """

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._pending: str | None = None
        self._pending_pos = (1, 0)
        self.current: str = EOF
        self.line = 1
        self.column = 0
        self.in_literal = False
        self.crossed_break = False
        self._current_pos = (1, 0)

    @property
    def position(self) -> tuple[int, int]:
        """(line, column) of the current character."""
        return self._current_pos

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def advance(self, in_literal: bool = False) -> str:
        """Move to the next significant character and return it (EOF at end)."""
        self.in_literal = in_literal
        self.crossed_break = False
        return self._settle_on(self._read())

    def settle(self) -> str:
        """Re-evaluate the current character as if it had been read outside a literal."""
        self.in_literal = False
        return self._settle_on(self.current)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _read(self) -> str:
        if self._pending is not None:
            ch, self._pending = self._pending, None
            self.current = ch
            self._current_pos = self._pending_pos
            return ch

        ch = self._stream.read(1)
        if ch == "\n":
            self.line += 1
            self.column = 0
        elif ch:
            self.column += 1
        self.current = ch
        self._current_pos = (self.line, self.column)
        return ch

    def _settle_on(self, ch: str) -> str:
        while True:
            if ch in _LINE_BREAKS:
                self.crossed_break = True
                ch = self._read()
                continue
            if self.in_literal or ch == EOF:
                return ch
            if ch in _SPACES:
                ch = self._read()
                continue
            if ch != "/":
                return ch

            slash_pos = self._current_pos
            follower = self._read()
            if follower == "/":
                self._skip_line_comment()
                ch = self.current
            elif follower == "*":
                self._skip_block_comment()
                ch = self.current if self.current == EOF else self._read()
            else:
                # lone '/': hand it out and keep the follower for the next read
                self._pending = follower
                self._pending_pos = self._current_pos
                self.current = "/"
                self._current_pos = slash_pos
                return "/"

    def _skip_line_comment(self) -> None:
        ch = self._read()
        while ch not in _LINE_BREAKS and ch != EOF:
            ch = self._read()

    def _skip_block_comment(self) -> None:
        seen_star = False
        while True:
            ch = self._read()
            if ch == EOF:
                return
            if seen_star and ch == "/":
                return
            seen_star = ch == "*"
