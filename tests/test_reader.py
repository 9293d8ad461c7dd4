"""Tests for the NJSON reader."""
from __future__ import annotations

import io

import pytest

from njson.errors import MalformedNumberError, NotBooleanError, NotNullError, ParseError
from njson.parsers.reader import Reader, read, read_array, read_map
from njson.values import Char, kind_of


def _map(text: str) -> dict:
    return read_map(io.StringIO(text))


def _array(text: str) -> list:
    return read_array(io.StringIO(text))


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


class TestNumbers:
    def test_integer(self) -> None:
        value = _array("[1]")[0]
        assert value == 1
        assert kind_of(value) == "Int"

    def test_double(self) -> None:
        value = _array("[1.0]")[0]
        assert value == 1.0
        assert kind_of(value) == "Float"

    def test_negative_integer(self) -> None:
        value = _array("[-3]")[0]
        assert value == -3
        assert isinstance(value, int)

    @pytest.mark.parametrize("text,expected", [
        ("-.5", -0.5),
        ("2.", 2.0),
        ("007", 7),
        ("9223372036854775807", 9223372036854775807),
    ])
    def test_lenient_forms(self, text: str, expected: float) -> None:
        assert _array(f"[{text}]") == [expected]

    @pytest.mark.parametrize("text", ["-", "1-2", "1.2.3", "9223372036854775808"])
    def test_malformed_numbers(self, text: str) -> None:
        with pytest.raises(MalformedNumberError) as ei:
            _array(f"[{text}]")
        assert ei.value.text == text

    def test_whitespace_and_comments_after_number(self) -> None:
        assert _array("[1 /* one */ , 2 // two\n]") == [1, 2]

    def test_overflowing_double_is_malformed(self) -> None:
        text = "9" * 400 + ".0"
        with pytest.raises(MalformedNumberError) as ei:
            _array(f"[{text}]")
        assert ei.value.text == text

    def test_line_break_ends_a_number(self) -> None:
        with pytest.raises(ParseError) as ei:
            _array("[1\n2]")
        assert (ei.value.character, ei.value.line, ei.value.column) == ("2", 2, 1)

    def test_number_before_line_break(self) -> None:
        assert _array("[1,\n2\n]") == [1, 2]


class TestStrings:
    def test_escape_fidelity(self) -> None:
        assert _map('{"s": "a\\nb"}') == {"s": "a\nb"}

    def test_all_escapes(self) -> None:
        value = _map('{"s": "\\b\\t\\n\\f\\r\\"\\\'\\\\"}')["s"]
        assert value == "\b\t\n\f\r\"'\\"

    def test_unknown_escape_passes_through(self) -> None:
        assert _map('{"s": "\\q"}')["s"] == "\\q"

    def test_spaces_and_comment_markers_are_content(self) -> None:
        assert _map('{"u": "http://x /* y */"}')["u"] == "http://x /* y */"

    def test_raw_line_breaks_are_dropped(self) -> None:
        assert _map('{"s": "x\r\ny"}')["s"] == "xy"

    def test_unterminated_string(self) -> None:
        with pytest.raises(ParseError) as ei:
            _map('{"a')
        assert ei.value.character == ""
        assert ei.value.expected == frozenset('"')


class TestCharacters:
    def test_plain_and_escaped(self) -> None:
        values = _array("['x', '\\n', '\\'', '\"']")
        assert values == ["x", "\n", "'", '"']
        assert all(isinstance(v, Char) for v in values)

    def test_unknown_escape_keeps_first_character(self) -> None:
        assert _array("['\\q']") == [Char("\\")]

    def test_empty_character_literal(self) -> None:
        with pytest.raises(ParseError):
            _array("['']")

    def test_unclosed_character_literal(self) -> None:
        with pytest.raises(ParseError) as ei:
            _array("['ab']")
        assert ei.value.character == "b"
        assert ei.value.expected == frozenset("'")


class TestKeywords:
    def test_booleans_and_null(self) -> None:
        assert _array("[true, false, null]") == [True, False, None]

    def test_keyword_before_closing_brace(self) -> None:
        assert _map('{"a": true }') == {"a": True}

    def test_disagreeing_character_fails_immediately(self) -> None:
        with pytest.raises(NotBooleanError) as ei:
            _array("[trux]")
        assert ei.value.character == "x"
        assert ei.value.expected == frozenset("e")

    def test_incomplete_boolean(self) -> None:
        with pytest.raises(NotBooleanError) as ei:
            _array("[tru]")
        assert ei.value.character == "]"

    def test_keyword_with_extra_letters(self) -> None:
        with pytest.raises(NotBooleanError):
            _array("[falsey]")

    def test_not_null(self) -> None:
        with pytest.raises(NotNullError) as ei:
            _array("[nil]")
        assert ei.value.character == "i"

    def test_keyword_errors_are_parse_errors(self) -> None:
        with pytest.raises(ParseError):
            _array("[fals e]")

    def test_line_break_ends_a_keyword(self) -> None:
        with pytest.raises(NotBooleanError) as ei:
            _map('{"a": tr\nue}')
        assert ei.value.character == "u"
        assert ei.value.line == 2

    def test_keyword_before_line_break(self) -> None:
        assert _map('{"a": null\n}') == {"a": None}


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------


class TestMaps:
    def test_comment_transparency(self) -> None:
        assert _map('{/*c*/"a"://x\n1}') == _map('{"a":1}') == {"a": 1}

    def test_insertion_order(self) -> None:
        assert list(_map('{"b":1,"a":2}')) == ["b", "a"]

    def test_duplicate_key_last_wins_first_position_kept(self) -> None:
        tree = _map('{"a":1,"b":2,"a":3}')
        assert list(tree) == ["a", "b"]
        assert tree["a"] == 3

    def test_trailing_comma(self) -> None:
        assert _map('{"a": 1,}') == {"a": 1}

    @pytest.mark.parametrize("text", ["{}", "{ }", "{ /* empty */ }"])
    def test_empty(self, text: str) -> None:
        assert _map(text) == {}

    def test_nested(self) -> None:
        tree = _map('{"m": {"x": [1, {"y": null}]}, "e": {}, "l": []}')
        assert tree == {"m": {"x": [1, {"y": None}]}, "e": {}, "l": []}

    def test_missing_colon(self) -> None:
        with pytest.raises(ParseError) as ei:
            _map('{"a" 1}')
        err = ei.value
        assert (err.character, err.line, err.column) == ("1", 1, 6)
        assert err.expected == frozenset(":")

    def test_missing_comma(self) -> None:
        with pytest.raises(ParseError) as ei:
            _map('{"a":1 "b":2}')
        assert ei.value.character == '"'
        assert ei.value.expected == frozenset("},")

    def test_missing_value(self) -> None:
        with pytest.raises(ParseError) as ei:
            _map('{"a": }')
        assert ei.value.character == "}"

    def test_unquoted_key(self) -> None:
        with pytest.raises(ParseError) as ei:
            _map("{a: 1}")
        assert ei.value.expected == frozenset('}"')

    def test_lone_slash_is_an_error(self) -> None:
        with pytest.raises(ParseError) as ei:
            _map('{"a": 1 / 2}')
        assert ei.value.character == "/"

    def test_error_position_on_later_line(self) -> None:
        with pytest.raises(ParseError) as ei:
            _map('{\n  "a": 1,\n  "b" 2\n}')
        assert (ei.value.line, ei.value.column) == (3, 7)
        assert "line 3, column 7" in str(ei.value)


class TestArrays:
    def test_blanks_before_values_are_skipped(self) -> None:
        assert _array("[ \t1,\t -2, \t.5]") == [1, -2, 0.5]

    def test_values_of_every_kind(self) -> None:
        values = _array("[1, 2.5, \"s\", 'c', true, null, {}, []]")
        assert [kind_of(v) for v in values] == [
            "Int", "Float", "Str", "Char", "Bool", "Null", "Map", "Array",
        ]

    def test_trailing_comma(self) -> None:
        assert _array("[1, 2,]") == [1, 2]

    @pytest.mark.parametrize("text", ["[]", "[ ]", "[\n]"])
    def test_empty(self, text: str) -> None:
        assert _array(text) == []

    def test_non_value_character(self) -> None:
        with pytest.raises(ParseError) as ei:
            _array("[1, }]")
        assert ei.value.character == "}"
        assert "]" in ei.value.expected

    def test_missing_separator(self) -> None:
        with pytest.raises(ParseError) as ei:
            _array('[1 "x"]')
        assert ei.value.expected == frozenset("],")

    def test_unterminated(self) -> None:
        with pytest.raises(ParseError) as ei:
            _array("[1, 2")
        assert ei.value.character == ""


# ---------------------------------------------------------------------------
# Document roots
# ---------------------------------------------------------------------------


class TestRoots:
    def test_comments_before_first_token(self) -> None:
        assert _map('// header\n/* more */ {"a": 1}') == {"a": 1}

    def test_read_map_rejects_array_root(self) -> None:
        with pytest.raises(ParseError) as ei:
            _map("[1]")
        assert ei.value.expected == frozenset("{")

    def test_read_array_rejects_map_root(self) -> None:
        with pytest.raises(ParseError) as ei:
            _array("{}")
        assert ei.value.expected == frozenset("[")

    def test_read_dispatches_on_root(self) -> None:
        assert read(io.StringIO("[1]")) == [1]
        assert read(io.StringIO('{"a": 1}')) == {"a": 1}

    def test_read_rejects_scalar_root(self) -> None:
        with pytest.raises(ParseError) as ei:
            Reader(io.StringIO("42")).read()
        assert ei.value.expected == frozenset("{[")

    def test_empty_input(self) -> None:
        with pytest.raises(ParseError) as ei:
            _map("")
        assert "end of input" in str(ei.value)

    def test_save_file(self, commented_text: str) -> None:
        tree = _map(commented_text)
        assert tree["player"]["initial"] == Char("A")
        assert tree["player"]["stats"] == {"level": 3, "ratio": 0.75}
        assert tree["pets"] == [{"name": "Rex", "info": {"kind": "dog"}}]
        assert tree["unlocked"] is None
