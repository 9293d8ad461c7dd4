"""Value model for NJSON trees.

Parsed data is represented with native Python types so trees can be used
directly by callers:

    Int    -> int          Bool  -> bool
    Float  -> float        Null  -> None
    Str    -> str          Map   -> dict[str, Value]  (insertion ordered)
    Char   -> Char         Array -> list[Value]

Char is the only dedicated type; it keeps single-character literals
distinguishable from one-character strings so that a tree survives a
write/read round trip with its kinds intact.
"""
from __future__ import annotations

from typing import Dict, List, Union

INT_MIN = -(2**63)
INT_MAX = 2**63 - 1


class Char(str):
    """A single Unicode character read from a '...' literal."""

    __slots__ = ()

    def __new__(cls, value: str) -> "Char":
        if len(value) != 1:
            raise ValueError(f"Char requires exactly one character, got {value!r}")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"Char({str.__repr__(self)})"


Scalar = Union[int, float, str, Char, bool, None]
Value = Union[Scalar, Dict[str, "Value"], List["Value"]]
NJsonMap = Dict[str, Value]
NJsonArray = List[Value]


def kind_of(value: object) -> str:
    """Return the variant name of a value: Int, Float, Str, Char, Bool, Null, Map or Array."""
    # bool before int, Char before str: both are subclasses
    if value is None:
        return "Null"
    if isinstance(value, bool):
        return "Bool"
    if isinstance(value, int):
        return "Int"
    if isinstance(value, float):
        return "Float"
    if isinstance(value, Char):
        return "Char"
    if isinstance(value, str):
        return "Str"
    if isinstance(value, dict):
        return "Map"
    if isinstance(value, list):
        return "Array"
    raise TypeError(f"{type(value).__name__} is not an NJSON value")


def same_value(a: object, b: object) -> bool:
    """Deep equality that also compares kinds (1 != 1.0, 'a' != Char('a'), True != 1)."""
    if kind_of(a) != kind_of(b):
        return False
    if isinstance(a, dict):
        return list(a) == list(b) and all(same_value(a[k], b[k]) for k in a)
    if isinstance(a, list):
        return len(a) == len(b) and all(same_value(x, y) for x, y in zip(a, b))
    return a == b
