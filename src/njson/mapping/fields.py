"""Record declarations for the object mapper.

A record type opts in with the @mappable decorator, and each field that
takes part in mapping is declared with njson_field():

    @mappable
    class Player:
        name: str = njson_field(required=True)
        level: int = njson_field(path="stats.level")
        pets: list[Pet] = njson_field(default_factory=list)
        notes: str = ""                      # not mapped

The mapper turns these declarations into an immutable FieldDescriptor table
once per type (see mapper.Mapper.descriptors).
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from .paths import split_path

METADATA_KEY = "njson"
_MARKER = "__njson_mappable__"


class FieldKind(Enum):
    SCALAR = auto()
    RECORD = auto()
    RECORD_LIST = auto()


@dataclass(frozen=True, slots=True)
class FieldOptions:
    """Per-field metadata stored in dataclasses.Field.metadata."""

    path: tuple[str, ...] | None
    required: bool


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """How one record field maps onto a value tree.

    Attributes:
        field_name: Attribute name on the record
        path: Map keys from the root to the value
        required: Missing key is an error instead of a default
        kind: Scalar value, nested record, or list of records
        record_type: Mappable type for RECORD / RECORD_LIST fields
        default: Value assigned when an optional key is missing
    """

    field_name: str
    path: tuple[str, ...]
    required: bool = False
    kind: FieldKind = FieldKind.SCALAR
    record_type: type | None = None
    default: Any = None

    @property
    def dotted_path(self) -> str:
        return ".".join(self.path)


def njson_field(*, path: str | None = None, required: bool = False, **kwargs: Any) -> Any:
    """Declare a mapped dataclass field.

    Args:
        path:     Dotted location in the tree (defaults to the field name).
        required: Fail deserialization when the key is missing.
        kwargs:   Passed through to dataclasses.field (default, default_factory, ...).
    """
    segments = split_path(path) if path else None
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[METADATA_KEY] = FieldOptions(path=segments, required=required)
    return dataclasses.field(metadata=metadata, **kwargs)


def mappable(cls: type) -> type:
    """Mark cls as convertible by the object mapper (applies @dataclass if needed)."""
    # a subclass of a dataclass still needs its own fields collected
    if "__dataclass_fields__" not in cls.__dict__:
        cls = dataclass(cls)
    setattr(cls, _MARKER, True)
    return cls


def is_mappable(cls: object) -> bool:
    """True only for types marked with @mappable themselves (the marker is not inherited)."""
    return isinstance(cls, type) and cls.__dict__.get(_MARKER, False) is True


def field_options(f: dataclasses.Field) -> FieldOptions | None:
    """Return the njson metadata of a dataclass field, or None for unmapped fields."""
    return f.metadata.get(METADATA_KEY)
