"""Object mapper — converts between value trees and @mappable records.

Usage::

    mapper = Mapper()
    player = mapper.map(tree, Player)
    tree = mapper.unmap(player)

Descriptor tables are built on first use of a type and memoized; they never
change afterwards.
"""
from __future__ import annotations

import copy
import dataclasses
import logging
import types
import typing
from typing import Any, TypeVar, Union

from ..errors import MissingRequiredFieldError, NotMappableTypeError
from .fields import FieldDescriptor, FieldKind, field_options, is_mappable
from .paths import find_container, set_by_path

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING_DEFAULTS: dict[Any, Any] = {bool: False, str: "", int: 0, float: 0.0}


def _unwrap_optional(hint: Any) -> Any:
    """Return X for Optional[X] / X | None, else hint unchanged."""
    if typing.get_origin(hint) in (Union, types.UnionType):
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def _classify(hint: Any) -> tuple[FieldKind, type | None]:
    inner = _unwrap_optional(hint)
    if is_mappable(inner):
        return FieldKind.RECORD, inner
    if typing.get_origin(inner) is list:
        args = typing.get_args(inner)
        if len(args) == 1 and is_mappable(args[0]):
            return FieldKind.RECORD_LIST, args[0]
    return FieldKind.SCALAR, None


def _detached(value: Any) -> Any:
    """Copy containers so record graphs and value trees never share them."""
    if isinstance(value, (dict, list)):
        return copy.deepcopy(value)
    return value


class Mapper:
    """Builds descriptor tables and maps value trees to records and back.

    Args:
        common: Optional @mappable type whose fields are added in front of
                every type's own fields (cross-cutting fields shared by all
                records, e.g. a format version). A type that declares a
                field with the same name keeps its own declaration.
                Without it the table holds only the type's own fields;
                default_mapper is built this way.
    """

    def __init__(self, common: type | None = None) -> None:
        if common is not None and not is_mappable(common):
            raise NotMappableTypeError(common)
        self._common = common
        self._descriptors: dict[type, tuple[FieldDescriptor, ...]] = {}

    # ------------------------------------------------------------------
    # Descriptor tables
    # ------------------------------------------------------------------

    def descriptors(self, cls: type) -> tuple[FieldDescriptor, ...]:
        """Return the (memoized) field-descriptor table for a mappable type."""
        if not is_mappable(cls):
            raise NotMappableTypeError(cls)
        table = self._descriptors.get(cls)
        if table is None:
            table = self._build(cls)
            self._descriptors[cls] = table
            logger.debug(
                "Built %d field descriptors for %s", len(table), cls.__qualname__
            )
        return table

    def _build(self, cls: type) -> tuple[FieldDescriptor, ...]:
        own = self._own_descriptors(cls)
        if self._common is None or self._common is cls:
            return own
        names = {d.field_name for d in own}
        shared = tuple(
            d for d in self._own_descriptors(self._common) if d.field_name not in names
        )
        return shared + own

    @staticmethod
    def _own_descriptors(cls: type) -> tuple[FieldDescriptor, ...]:
        hints = typing.get_type_hints(cls)
        table: list[FieldDescriptor] = []
        for f in dataclasses.fields(cls):
            options = field_options(f)
            if options is None:
                continue
            hint = hints.get(f.name, Any)
            kind, record_type = _classify(hint)
            table.append(
                FieldDescriptor(
                    field_name=f.name,
                    path=options.path or (f.name,),
                    required=options.required,
                    kind=kind,
                    record_type=record_type,
                    default=_MISSING_DEFAULTS.get(hint),
                )
            )
        return tuple(table)

    # ------------------------------------------------------------------
    # Tree -> record
    # ------------------------------------------------------------------

    def map(self, tree: dict[str, Any], cls: type[T]) -> T:
        """Build an instance of cls from a map-rooted value tree."""
        table = self.descriptors(cls)
        if not isinstance(tree, dict):
            raise TypeError(
                f"{cls.__qualname__} must be mapped from a map, got {type(tree).__name__}"
            )

        init_names = self._init_names(cls)
        init_values: dict[str, Any] = {}
        late_values: dict[str, Any] = {}
        for descriptor in table:
            value = self._read_field(tree, descriptor)
            if descriptor.field_name in init_names:
                init_values[descriptor.field_name] = value
            else:
                late_values[descriptor.field_name] = value

        record = cls(**init_values)
        for name, value in late_values.items():
            setattr(record, name, value)
        return record

    @staticmethod
    def _init_names(cls: type) -> frozenset[str]:
        return frozenset(f.name for f in dataclasses.fields(cls) if f.init)

    def _read_field(self, tree: dict[str, Any], descriptor: FieldDescriptor) -> Any:
        path = descriptor.path
        container = find_container(tree, path)
        if container is None or path[-1] not in container:
            if descriptor.required:
                raise MissingRequiredFieldError(descriptor.dotted_path)
            return descriptor.default

        value = container[path[-1]]
        if descriptor.kind is FieldKind.RECORD and value is not None:
            return self.map(value, descriptor.record_type)
        if descriptor.kind is FieldKind.RECORD_LIST and value is not None:
            return [self.map(element, descriptor.record_type) for element in value]
        return _detached(value)

    # ------------------------------------------------------------------
    # Record -> tree
    # ------------------------------------------------------------------

    def unmap(self, record: Any) -> dict[str, Any]:
        """Build a fresh map-rooted value tree from a mappable record."""
        table = self.descriptors(type(record))
        tree: dict[str, Any] = {}
        for descriptor in table:
            value = getattr(record, descriptor.field_name, descriptor.default)
            if descriptor.kind is FieldKind.RECORD and value is not None:
                value = self.unmap(value)
            elif descriptor.kind is FieldKind.RECORD_LIST and value is not None:
                value = [self.unmap(element) for element in value]
            else:
                value = _detached(value)
            set_by_path(tree, descriptor.path, value)
        return tree


# Shared instance used when no mapper is passed explicitly
default_mapper = Mapper()
