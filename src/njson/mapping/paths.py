"""Dotted-path helpers over nested NJSON maps."""
from __future__ import annotations

from typing import Any, Sequence

from ..errors import InvalidPathError


def split_path(dotted: str) -> tuple[str, ...]:
    """Split 'a.b.c' into ('a', 'b', 'c'), rejecting empty segments."""
    segments = tuple(dotted.split("."))
    if any(not segment for segment in segments):
        raise ValueError(f"Path {dotted!r} contains an empty segment")
    return segments


def find_container(tree: dict[str, Any], path: Sequence[str]) -> dict[str, Any] | None:
    """Walk path[:-1] and return the map that should hold path[-1].

    Returns None when an intermediate segment is absent.

    Raises:
        InvalidPathError: If an intermediate segment holds a non-map value
    """
    cursor = tree
    for segment in path[:-1]:
        if segment not in cursor:
            return None
        nested = cursor[segment]
        if not isinstance(nested, dict):
            raise InvalidPathError(".".join(path), segment)
        cursor = nested
    return cursor


def get_by_path(tree: dict[str, Any], path: Sequence[str]) -> Any:
    """Return the value at path.

    Raises:
        KeyError: If any segment is absent
        InvalidPathError: If an intermediate segment holds a non-map value
    """
    container = find_container(tree, path)
    if container is None or path[-1] not in container:
        raise KeyError(".".join(path))
    return container[path[-1]]


def set_by_path(tree: dict[str, Any], path: Sequence[str], value: Any) -> None:
    """Set value at path, creating intermediate maps as needed.

    An existing key keeps its position in its map.

    Raises:
        InvalidPathError: If an intermediate segment holds a non-map value
    """
    cursor = tree
    for segment in path[:-1]:
        nested = cursor.setdefault(segment, {})
        if not isinstance(nested, dict):
            raise InvalidPathError(".".join(path), segment)
        cursor = nested
    cursor[path[-1]] = value
