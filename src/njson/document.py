"""Document I/O: the entry points callers use.

Sources and destinations are either a filesystem path or an already open
stream. Paths are opened and closed here; streams belong to the caller and
are never closed. Binary streams are wrapped for decoding with the configured
encoding.

Usage::

    from njson.document import deserialize, serialize

    save = deserialize("save.njson", SaveGame)
    save.level += 1
    serialize("save.njson", save)
"""
from __future__ import annotations

import io
import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any, Iterator, TextIO, TypeVar, Union

from .config import settings
from .mapping.mapper import Mapper, default_mapper
from .parsers import reader, writer
from .values import NJsonArray, NJsonMap, Value

logger = logging.getLogger(__name__)

T = TypeVar("T")

Source = Union[str, os.PathLike, IO[str], IO[bytes]]


def _is_path(target: object) -> bool:
    return isinstance(target, (str, os.PathLike))


@contextmanager
def _text_stream(target: Source, mode: str) -> Iterator[TextIO]:
    """Yield a text stream for target, opening paths and wrapping binary streams."""
    if _is_path(target):
        with open(Path(target), mode, encoding=settings.encoding, newline="") as fh:
            yield fh
        return

    if isinstance(target, io.TextIOBase):
        yield target  # type: ignore[misc]
        return

    # binary stream: decode without taking ownership of it
    wrapper = io.TextIOWrapper(target, encoding=settings.encoding, newline="")  # type: ignore[arg-type]
    try:
        yield wrapper
    finally:
        wrapper.flush()
        wrapper.detach()


# ---------------------------------------------------------------------------
# Value trees
# ---------------------------------------------------------------------------


def load(source: Source) -> NJsonMap | NJsonArray:
    """Parse a map- or array-rooted document."""
    with _text_stream(source, "r") as fh:
        tree = reader.read(fh)
    logger.debug("Loaded %s from %s", type(tree).__name__, source)
    return tree


def load_map(source: Source) -> NJsonMap:
    """Parse a map-rooted document."""
    with _text_stream(source, "r") as fh:
        return reader.read_map(fh)


def load_array(source: Source) -> NJsonArray:
    """Parse an array-rooted document."""
    with _text_stream(source, "r") as fh:
        return reader.read_array(fh)


def loads(text: str) -> NJsonMap | NJsonArray:
    """Parse a document held in a string."""
    return reader.read(io.StringIO(text))


def dump(value: Value, dest: Source, indent: int | None = None) -> None:
    """Write value as a document to dest.

    The document is rendered before dest is opened, so a value the writer
    rejects never leaves a truncated file behind.
    """
    text = dumps(value, indent=indent)
    with _text_stream(dest, "w") as fh:
        fh.write(text)
    logger.debug("Wrote %s to %s", type(value).__name__, dest)


def dumps(value: Value, indent: int | None = None) -> str:
    """Render value as a document string."""
    return writer.dumps(value, indent=settings.indent if indent is None else indent)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


def deserialize(source: Source, cls: type[T], mapper: Mapper = default_mapper) -> T:
    """Read a map-rooted document and map it onto a new instance of cls."""
    mapper.descriptors(cls)  # reject non-mappable types before touching the source
    return mapper.map(load_map(source), cls)


def serialize(
    dest: Source,
    record: Any,
    mapper: Mapper = default_mapper,
    indent: int | None = None,
) -> None:
    """Unmap record and write it as a document to dest."""
    dump(mapper.unmap(record), dest, indent=indent)
