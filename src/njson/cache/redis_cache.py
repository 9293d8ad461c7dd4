"""Redis-backed cache of parsed NJSON documents.

A parsed tree is stored under a key derived from the file's resolved path,
size and modification time, so any edit to the file produces a new key and
stale entries simply age out. Trees are stored as compact NJSON text, which
keeps every value kind (int vs float, Char vs str) intact.

Key schema:
    njson:cache:{sha256(path + size + mtime)}

TTL defaults to 300 seconds. Set NJSON_CACHE_TTL in the environment to
override.

Usage::

    cache = DocumentCache(url=settings.redis_url, ttl=settings.cache_ttl)
    tree = cache.load("save.njson")     # parses on miss, then stores
"""
from __future__ import annotations

import hashlib
import json
import logging
import os
from pathlib import Path
from typing import Any

from ..document import load, loads
from ..parsers import writer
from ..values import NJsonArray, NJsonMap

logger = logging.getLogger(__name__)

KEY_PREFIX = "njson:cache:"


def make_cache_key(path: str, params: dict[str, Any]) -> str:
    """Derive a stable cache key from a path and the parameters describing its content."""
    raw = json.dumps({"path": path, "params": params}, sort_keys=True)
    digest = hashlib.sha256(raw.encode()).hexdigest()[:32]
    return f"{KEY_PREFIX}{digest}"


def file_cache_key(path: str | os.PathLike) -> str:
    """Cache key for the current content of a file (resolved path, size, mtime)."""
    resolved = Path(path).resolve()
    st = resolved.stat()
    return make_cache_key(str(resolved), {"size": st.st_size, "mtime_ns": st.st_mtime_ns})


class DocumentCache:
    """Parsed-document cache that degrades to a pass-through without Redis.

    Redis failures are logged and treated as misses; parse errors and file
    errors from the underlying load are never masked.

    Args:
        url:  Redis connection URL (redis://host:port/db).
        ttl:  Time-to-live in seconds for cached trees.
    """

    def __init__(self, url: str = "redis://localhost:6379/0", ttl: int = 300) -> None:
        self._url = url
        self._ttl = ttl
        self._client: Any = None
        self._connect()

    def _connect(self) -> None:
        try:
            import redis  # type: ignore[import-untyped]

            self._client = redis.Redis.from_url(self._url, decode_responses=True)
            self._client.ping()
            logger.debug("Redis document cache connected: %s", self._url)
        except Exception as exc:
            logger.warning("Redis unavailable, document cache disabled: %s", exc)
            self._client = None

    @property
    def available(self) -> bool:
        """True when the Redis connection is healthy."""
        return self._client is not None

    # ------------------------------------------------------------------
    # Keyed access
    # ------------------------------------------------------------------

    def fetch(self, key: str) -> NJsonMap | NJsonArray | None:
        """Return the tree cached under key, or None on miss / Redis error."""
        if self._client is None:
            return None
        try:
            text = self._client.get(key)
        except Exception as exc:
            logger.warning("Cache fetch failed for %r: %s", key, exc)
            return None
        if text is None:
            return None
        return loads(text)

    def store(self, key: str, tree: NJsonMap | NJsonArray) -> bool:
        """Store tree under key with the configured TTL. Returns True on success."""
        if self._client is None:
            return False
        text = writer.dumps(tree, indent=0)
        try:
            self._client.setex(key, self._ttl, text)
        except Exception as exc:
            logger.warning("Cache store failed for %r: %s", key, exc)
            return False
        return True

    def flush(self) -> int:
        """Delete every njson cache entry. Returns the number of keys deleted."""
        if self._client is None:
            return 0
        try:
            keys = self._client.keys(f"{KEY_PREFIX}*")
            return self._client.delete(*keys) if keys else 0
        except Exception as exc:
            logger.warning("Cache flush failed: %s", exc)
            return 0

    # ------------------------------------------------------------------
    # File access
    # ------------------------------------------------------------------

    def load(self, path: str | os.PathLike) -> NJsonMap | NJsonArray:
        """Return the parsed tree of a file, served from Redis when unchanged."""
        key = file_cache_key(path)
        tree = self.fetch(key)
        if tree is not None:
            logger.debug("Cache hit for %s", path)
            return tree
        tree = load(path)
        self.store(key, tree)
        return tree
