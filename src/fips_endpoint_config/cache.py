"""Cache collaborators for memoizing resolved configuration across instances.

CacheInterface is the only contract the providers depend on. Two
implementations ship with the package: an in-process LRU cache and a
JSON file cache that survives process restarts.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from collections import OrderedDict
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class CacheInterface(Protocol):
    """Key/value cache consumed by providers.cache()."""

    def get(self, key: str) -> Any:
        """Return the cached value for key, or None when absent or expired."""

    def set(self, key: str, value: Any, ttl: float = 0) -> None:
        """Store value under key; a ttl of 0 means no expiry."""

    def remove(self, key: str) -> None:
        """Drop key from the cache if present."""


def is_cache(value: object) -> bool:
    """Return True if value structurally satisfies CacheInterface."""
    return all(callable(getattr(value, name, None)) for name in ("get", "set", "remove"))


class LruCache:
    """Thread-safe in-memory LRU cache with optional per-entry TTL.

    The least recently used entry is evicted once capacity is exceeded.
    Expired entries are pruned when read.
    """

    def __init__(self, capacity: int = 1000) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._store: OrderedDict[str, tuple[float | None, Any]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Any:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at is not None and time.monotonic() >= expires_at:
                del self._store[key]
                return None
            self._store.move_to_end(key)
            return value

    def set(self, key: str, value: Any, ttl: float = 0) -> None:
        expires_at = time.monotonic() + ttl if ttl > 0 else None
        with self._lock:
            self._store[key] = (expires_at, value)
            self._store.move_to_end(key)
            while len(self._store) > self.capacity:
                evicted, _ = self._store.popitem(last=False)
                logger.debug("Evicted cache entry %s", evicted)

    def remove(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


class JsonFileCache:
    """File-backed cache storing one JSON document per key.

    Pydantic models are written with ``model_dump(mode="json")`` and come back
    as plain dicts, so callers must accept the serialized form on a hit.
    """

    def __init__(self, base_path: str) -> None:
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        """Return the file for key, which must be a plain file stem.

        Raises:
            ValueError: If key is empty, "." or "..", or contains a path separator.
        """
        if key in ("", ".", "..") or Path(key).name != key or "/" in key or "\\" in key:
            raise ValueError(f"Invalid cache key {key!r}: must not contain path separators")
        return self.base_path / f"{key}.json"

    def get(self, key: str) -> Any:
        """Load the value stored under key.

        Returns:
            The decoded JSON value, or None when missing, expired or corrupt.
        """
        file_path = self._path_for(key)
        if not file_path.exists():
            return None
        try:
            data = json.loads(file_path.read_text(encoding="utf-8"))
            expires_at = data.get("expires_at")
            value = data["value"]
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, KeyError, AttributeError) as exc:
            logger.warning("Ignoring corrupt cache file %s: %s", file_path, exc)
            return None
        if expires_at is not None and time.time() >= expires_at:
            file_path.unlink(missing_ok=True)
            return None
        return value

    def set(self, key: str, value: Any, ttl: float = 0) -> None:
        """Persist value under key.

        Args:
            key: Cache key, used as the file stem.
            value: A pydantic model or any JSON-serializable value.
            ttl: Lifetime in seconds; 0 stores without expiry.
        """
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json")
        document = {
            "value": value,
            "expires_at": time.time() + ttl if ttl > 0 else None,
        }
        file_path = self._path_for(key)
        file_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        logger.debug("Saved cache entry %s to %s", key, file_path)

    def remove(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)

    def __len__(self) -> int:
        return sum(1 for _ in self.base_path.glob("*.json"))
