"""Explicit, injectable cache for class schema data.

Entries are grouped in buckets (``properties``, ``methods``, ``schemas``)
and keyed by qualified class name. Publishing is first-writer-wins: when
two threads build the same entry concurrently, both receive the value that
was stored first. An optional bound evicts the least recently used entry
of a bucket.
"""

from collections import OrderedDict
from collections.abc import Callable
import threading
from typing import Any, TypeVar

from .logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

PROPERTIES = "properties"
METHODS = "methods"
SCHEMAS = "schemas"


class SchemaCache:
    """Thread-safe, append-mostly store of built schema data."""

    def __init__(self, max_entries: int | None = None):
        """Initialize the cache.

        Args:
            max_entries: Maximum entries kept per bucket, None keeps all
        """
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._buckets: dict[str, OrderedDict[str, Any]] = {}
        self._lock = threading.Lock()

    def get_or_build(self, bucket: str, key: str, factory: Callable[[], T]) -> T:
        """Return the cached entry, building and publishing it when missing.

        The factory runs outside the lock. Exceptions raised by the factory
        propagate and nothing is published.
        """
        with self._lock:
            entries = self._buckets.setdefault(bucket, OrderedDict())
            if key in entries:
                entries.move_to_end(key)
                logger.debug("Cache hit", bucket=bucket, key=key)
                return entries[key]

        value = factory()

        with self._lock:
            entries = self._buckets.setdefault(bucket, OrderedDict())
            if key in entries:
                # Another thread published first
                entries.move_to_end(key)
                return entries[key]

            entries[key] = value
            if self.max_entries is not None:
                while len(entries) > self.max_entries:
                    evicted, _ = entries.popitem(last=False)
                    logger.debug("Cache entry evicted", bucket=bucket, key=evicted)

            logger.debug("Cache entry published", bucket=bucket, key=key)
            return value

    def get(self, bucket: str, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._buckets.get(bucket, {}).get(key, default)

    def contains(self, bucket: str, key: str) -> bool:
        with self._lock:
            return key in self._buckets.get(bucket, {})

    def clear(self, bucket: str | None = None) -> None:
        """Drop every entry, or every entry of one bucket."""
        with self._lock:
            if bucket is None:
                self._buckets.clear()
            else:
                self._buckets.pop(bucket, None)

    def size(self, bucket: str) -> int:
        with self._lock:
            return len(self._buckets.get(bucket, {}))

    def __len__(self) -> int:
        with self._lock:
            return sum(len(entries) for entries in self._buckets.values())
