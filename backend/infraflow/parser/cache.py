# backend/infraflow/parser/cache.py
"""
Bounded LRU cache for component detection results.
"""

from collections import OrderedDict
from threading import Lock
from typing import Any, Dict, Generic, Hashable, Optional, TypeVar

V = TypeVar("V")

_MISSING = object()


class LRUCache(Generic[V]):
    """
    Least-recently-used cache with a fixed capacity.

    Every access goes through one lock so concurrent inserts into a full
    cache cannot corrupt entries. Values are stored as given; callers
    store immutable values (tuples) so a cached result cannot be mutated
    through a returned reference.
    """

    def __init__(self, max_size: int = 256):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._max_size = max_size
        self._data: "OrderedDict[Hashable, V]" = OrderedDict()
        self._lock = Lock()
        self._hits = 0
        self._misses = 0

    @property
    def max_size(self) -> int:
        return self._max_size

    def get(self, key: Hashable, default: Optional[V] = None) -> Optional[V]:
        with self._lock:
            value = self._data.get(key, _MISSING)
            if value is _MISSING:
                self._misses += 1
                return default
            self._data.move_to_end(key)
            self._hits += 1
            return value

    def put(self, key: Hashable, value: V) -> None:
        with self._lock:
            if key in self._data:
                self._data.move_to_end(key)
            self._data[key] = value
            while len(self._data) > self._max_size:
                self._data.popitem(last=False)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "hits": self._hits,
                "misses": self._misses,
                "size": len(self._data),
                "max_size": self._max_size,
            }
