"""
Bounded, thread-safe LRU store.
"""

import threading
from collections import OrderedDict
from typing import Callable, Generic, Hashable, Mapping, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

# Default max size for the cache
DEFAULT_MAX_SIZE = 1024


class LRUCache(Generic[K, V]):
    """
    Fixed-capacity map evicting the least recently used key.

    Every operation runs under one lock per instance. Reading or writing
    an existing key makes it the most recently used one; inserting past
    capacity evicts exactly one entry.
    """

    def __init__(self,
                 max_size: Optional[int] = None,
                 default_size: int = DEFAULT_MAX_SIZE,
                 on_evict: Optional[Callable[[K, V], None]] = None):
        """
        Initialize the store.

        Args:
            max_size: Maximum number of items, non-positive values use default_size
            default_size: Capacity used when max_size is unset
            on_evict: Called with (key, value) for each capacity eviction
        """
        self.max_size = max_size if max_size is not None and max_size > 0 else default_size
        self._map: "OrderedDict[K, V]" = OrderedDict()
        self._lock = threading.Lock()
        self._on_evict = on_evict

    def __len__(self) -> int:
        with self._lock:
            return len(self._map)

    def _touch(self, key: K) -> Optional[V]:
        value = self._map.get(key)
        if value is not None:
            self._map.move_to_end(key)
        return value

    def _insert(self, key: K, value: V) -> Optional[V]:
        previous = self._map.get(key)
        self._map[key] = value
        self._map.move_to_end(key)
        if len(self._map) > self.max_size:
            evicted_key, evicted = self._map.popitem(last=False)
            if self._on_evict is not None:
                self._on_evict(evicted_key, evicted)
        return previous

    def get(self, key: K) -> Optional[V]:
        """Return the value mapped to key, or None."""
        with self._lock:
            return self._touch(key)

    def contains_key(self, key: K) -> bool:
        with self._lock:
            return key in self._map

    def put(self, key: K, value: V) -> None:
        """Map key to value."""
        with self._lock:
            self._insert(key, value)

    def get_and_put(self, key: K, value: V) -> Optional[V]:
        """Map key to value, returning the previous value."""
        with self._lock:
            return self._insert(key, value)

    def put_all(self, mapping: Mapping[K, V]) -> None:
        """Copy all mappings into the store, replacing existing keys."""
        with self._lock:
            for key, value in mapping.items():
                self._insert(key, value)

    def put_if_absent(self, key: K, value: V) -> bool:
        """Map key to value unless already mapped; True if inserted."""
        with self._lock:
            if self._touch(key) is not None:
                return False
            self._insert(key, value)
            return True

    def remove(self, key: K) -> bool:
        """Remove key; True if it was present."""
        with self._lock:
            return self._map.pop(key, None) is not None

    def remove_with_value(self, key: K, expected: V) -> bool:
        """Remove key only while it is mapped to expected."""
        with self._lock:
            if key in self._map and self._map[key] == expected:
                del self._map[key]
                return True
            return False

    def get_and_remove(self, key: K) -> Optional[V]:
        """Remove key, returning the value it was mapped to."""
        with self._lock:
            return self._map.pop(key, None)

    def clear(self) -> None:
        """Remove all cached items."""
        with self._lock:
            self._map.clear()

    remove_all = clear
