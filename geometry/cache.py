"""
geometry/cache.py

Per-edge memo of computed geometry, keyed on everything the geometry depends on.
"""

from __future__ import annotations

from typing import Callable, Dict, Hashable, Optional, Tuple, TypeVar

T = TypeVar("T")


class GeometryCache:
    """Stores the last geometry computed for each edge together with its key.

    A lookup whose key differs from the stored one counts as a miss and the
    entry is replaced. Entries are never mutated, only swapped.
    """

    def __init__(self):
        self._entries: Dict[str, Tuple[Hashable, object]] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, edge_id: str, key: Hashable) -> Optional[object]:
        entry = self._entries.get(edge_id)
        if entry is not None and entry[0] == key:
            return entry[1]
        return None

    def store(self, edge_id: str, key: Hashable, value: object) -> None:
        self._entries[edge_id] = (key, value)

    def get_or_compute(self, edge_id: str, key: Hashable, compute: Callable[[], T]) -> T:
        """Return the cached value for ``key`` or compute, store and return it."""
        cached = self.lookup(edge_id, key)
        if cached is not None:
            self.hits += 1
            return cached
        self.misses += 1
        value = compute()
        self.store(edge_id, key, value)
        return value

    def invalidate(self, edge_id: Optional[str] = None) -> None:
        """Drop one edge's entry, or every entry when ``edge_id`` is None."""
        if edge_id is None:
            self._entries.clear()
        else:
            self._entries.pop(edge_id, None)
