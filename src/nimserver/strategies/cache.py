"""Bounded per-game cache for solved DP tables."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Callable, Hashable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SolutionCache(Generic[T]):
    """LRU-evicting cache that builds each entry at most once.

    Callers asking for the same missing key concurrently wait on a per-key
    build lock and share the first result; different keys build in parallel.
    """

    def __init__(self, max_entries: int = 1024) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._table: OrderedDict[Hashable, T] = OrderedDict()
        self._building: dict[Hashable, threading.Lock] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get(self, key: Hashable) -> T | None:
        with self._lock:
            return self._lookup(key)

    def get_or_build(self, key: Hashable, builder: Callable[[], T]) -> T:
        with self._lock:
            cached = self._lookup(key)
            if cached is not None:
                return cached
            build_lock = self._building.setdefault(key, threading.Lock())

        with build_lock:
            with self._lock:
                cached = self._table.get(key)
                if cached is not None:
                    self._table.move_to_end(key)
                    return cached
            try:
                value = builder()
                with self._lock:
                    self._store(key, value)
            finally:
                with self._lock:
                    self._building.pop(key, None)
        return value

    def discard(self, key: Hashable) -> bool:
        with self._lock:
            return self._table.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._table.clear()
            self.hits = 0
            self.misses = 0
            self.evictions = 0

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._table

    def __len__(self) -> int:
        with self._lock:
            return len(self._table)

    def stats(self) -> dict[str, float]:
        with self._lock:
            lookups = self.hits + self.misses
            return {
                "entries": len(self._table),
                "max_entries": self.max_entries,
                "hits": self.hits,
                "misses": self.misses,
                "evictions": self.evictions,
                "hit_rate": self.hits / lookups if lookups else 0.0,
            }

    # Callers hold self._lock for both helpers below.
    def _lookup(self, key: Hashable) -> T | None:
        value = self._table.get(key)
        if value is None:
            self.misses += 1
            return None
        self._table.move_to_end(key)
        self.hits += 1
        return value

    def _store(self, key: Hashable, value: T) -> None:
        if key in self._table:
            self._table.move_to_end(key)
        elif len(self._table) >= self.max_entries:
            evicted, _ = self._table.popitem(last=False)
            self.evictions += 1
            logger.debug("Evicted cached solution for %s", evicted)
        self._table[key] = value
