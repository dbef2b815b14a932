"""Least-recently-used cache built from an arena, a recency list and a key index.

``set`` threads new entries in at the front of the recency list and, when the
cache is full, evicts the entry at the back.  ``get`` promotes the entry it
finds.  Both are O(1).

Not thread-safe: callers sharing a cache must hold one lock around each
``get``/``set``, because the list, the index and ``count`` are briefly
inconsistent in the middle of an eviction.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from arenalru.arena import Arena
from arenalru.errors import CapacityError, InvariantError
from arenalru.index import KeyIndex
from arenalru.recency import RecencyList

if TYPE_CHECKING:  # pragma: no cover
    from arenalru.config import CacheConfig

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

logger = logging.getLogger("arenalru.cache")


@dataclass(frozen=True, slots=True)
class CacheStats:
    hits: int
    misses: int
    evictions: int
    allocations: int
    releases: int


class LRUCache(Generic[K, V]):
    """Capacity-bounded cache evicting the least-recently-used entry.

    A capacity of zero is allowed: such a cache never stores anything and
    ``set`` is a no-op.
    """

    def __init__(self, capacity: int) -> None:
        if not isinstance(capacity, int) or isinstance(capacity, bool):
            raise CapacityError(f"capacity must be an integer, got {capacity!r}")
        if capacity < 0:
            raise CapacityError(f"capacity must be >= 0, got {capacity}")

        self._capacity = capacity
        self._count = 0
        self._arena = Arena()
        self._recency = RecencyList(self._arena)
        self._index = KeyIndex()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @classmethod
    def from_config(cls, cfg: CacheConfig) -> LRUCache[K, V]:
        return cls(cfg.capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def count(self) -> int:
        return self._count

    @property
    def stats(self) -> CacheStats:
        return CacheStats(
            hits=self._hits,
            misses=self._misses,
            evictions=self._evictions,
            allocations=self._arena.allocations,
            releases=self._arena.releases,
        )

    def __len__(self) -> int:
        return self._count

    def __contains__(self, key: object) -> bool:
        # Membership only; does not count as a use.
        return key in self._index

    def __repr__(self) -> str:
        return f"LRUCache(capacity={self._capacity}, count={self._count})"

    def __enter__(self) -> LRUCache[K, V]:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def get(self, key: K) -> V | None:
        """Return the value for ``key`` and mark it most recently used, or None."""

        handle = self._index.lookup(key)
        if handle is None:
            self._misses += 1
            return None

        self._recency.move_to_front(handle)
        self._hits += 1
        return self._arena.get_value(handle)

    def set(self, key: K, value: V) -> None:
        """Insert or replace ``key``; it becomes the most recently used entry."""

        handle = self._index.lookup(key)
        if handle is not None:
            self._recency.unlink(handle)
            self._arena.set_value(handle, value)
            self._recency.push_front(handle)
            return

        if self._capacity == 0:
            logger.debug("capacity is 0; dropping set of %r", key)
            return

        if self._count == self._capacity:
            self._evict()

        handle = self._arena.create(key, value)
        self._recency.push_front(handle)
        self._index.insert(key, handle)
        self._count += 1

    def _evict(self) -> None:
        victim = self._recency.tail()
        if victim is None:
            raise InvariantError(f"eviction requested from an empty list with count={self._count}")

        key = self._arena.key(victim)
        if self._index.remove(key) != victim:
            raise InvariantError(f"index and recency list disagree about key {key!r}")
        self._recency.unlink(victim)
        self._arena.release(victim)
        self._count -= 1
        self._evictions += 1
        logger.debug("evicted %r (capacity=%d)", key, self._capacity)

    def keys(self) -> list[K]:
        """Keys from most to least recently used. Does not promote anything."""

        return [self._arena.key(h) for h in self._recency]

    def items(self) -> list[tuple[K, V]]:
        """``(key, value)`` pairs from most to least recently used."""

        return [(self._arena.key(h), self._arena.get_value(h)) for h in self._recency]

    def close(self) -> None:
        """Release every live entry exactly once. The cache stays usable (empty)."""

        released = 0
        for key in list(self._index):
            handle = self._index.remove(key)
            assert handle is not None
            self._recency.unlink(handle)
            self._arena.release(handle)
            released += 1

        self._count = 0
        if released:
            logger.debug("released %d entries", released)

    clear = close

    def check_invariants(self) -> None:
        """Raise InvariantError if the index, list, arena and count disagree."""

        self._recency.check()
        sizes = (len(self._index), len(self._recency), len(self._arena))
        if any(n != self._count for n in sizes):
            raise InvariantError(
                f"size mismatch: index={sizes[0]} list={sizes[1]} "
                f"arena={sizes[2]} count={self._count}"
            )
        if self._count > self._capacity:
            raise InvariantError(f"count {self._count} exceeds capacity {self._capacity}")

        for handle in self._recency:
            key = self._arena.key(handle)
            if self._index.lookup(key) != handle:
                raise InvariantError(f"index does not map {key!r} to handle {handle}")
