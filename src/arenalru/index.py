from __future__ import annotations

from collections.abc import Hashable, Iterator


class KeyIndex:
    """Hash map from cache key to arena handle.

    Insertion order carries no meaning here; recency lives in the list.
    """

    __slots__ = ("_map",)

    def __init__(self) -> None:
        self._map: dict[Hashable, int] = {}

    def __len__(self) -> int:
        return len(self._map)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._map

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._map)

    def lookup(self, key: Hashable) -> int | None:
        return self._map.get(key)

    def insert(self, key: Hashable, handle: int) -> None:
        """Map ``key`` to ``handle`` (last write wins)."""

        self._map[key] = handle

    def remove(self, key: Hashable) -> int | None:
        return self._map.pop(key, None)

    def clear(self) -> None:
        self._map.clear()
