"""Double-ended queue whose nodes live in an arena.

Shares the slot/handle linkage with the LRU recency list: each node is an
arena slot and the deque is a :class:`~arenalru.recency.SlotList` over them.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, TypeVar

from arenalru.arena import Arena
from arenalru.recency import SlotList

T = TypeVar("T")


class ArenaDeque(Generic[T]):
    __slots__ = ("_arena", "_list")

    def __init__(self, arena: Arena | None = None) -> None:
        self._arena = arena if arena is not None else Arena()
        self._list = SlotList(self._arena)

    def __len__(self) -> int:
        return len(self._list)

    def __iter__(self) -> Iterator[T]:
        for handle in self._list:
            yield self._arena.get_value(handle)

    def is_empty(self) -> bool:
        return len(self._list) == 0

    def push_front(self, data: T) -> None:
        self._list.push_front(self._arena.create(None, data))

    def push_back(self, data: T) -> None:
        self._list.push_back(self._arena.create(None, data))

    def pop_front(self) -> T | None:
        return self._pop(self._list.front_handle())

    def pop_back(self) -> T | None:
        return self._pop(self._list.back_handle())

    def peek_front(self) -> T | None:
        handle = self._list.front_handle()
        return None if handle is None else self._arena.get_value(handle)

    def peek_back(self) -> T | None:
        handle = self._list.back_handle()
        return None if handle is None else self._arena.get_value(handle)

    def _pop(self, handle: int | None) -> T | None:
        if handle is None:
            return None
        data = self._arena.get_value(handle)
        self._list.unlink(handle)
        self._arena.release(handle)
        return data

    def clear(self) -> None:
        for handle in list(self._list):
            self._list.unlink(handle)
            self._arena.release(handle)
