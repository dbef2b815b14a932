"""Singly-linked stack over an owned chain of nodes."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(slots=True)
class _Node(Generic[T]):
    data: T
    next: _Node[T] | None


class Stack(Generic[T]):
    __slots__ = ("_head", "_size")

    def __init__(self) -> None:
        self._head: _Node[T] | None = None
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[T]:
        """Iterate from the top of the stack down."""

        node = self._head
        while node is not None:
            yield node.data
            node = node.next

    def is_empty(self) -> bool:
        return self._head is None

    def push(self, data: T) -> None:
        self._head = _Node(data, self._head)
        self._size += 1

    def pop(self) -> T | None:
        node = self._head
        if node is None:
            return None
        self._head = node.next
        self._size -= 1
        return node.data

    def peek(self) -> T | None:
        return None if self._head is None else self._head.data
