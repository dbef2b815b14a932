"""FIFO queue built from two stacks.

``enqueue`` pushes onto the inbox.  ``dequeue`` pops the outbox, first
moving the whole inbox across (reversing it) when the outbox is empty.  That
makes dequeue amortized O(1) but occasionally O(n).
"""

from __future__ import annotations

import logging
from typing import Generic, TypeVar

from arenalru.stack import Stack

T = TypeVar("T")

logger = logging.getLogger("arenalru.queue")


class TwoStackQueue(Generic[T]):
    __slots__ = ("_inbox", "_outbox")

    def __init__(self) -> None:
        self._inbox: Stack[T] = Stack()
        self._outbox: Stack[T] = Stack()

    def __len__(self) -> int:
        return len(self._inbox) + len(self._outbox)

    def is_empty(self) -> bool:
        return self._inbox.is_empty() and self._outbox.is_empty()

    def enqueue(self, data: T) -> None:
        self._inbox.push(data)

    def dequeue(self) -> T | None:
        if self._outbox.is_empty():
            if self._inbox.is_empty():
                return None
            moved = len(self._inbox)
            while not self._inbox.is_empty():
                self._outbox.push(self._inbox.pop())  # type: ignore[arg-type]
            logger.debug("reversed %d items onto outbox", moved)
        return self._outbox.pop()
