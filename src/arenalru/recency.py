"""Intrusive doubly-linked lists over arena slots.

The link fields (``prev``/``next``) live inside the arena slots; a list only
remembers its two ends and its length.  ``next`` points from the front
towards the back, ``prev`` from the back towards the front.
"""

from __future__ import annotations

from collections.abc import Iterator

from arenalru.arena import NIL, Arena
from arenalru.errors import InvariantError


class SlotList:
    """Doubly-linked sequence of arena handles with O(1) edits at any position."""

    __slots__ = ("_arena", "_front", "_back", "_count")

    def __init__(self, arena: Arena) -> None:
        self._arena = arena
        self._front = NIL
        self._back = NIL
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[int]:
        handle = self._front
        while handle != NIL:
            nxt = self._arena.slot(handle).next
            yield handle
            handle = nxt

    def __reversed__(self) -> Iterator[int]:
        handle = self._back
        while handle != NIL:
            prv = self._arena.slot(handle).prev
            yield handle
            handle = prv

    def front_handle(self) -> int | None:
        return None if self._front == NIL else self._front

    def back_handle(self) -> int | None:
        return None if self._back == NIL else self._back

    def push_front(self, handle: int) -> None:
        slot = self._arena.slot(handle)
        if slot.listed:
            raise InvariantError(f"push of handle {handle} that is already linked")

        slot.prev = NIL
        slot.next = self._front
        if self._front == NIL:
            self._back = handle
        else:
            self._arena.slot(self._front).prev = handle
        self._front = handle
        slot.listed = True
        self._count += 1

    def push_back(self, handle: int) -> None:
        slot = self._arena.slot(handle)
        if slot.listed:
            raise InvariantError(f"push of handle {handle} that is already linked")

        slot.next = NIL
        slot.prev = self._back
        if self._back == NIL:
            self._front = handle
        else:
            self._arena.slot(self._back).next = handle
        self._back = handle
        slot.listed = True
        self._count += 1

    def unlink(self, handle: int) -> None:
        """Remove ``handle`` from wherever it sits, joining its neighbours."""

        slot = self._arena.slot(handle)
        if not slot.listed:
            raise InvariantError(f"unlink of handle {handle} that is not linked")

        if slot.prev == NIL:
            self._front = slot.next
        else:
            self._arena.slot(slot.prev).next = slot.next

        if slot.next == NIL:
            self._back = slot.prev
        else:
            self._arena.slot(slot.next).prev = slot.prev

        slot.prev = NIL
        slot.next = NIL
        slot.listed = False
        self._count -= 1

    def check(self) -> None:
        """Walk the list both ways and raise InvariantError on any inconsistency."""

        if (self._front == NIL) != (self._count == 0) or (self._back == NIL) != (self._count == 0):
            raise InvariantError(
                f"list ends disagree with count={self._count} "
                f"(front={self._front}, back={self._back})"
            )

        seen: set[int] = set()
        last = NIL
        handle = self._front
        while handle != NIL:
            if handle in seen or len(seen) > self._count:
                raise InvariantError("cycle detected walking front to back")
            slot = self._arena.slot(handle)
            if slot.prev != last:
                raise InvariantError(f"broken back-link at handle {handle}")
            seen.add(handle)
            last = handle
            handle = slot.next

        if len(seen) != self._count or last != self._back:
            raise InvariantError(
                f"forward walk found {len(seen)} entries ending at {last}, "
                f"expected {self._count} ending at {self._back}"
            )

        steps = sum(1 for _ in reversed(self))
        if steps != self._count:
            raise InvariantError(f"backward walk found {steps} entries, expected {self._count}")


class RecencyList(SlotList):
    """Most-recently-used order: front is the newest, back the eviction victim."""

    __slots__ = ()

    def tail(self) -> int | None:
        """Peek at the least-recently-used handle."""

        return self.back_handle()

    def move_to_front(self, handle: int) -> None:
        if handle == self._front:
            return
        self.unlink(handle)
        self.push_front(handle)
