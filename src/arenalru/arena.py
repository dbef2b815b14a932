"""Slot arena: the single owner of entry storage.

Entries live in one growable list of slots and are referred to by their
integer index (a *handle*).  Links between entries are handles too, so they
can be copied freely and never dangle: a released slot goes onto a free list
and any later access through a stale handle is caught by the ``live`` flag.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from arenalru.errors import InvariantError

NIL = -1


@dataclass(slots=True)
class Slot:
    key: Any = None
    value: Any = None
    prev: int = NIL
    next: int = NIL
    live: bool = False
    # Set while the slot is threaded into a list.
    listed: bool = False


class Arena:
    """Table of slots with free-list reuse.

    ``allocations`` and ``releases`` count every ``create`` and ``release``
    over the arena's lifetime; once everything has been released they are
    equal.
    """

    __slots__ = ("_slots", "_free", "_live", "allocations", "releases")

    def __init__(self) -> None:
        self._slots: list[Slot] = []
        self._free: list[int] = []
        self._live = 0
        self.allocations = 0
        self.releases = 0

    def __len__(self) -> int:
        return self._live

    @property
    def capacity_slots(self) -> int:
        """Number of slots in the table, free ones included."""

        return len(self._slots)

    def create(self, key: Any, value: Any) -> int:
        """Allocate a slot for ``(key, value)`` and return its handle."""

        if self._free:
            handle = self._free.pop()
            slot = self._slots[handle]
        else:
            handle = len(self._slots)
            slot = Slot()
            self._slots.append(slot)

        slot.key = key
        slot.value = value
        slot.prev = NIL
        slot.next = NIL
        slot.listed = False
        slot.live = True
        self._live += 1
        self.allocations += 1
        return handle

    def slot(self, handle: int) -> Slot:
        """Return the live slot behind ``handle``."""

        if not isinstance(handle, int) or handle < 0 or handle >= len(self._slots):
            raise InvariantError(f"invalid handle: {handle!r}")
        slot = self._slots[handle]
        if not slot.live:
            raise InvariantError(f"use of released handle: {handle}")
        return slot

    def key(self, handle: int) -> Any:
        return self.slot(handle).key

    def get_value(self, handle: int) -> Any:
        return self.slot(handle).value

    def set_value(self, handle: int, value: Any) -> None:
        """Overwrite the payload; links are untouched."""

        self.slot(handle).value = value

    def release(self, handle: int) -> None:
        """Free the slot behind ``handle``.

        The caller must have unlinked the handle from any list first.
        """

        slot = self.slot(handle)
        if slot.listed:
            raise InvariantError(f"release of handle {handle} while still linked")

        slot.key = None
        slot.value = None
        slot.live = False
        self._free.append(handle)
        self._live -= 1
        self.releases += 1

    def handles(self) -> Iterator[int]:
        """Yield the handles of all live slots in table order."""

        for i, slot in enumerate(self._slots):
            if slot.live:
                yield i

    def clear(self) -> None:
        """Release every live slot, ignoring links (whole-arena teardown)."""

        for handle in list(self.handles()):
            slot = self._slots[handle]
            slot.prev = NIL
            slot.next = NIL
            slot.listed = False
            self.release(handle)
