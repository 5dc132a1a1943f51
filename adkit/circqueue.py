"""A growable FIFO queue backed by a ring buffer."""

from __future__ import annotations

from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")

_INITIAL_CAPACITY = 8


class CircQueue(Generic[T]):
    """First-in first-out queue on a ring buffer that doubles when full."""

    def __init__(self) -> None:
        self._elems: List[Optional[T]] = []
        self._head = 0
        self._len = 0

    @property
    def capacity(self) -> int:
        """Number of slots in the ring buffer."""
        return len(self._elems)

    def __len__(self) -> int:
        return self._len

    def enqueue(self, item: T) -> None:
        """Append an item to the tail."""
        if self._len + 1 > self.capacity:
            self._grow()
        self._elems[(self._head + self._len) % self.capacity] = item
        self._len += 1

    def dequeue(self) -> T:
        """Remove and return the item at the head; IndexError if empty."""
        if self._len == 0:
            raise IndexError("dequeue from empty queue")
        item = self._elems[self._head]
        self._head = (self._head + 1) % self.capacity
        self._len -= 1
        return item  # type: ignore[return-value]

    def peek(self) -> T:
        """Return the item at the head without removing it; IndexError if empty."""
        if self._len == 0:
            raise IndexError("peek into empty queue")
        return self._elems[self._head]  # type: ignore[return-value]

    def clear(self) -> None:
        """Drop all items and release the buffer."""
        self._elems = []
        self._head = 0
        self._len = 0

    def _grow(self) -> None:
        old_cap = self.capacity
        new_cap = old_cap * 2 or _INITIAL_CAPACITY
        live = [self._elems[(self._head + i) % old_cap] for i in range(self._len)]
        self._elems = live + [None] * (new_cap - len(live))
        self._head = 0