"""Accumulate items into batches that are ready by count, size or time."""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Callable, Deque, Generic, List, Optional, TypeVar

T = TypeVar("T")

Sizer = Callable[[object], int]


class BatcherClosedError(Exception):
    """Raised when a closed batcher is used."""

    def __init__(self) -> None:
        super().__init__("batcher closed")


class Batcher(Generic[T]):
    """Collects items into batches.

    A batch is complete when it holds ``max_items`` items, when the sizes of
    its items reach ``max_bytes``, or when ``get`` has waited ``max_time``
    seconds. A value of zero switches the corresponding condition off.
    ``queue_len`` is the number of complete batches that may wait for a
    reader before producers block; zero means a producer hands each batch
    directly to a reader.

    Items put by one thread come out of ``get`` in the order they were put.
    """

    def __init__(
        self,
        max_time: float = 0,
        max_items: int = 0,
        max_bytes: int = 0,
        queue_len: int = 0,
        sizer: Optional[Sizer] = None,
    ) -> None:
        if max_bytes > 0 and sizer is None:
            raise ValueError("batcher: must provide nbytes function")
        self.max_time = max_time
        self.max_items = max_items
        self.max_bytes = max_bytes
        self.queue_len = queue_len
        self._sizer = sizer
        self._items: List[T] = []
        self._nbytes = 0
        self._ready: Deque[List[T]] = deque()
        self._cond = threading.Condition()
        self._closed = False

    def _is_ready(self) -> bool:
        if self.max_items and len(self._items) >= self.max_items:
            return True
        if self.max_bytes and self._nbytes >= self.max_bytes:
            return True
        return False

    def _take_items(self) -> List[T]:
        items = self._items
        self._items = []
        self._nbytes = 0
        return items

    def _push(self) -> None:
        """Queue the current batch, blocking while the queue is over capacity."""
        self._ready.append(self._take_items())
        self._cond.notify_all()
        while len(self._ready) > self.queue_len and not self._closed:
            self._cond.wait()

    def put(self, item: T) -> None:
        """Add an item, completing the batch if it became ready."""
        with self._cond:
            if self._closed:
                raise BatcherClosedError()
            self._items.append(item)
            if self._sizer is not None:
                self._nbytes += self._sizer(item)
            if self._is_ready():
                self._push()

    def get(self) -> List[T]:
        """Return the next batch, blocking until one is complete."""
        deadline = time.monotonic() + self.max_time if self.max_time > 0 else None
        with self._cond:
            while not self._ready:
                if self._closed:
                    raise BatcherClosedError()
                if deadline is None:
                    self._cond.wait()
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return self._take_items()
                self._cond.wait(remaining)
            batch = self._ready.popleft()
            self._cond.notify_all()
            return batch

    def flush(self) -> None:
        """Complete the batch currently being built, even if it is empty."""
        with self._cond:
            if self._closed:
                raise BatcherClosedError()
            self._push()

    def close(self) -> None:
        """Dispose of the batcher, discarding pending items and batches."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._items = []
            self._nbytes = 0
            self._ready.clear()
            self._cond.notify_all()

    @property
    def closed(self) -> bool:
        """Whether the batcher has been closed."""
        with self._cond:
            return self._closed