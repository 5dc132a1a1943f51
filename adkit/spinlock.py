"""A lock that spins, yielding the processor, until it is free."""

from __future__ import annotations

import threading
import time


class SpinLock:
    """Busy-waiting lock; unlocked when created.

    Releasing an unlocked SpinLock is allowed and leaves it unlocked.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._held = False

    def _try_acquire(self) -> bool:
        with self._guard:
            if self._held:
                return False
            self._held = True
            return True

    def acquire(self, blocking: bool = True) -> bool:
        """Take the lock; without blocking, return False if it is held."""
        if not blocking:
            return self._try_acquire()
        while not self._try_acquire():
            time.sleep(0)
        return True

    def release(self) -> None:
        """Free the lock."""
        with self._guard:
            self._held = False

    def locked(self) -> bool:
        """Whether the lock is currently held."""
        with self._guard:
            return self._held

    def __enter__(self) -> "SpinLock":
        self.acquire()
        return self

    def __exit__(self, *args) -> None:
        self.release()