"""Helpers for running work in parallel and caching results once per key."""

from __future__ import annotations

import random
import threading
from collections import deque
from typing import (
    Callable,
    Deque,
    Dict,
    Generic,
    Hashable,
    List,
    Optional,
    Set,
    TypeVar,
)

T = TypeVar("T", bound=Hashable)
K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class Queue:
    """Runs work items in parallel with a bound on how many are active.

    Items beyond ``max_active`` wait in a backlog and are started, in the
    order they were added, as running items finish.
    """

    def __init__(self, max_active: int) -> None:
        if max_active < 1:
            raise ValueError(
                f"Queue called with nonpositive limit ({max_active})"
            )
        self.max_active = max_active
        self._lock = threading.Lock()
        self._active = 0
        self._backlog: Deque[Callable[[], object]] = deque()
        self._idle: Optional[threading.Event] = None

    def add(self, fn: Callable[[], object]) -> None:
        """Schedule fn; the queue stays non-idle until it and later work finish."""
        with self._lock:
            if self._active == self.max_active:
                self._backlog.append(fn)
                return
            if self._active == 0:
                self._idle = None
            self._active += 1
        threading.Thread(target=self._run, args=(fn,), daemon=True).start()

    def _next(self) -> Optional[Callable[[], object]]:
        with self._lock:
            if self._backlog:
                return self._backlog.popleft()
            self._active -= 1
            if self._active == 0 and self._idle is not None:
                self._idle.set()
            return None

    def _run(self, fn: Callable[[], object]) -> None:
        error: Optional[BaseException] = None
        current: Optional[Callable[[], object]] = fn
        while current is not None:
            try:
                current()
            except Exception as exc:  # keep draining the backlog
                if error is None:
                    error = exc
            current = self._next()
        if error is not None:
            raise error

    def idle(self) -> threading.Event:
        """Return an event that is set once no work is active or queued."""
        with self._lock:
            if self._idle is None:
                self._idle = threading.Event()
                if self._active == 0:
                    self._idle.set()
            return self._idle


class Work(Generic[T]):
    """A set of hashable items, each processed at most once, in parallel."""

    def __init__(self) -> None:
        self._fn: Optional[Callable[[T], object]] = None
        self._running = 0
        self._cond = threading.Condition()
        self._added: Set[T] = set()
        self._todo: List[T] = []
        self._waiting = 0
        self._error: Optional[BaseException] = None

    def add(self, item: T) -> None:
        """Add item to the set unless it has been added before."""
        with self._cond:
            if item in self._added:
                return
            self._added.add(item)
            self._todo.append(item)
            if self._waiting > 0:
                self._cond.notify()

    def do(self, n: int, fn: Callable[[T], object]) -> None:
        """Run fn on every item with at most n calls at a time.

        Returns when all items, including those fn adds, are processed.
        If fn raises, the remaining work is abandoned and the first
        exception is raised here. May be called only once.
        """
        if n < 1:
            raise ValueError("Work.do: n < 1")
        with self._cond:
            if self._running >= 1:
                raise RuntimeError("Work.do: already called do")
            self._running = n
            self._fn = fn

        threads = [threading.Thread(target=self._runner, daemon=True) for _ in range(n - 1)]
        for thread in threads:
            thread.start()
        self._runner()
        for thread in threads:
            thread.join()
        if self._error is not None:
            raise self._error

    def _runner(self) -> None:
        assert self._fn is not None
        while True:
            with self._cond:
                while not self._todo:
                    if self._error is not None:
                        return
                    self._waiting += 1
                    if self._waiting == self._running:
                        self._cond.notify_all()
                        return
                    self._cond.wait()
                    self._waiting -= 1
                if self._error is not None:
                    return
                # Random pick avoids contention between items added together.
                i = random.randrange(len(self._todo))
                item = self._todo[i]
                self._todo[i] = self._todo[-1]
                self._todo.pop()
            try:
                self._fn(item)
            except BaseException as exc:
                with self._cond:
                    if self._error is None:
                        self._error = exc
                    self._cond.notify_all()
                return


class CacheEntryNotFoundError(KeyError):
    """Raised when no result is cached for a key."""

    def __init__(self, key: object = None) -> None:
        super().__init__("cache entry not found" if key is None else key)


class _Entry(Generic[V]):
    __slots__ = ("done", "lock", "result")

    def __init__(self) -> None:
        self.done = False
        self.lock = threading.Lock()
        self.result: Optional[V] = None


class Cache(Generic[K, V]):
    """Runs an action once per key and caches its result."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[K, _Entry[V]] = {}

    def do(self, key: K, fn: Callable[[], V]) -> V:
        """Call fn only for the first do with this key and return its result.

        Concurrent calls with the same key wait for the one call to fn.
        If fn raises, nothing is cached and a later call runs fn again.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry()
                self._entries[key] = entry
        if not entry.done:
            with entry.lock:
                if not entry.done:
                    entry.result = fn()
                    entry.done = True
        return entry.result  # type: ignore[return-value]

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        """Return the cached result for key, or default if there is none yet."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or not entry.done:
            return default
        return entry.result

    def clear(self) -> None:
        """Remove every entry."""
        with self._lock:
            self._entries.clear()

    def delete(self, key: K) -> None:
        """Remove the entry for key; missing keys are ignored."""
        with self._lock:
            self._entries.pop(key, None)

    def delete_if(self, pred: Callable[[K], bool]) -> None:
        """Remove every entry whose key satisfies pred."""
        with self._lock:
            keys = list(self._entries)
        for key in keys:
            if pred(key):
                self.delete(key)


class _Outcome(Generic[V]):
    __slots__ = ("value", "error")

    def __init__(self, value: Optional[V], error: Optional[BaseException]) -> None:
        self.value = value
        self.error = error


class ErrCache(Generic[K, V]):
    """A Cache that also remembers an exception raised by the action."""

    def __init__(self) -> None:
        self._cache: Cache[K, _Outcome[V]] = Cache()

    @staticmethod
    def _unwrap(outcome: _Outcome[V]) -> V:
        if outcome.error is not None:
            raise outcome.error
        return outcome.value  # type: ignore[return-value]

    def do(self, key: K, fn: Callable[[], V]) -> V:
        """Run fn once for key; return its value or re-raise its exception."""

        def capture() -> _Outcome[V]:
            try:
                return _Outcome(fn(), None)
            except Exception as exc:
                return _Outcome(None, exc)

        return self._unwrap(self._cache.do(key, capture))

    def get(self, key: K) -> V:
        """Return the cached value, re-raise a cached exception, or raise
        CacheEntryNotFoundError when nothing is cached."""
        outcome = self._cache.get(key)
        if outcome is None:
            raise CacheEntryNotFoundError(key)
        return self._unwrap(outcome)