"""Change events and the interfaces of sources that produce them."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Generic, Iterator, List, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")
D = TypeVar("D")
T_co = TypeVar("T_co", covariant=True)
D_co = TypeVar("D_co", covariant=True)


class ChangeEventType(str, enum.Enum):
    """Kind of change made to a stored item."""

    INSERT = "insert"
    DELETE = "delete"
    UPDATE = "update"
    REPLACE = "replace"


@dataclass(frozen=True)
class ChangeEvent(Generic[D]):
    """A change of the given type carrying the affected data."""

    data: D
    type: ChangeEventType

    def __post_init__(self) -> None:
        if not isinstance(self.type, ChangeEventType):
            object.__setattr__(self, "type", ChangeEventType(self.type))


@runtime_checkable
class Watcher(Protocol[D_co]):
    """Something that reports changes as a stream of events."""

    def watch(self) -> Iterator[ChangeEvent]:
        """Yield change events as they happen."""
        ...


@runtime_checkable
class TypedEvent(Protocol[T_co, D_co]):
    """An event with a type, a payload and a timestamp."""

    @property
    def type(self) -> T_co: ...

    @property
    def data(self) -> D_co: ...

    @property
    def ts(self) -> datetime: ...


@runtime_checkable
class DataSource(Protocol[T]):
    """Provides items of type T to a callback each time they are loaded."""

    def on_load(self, callback: Callable[[List[T]], None]) -> None:
        """Register callback to receive every loaded batch of items."""
        ...