"""Typed keys for context-style lookups, distinct per creation."""

from __future__ import annotations

from typing import Generic, TypeVar

V = TypeVar("V")


class Key(Generic[V]):
    """A key associated with a value type.

    Every key is unique: two keys made with the same name are different
    keys, so independent code cannot collide on a name.
    """

    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        """The name the key was made with."""
        return self._name

    def __repr__(self) -> str:
        return f"Key({self._name!r})"