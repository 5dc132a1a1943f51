"""Random numbers, strings and identifiers."""

from __future__ import annotations

import os
import random
import secrets
import threading
import time
import uuid
from typing import MutableSequence

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
NUMERALS = "1234567890"
ALPHANUMERIC = ALPHABET + NUMERALS
ASCII = ALPHANUMERIC + "~!@#$%^&*()-_+={}[]\\|<,>.?/\"';:`"

_CROCKFORD = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
_ULID_RANDOM_BITS = 80
_ULID_MAX_RANDOM = (1 << _ULID_RANDOM_BITS) - 1
_ULID_MAX_INCREMENT = (1 << 32) - 1


def int_between(low: int, high: int) -> int:
    """Return a secure random integer in [low, high).

    When ``low == high`` the range becomes [0, high).
    """
    if low > high:
        raise ValueError("min must be strictly less than  max")
    if low == high:
        low = 0
    return low + secrets.randbelow(high - low)


def random_string(n: int, charset: str) -> str:
    """Return n characters drawn securely from charset."""
    return "".join(secrets.choice(charset) for _ in range(n))


def string_between(low: int, high: int, charset: str) -> str:
    """Return a random string whose length is drawn by int_between."""
    return random_string(int_between(low, high), charset)


def coin_toss() -> bool:
    """Return True or False with equal chance."""
    return random.choice((True, False))


def sleep_between(low: int, high: int) -> None:
    """Sleep a random number of milliseconds in [low, high)."""
    if low == high:
        time.sleep(low / 1000)
    elif low < high:
        time.sleep(int_between(low, high) / 1000)


def shuffle(items: MutableSequence) -> None:
    """Shuffle a sequence in place."""
    random.shuffle(items)


def new_uuid() -> str:
    """Return a new random UUID in canonical text form."""
    return str(uuid.uuid4())


class _UlidSource:
    """Generates monotonically increasing ULIDs within a process."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last_ms = -1
        self._last_random = 0

    def make(self) -> str:
        with self._lock:
            now_ms = time.time_ns() // 1_000_000
            if now_ms == self._last_ms:
                entropy = self._last_random + 1 + secrets.randbelow(_ULID_MAX_INCREMENT)
                if entropy > _ULID_MAX_RANDOM:
                    raise OverflowError("ulid: monotonic entropy overflow")
            else:
                entropy = int.from_bytes(os.urandom(_ULID_RANDOM_BITS // 8), "big")
            self._last_ms = now_ms
            self._last_random = entropy
        return _encode_ulid((now_ms << _ULID_RANDOM_BITS) | entropy)


def _encode_ulid(value: int) -> str:
    chars = []
    for _ in range(26):
        value, digit = divmod(value, 32)
        chars.append(_CROCKFORD[digit])
    return "".join(reversed(chars))


_ULIDS = _UlidSource()


def new_ulid() -> str:
    """Return a new ULID; successive calls sort in increasing order."""
    return _ULIDS.make()