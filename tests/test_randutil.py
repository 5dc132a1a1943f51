import time
import uuid

import pytest

from adkit import randutil
from adkit.randutil import (
    ALPHANUMERIC,
    coin_toss,
    int_between,
    new_ulid,
    new_uuid,
    random_string,
    shuffle,
    sleep_between,
    string_between,
)


def test_int_between():
    for _ in range(2000):
        val = int_between(50, 100)
        assert 50 <= val <= 99


def test_int_between_min_greater_than_max_raises():
    with pytest.raises(ValueError):
        int_between(10, 5)


def test_int_between_equal_bounds_starts_at_zero():
    values = {int_between(5, 5) for _ in range(500)}
    assert values <= set(range(5))


def test_int_between_zero_zero_raises():
    with pytest.raises(ValueError):
        int_between(0, 0)


def test_coin_toss():
    heads, tails = True, False
    results = {coin_toss() for _ in range(2000)}
    assert results <= {heads, tails}
    assert results == {heads, tails}


def test_random_string_length_and_charset():
    s = random_string(40, "abc")
    assert len(s) == 40
    assert set(s) <= set("abc")


def test_random_string_zero_length():
    assert random_string(0, ALPHANUMERIC) == ""


def test_string_between_length_in_range():
    for _ in range(200):
        s = string_between(3, 8, randutil.NUMERALS)
        assert 3 <= len(s) < 8
        assert set(s) <= set(randutil.NUMERALS)


def test_ascii_extends_alphanumeric():
    assert randutil.ASCII.startswith(ALPHANUMERIC)
    assert ALPHANUMERIC == randutil.ALPHABET + randutil.NUMERALS


def test_shuffle_keeps_elements():
    items = list(range(50))
    shuffle(items)
    assert sorted(items) == list(range(50))


def test_sleep_between_equal_sleeps_that_long():
    start = time.monotonic()
    result = sleep_between(20, 20)
    elapsed = time.monotonic() - start
    assert result is None
    assert elapsed >= 0.019


def test_sleep_between_inverted_does_not_sleep():
    start = time.monotonic()
    result = sleep_between(500, 100)
    elapsed = time.monotonic() - start
    assert result is None
    assert elapsed < 0.4


def test_new_uuid_is_version_4():
    text = new_uuid()
    parsed = uuid.UUID(text)
    assert parsed.version == 4
    assert str(parsed) == text


def test_new_uuid_unique():
    assert len({new_uuid() for _ in range(100)}) == 100


def test_new_ulid_format():
    value = new_ulid()
    assert len(value) == 26
    assert set(value) <= set("0123456789ABCDEFGHJKMNPQRSTVWXYZ")
    assert value[0] in "01234567"


def test_new_ulid_monotonic():
    values = [new_ulid() for _ in range(200)]
    assert values == sorted(values)
    assert len(set(values)) == len(values)