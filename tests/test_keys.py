import pytest

from adkit.keys import Key


def test_name():
    assert Key("user").name == "user"


def test_same_name_keys_are_distinct():
    a = Key("user")
    b = Key("user")
    assert a == a
    assert (a == b) is False


def test_keys_as_dict_entries():
    a = Key("user")
    b = Key("user")
    values = {a: 1, b: 2}
    assert len(values) == 2
    assert values[a] == 1
    assert values[b] == 2


def test_name_is_read_only():
    key = Key("user")
    with pytest.raises(AttributeError):
        key.name = "other"
    assert key.name == "user"


def test_repr_shows_name():
    assert "request_id" in repr(Key("request_id"))