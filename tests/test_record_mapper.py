from dataclasses import dataclass, field
from typing import Optional

import pytest

from avrorecord import InvalidEncoding, SchemaError, decode_stream, encode, map_records, reflect


@dataclass(frozen=True)
class UserRecord:
    name: str
    age: int
    email: Optional[str] = None


@dataclass
class WithHeight:
    name: str
    height: int


@dataclass
class WithFactory:
    name: str
    tags: list = field(default_factory=list)


class PlainUser:
    def __init__(self, name, age, *, nickname="n/a"):
        self.name = name
        self.age = age
        self.nickname = nickname


def test_reflect_dataclass_drops_unmapped_fields(user_schema, make_user):
    to_user = reflect(user_schema, UserRecord)
    record = next(decode_stream(user_schema, encode(user_schema, make_user(email="a@b"))))
    assert to_user(record) == UserRecord("Ann", 30, "a@b")


def test_reflect_requires_schema_to_cover_required_fields(user_schema):
    with pytest.raises(SchemaError):
        reflect(user_schema, WithHeight)


def test_reflect_leaves_defaults_for_fields_not_in_schema(user_schema, make_user):
    record = next(decode_stream(user_schema, encode(user_schema, make_user())))
    assert reflect(user_schema, WithFactory)(record).tags == []


def test_reflect_plain_class(user_schema, make_user):
    record = next(decode_stream(user_schema, encode(user_schema, make_user("Bob", 5))))
    user = reflect(user_schema, PlainUser)(record)
    assert (user.name, user.age, user.nickname) == ("Bob", 5, "n/a")


def test_map_records_passes_errors_through(user_schema, make_user):
    good = encode(user_schema, make_user())
    bad = bytearray(good)
    bad[5] = 7
    out = list(map_records(decode_stream(user_schema, good + bytes(bad)), reflect(user_schema, UserRecord)))
    assert out[0] == UserRecord("Ann", 30, None)
    assert isinstance(out[1], InvalidEncoding)


def test_map_records_with_plain_function(user_schema, make_user):
    data = b"".join(encode(user_schema, make_user(n, a)) for n, a in [("A", 1), ("B", 2)])
    out = list(map_records(decode_stream(user_schema, data), lambda r: f"{r['name']}:{r['age']}"))
    assert out == ["A:1", "B:2"]
