import copy
import pickle

import pytest

from avrorecord import Field, FieldType, Schema, SchemaError, parse_schema


def test_schema_preserves_declared_order(user_schema):
    assert user_schema.fieldNames == ("name", "age", "active", "email")
    assert [f.type for f in user_schema] == [
        FieldType.STRING,
        FieldType.INT32,
        FieldType.BOOLEAN,
        FieldType.NULLABLE_STRING,
    ]


def test_empty_schema_rejected():
    with pytest.raises(SchemaError):
        Schema([])


def test_duplicate_field_name_rejected():
    with pytest.raises(SchemaError) as info:
        Schema([Field("age", FieldType.INT32), Field("age", FieldType.STRING)])
    assert info.value.field == "age"


def test_default_only_allowed_on_nullable_fields():
    with pytest.raises(SchemaError):
        Field("name", FieldType.STRING, default="x")
    assert Field("email", FieldType.NULLABLE_STRING, default="none@example.com").default == "none@example.com"


def test_field_requires_type_tag():
    with pytest.raises(SchemaError):
        Field("age", "int")


def test_field_name_must_be_non_empty():
    with pytest.raises(SchemaError):
        Field("", FieldType.INT32)


def test_schema_is_immutable(user_schema):
    with pytest.raises(AttributeError):
        user_schema.foo = 1
    with pytest.raises(Exception):
        user_schema.fields[0].name = "other"


def test_lookup(user_schema):
    assert "age" in user_schema
    assert "height" not in user_schema
    assert user_schema.field("email").type is FieldType.NULLABLE_STRING
    with pytest.raises(KeyError):
        user_schema.field("height")


def test_to_json_parses_back_to_equal_schema(user_schema):
    parsed = parse_schema(user_schema.toJson())
    assert parsed == user_schema
    assert parsed.name == "com.example.User"


def test_schema_survives_pickle_and_copy(user_schema):
    restored = pickle.loads(pickle.dumps(user_schema))
    assert restored == user_schema
    assert restored.name == "com.example.User"
    assert restored.fieldNames == user_schema.fieldNames
    assert copy.copy(user_schema) == user_schema
    assert copy.deepcopy(user_schema).name == user_schema.name
