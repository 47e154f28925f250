import pytest

from tinyagent.validation import json_type_name, validate_schema

PERSON = {
    "type": "object",
    "properties": {"name": {"type": "string"}, "age": {"type": "number"}},
    "required": ["name"],
}


def test_valid_object():
    ok, err = validate_schema({"name": "Alice", "age": 30}, PERSON)
    assert ok and err is None


def test_missing_required_field():
    ok, err = validate_schema({"age": 30}, PERSON)
    assert not ok
    assert "name" in err


def test_optional_field_may_be_absent_or_null():
    assert validate_schema({"name": "Bob"}, PERSON) == (True, None)
    assert validate_schema({"name": "Bob", "age": None}, PERSON) == (True, None)


def test_wrong_property_type():
    ok, err = validate_schema({"age": "thirty"}, {
        "type": "object", "properties": {"age": {"type": "number"}}})
    assert not ok
    assert "number" in err
    assert err.startswith("Property 'age': ")


def test_array_item_reports_one_based_position():
    ok, err = validate_schema([1, 2, "three", 4], {"type": "array", "items": {"type": "number"}})
    assert not ok
    assert "Array item 3" in err


def test_nested_error_is_prefixed_at_each_level():
    schema = {
        "type": "object",
        "properties": {
            "user": {
                "type": "object",
                "properties": {"tags": {"type": "array", "items": {"type": "string"}}},
            }
        },
    }
    ok, err = validate_schema({"user": {"tags": ["a", 7]}}, schema)
    assert not ok
    assert err == "Property 'user': Property 'tags': Array item 2: Expected string, got number"


def test_nested_required_inside_array_items():
    schema = {"type": "array", "items": {
        "type": "object", "properties": {"id": {"type": "number"}}, "required": ["id"]}}
    assert validate_schema([{"id": 1}, {"id": 2}], schema) == (True, None)
    ok, err = validate_schema([{"id": 1}, {}], schema)
    assert not ok and "Array item 2" in err and "'id'" in err


def test_extra_properties_are_accepted():
    schema = {"type": "object", "properties": {"a": {"type": "string"}},
              "additionalProperties": False}
    assert validate_schema({"a": "x", "b": 1}, schema) == (True, None)


def test_no_schema_always_succeeds():
    assert validate_schema(object(), None) == (True, None)
    assert validate_schema("anything", {}) == (True, None)


@pytest.mark.parametrize("value,schema_type", [
    (True, "number"),
    (1, "boolean"),
    ([], "object"),
    ({}, "array"),
    (1.5, "integer"),
    (None, "string"),
])
def test_type_mismatches(value, schema_type):
    ok, err = validate_schema(value, {"type": schema_type})
    assert not ok
    assert err.startswith(f"Expected {schema_type}, got {json_type_name(value)}")


def test_first_failure_short_circuits():
    schema = {"type": "object", "properties": {
        "a": {"type": "string"}, "b": {"type": "string"}}, "required": ["a", "b"]}
    ok, err = validate_schema({}, schema)
    assert not ok
    assert err == "Required property 'a' is missing"


def test_validate_is_deterministic():
    value = {"name": "x", "age": "y"}
    assert validate_schema(value, PERSON) == validate_schema(value, PERSON)
