from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

# python types accepted for each schema type; bool is an int subclass, so the
# numeric checks exclude it explicitly below
_PY_TYPES = {
    "object": (dict,),
    "array": (list, tuple),
    "string": (str,),
    "number": (int, float),
    "integer": (int,),
    "boolean": (bool,),
}


def json_type_name(value: Any) -> str:
    """Name a Python value the way JSON would."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _matches_type(value: Any, schema_type: str) -> bool:
    expected = _PY_TYPES.get(schema_type)
    if expected is None:
        # unknown types are not checked
        return True
    if schema_type in ("number", "integer") and isinstance(value, bool):
        return False
    return isinstance(value, expected)


def validate_schema(value: Any, schema: Optional[Dict[str, Any]]) -> Tuple[bool, Optional[str]]:
    """
    Validate `value` against a JSON-Schema-like descriptor.

    Supports `type` (object/array/string/number/integer/boolean), `properties`,
    `required` and `items`, recursively. Returns (True, None) on success or
    (False, message) for the first failure found. Extra properties are
    accepted; `additionalProperties` is not enforced.
    """
    if not schema:
        return True, None

    schema_type = schema.get("type")
    if schema_type is None:
        return True, None

    if not _matches_type(value, schema_type):
        return False, f"Expected {schema_type}, got {json_type_name(value)}"

    if schema_type == "object" and schema.get("properties"):
        required = set(schema.get("required") or [])
        for prop_name, prop_schema in schema["properties"].items():
            prop_value = value.get(prop_name)
            if prop_value is None:
                if prop_name in required:
                    return False, f"Required property '{prop_name}' is missing"
                continue
            ok, err = validate_schema(prop_value, prop_schema)
            if not ok:
                return False, f"Property '{prop_name}': {err}"

    if schema_type == "array" and schema.get("items"):
        for i, item in enumerate(value, start=1):
            ok, err = validate_schema(item, schema["items"])
            if not ok:
                return False, f"Array item {i}: {err}"

    return True, None
