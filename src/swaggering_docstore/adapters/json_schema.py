"""Conversion of compiled field maps to JSON Schema.

Storage types without a JSON counterpart use the custom type names
``date``, ``objectId`` and ``binary``, which ``DocumentValidator`` knows how
to check.
"""

import re
from datetime import date, datetime
from typing import Any

from jsonschema import Draft202012Validator, validators

from swaggering_docstore.schemas.base import CompiledSchema, ScalarType

JSON_SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"

SCALAR_SCHEMAS: dict[ScalarType, dict[str, Any]] = {
    ScalarType.STRING: {"type": "string"},
    ScalarType.NUMBER: {"type": "number"},
    ScalarType.BOOLEAN: {"type": "boolean"},
    ScalarType.DATE: {"type": "date"},
    ScalarType.BUFFER: {"type": "binary"},
    ScalarType.OBJECT_ID: {"type": "objectId"},
    ScalarType.MIXED: {},
    ScalarType.DECIMAL128: {"type": "number"},
    ScalarType.MAP: {"type": "object"},
    ScalarType.UUID: {"type": "string", "format": "uuid"},
    ScalarType.BIGINT: {"type": "integer"},
}

# Engine field options with a JSON Schema equivalent.
OPTION_KEYWORDS = {
    "enum": "enum",
    "min": "minimum",
    "max": "maximum",
    "minlength": "minLength",
    "maxlength": "maxLength",
    "match": "pattern",
}

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def _is_date(checker: Any, instance: Any) -> bool:
    if isinstance(instance, date):
        return True
    if not isinstance(instance, str):
        return False
    try:
        datetime.fromisoformat(instance.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


def _is_object_id(checker: Any, instance: Any) -> bool:
    return isinstance(instance, str) and bool(OBJECT_ID_PATTERN.match(instance))


def _is_binary(checker: Any, instance: Any) -> bool:
    return isinstance(instance, (bytes, bytearray))


DocumentValidator = validators.extend(
    Draft202012Validator,
    type_checker=Draft202012Validator.TYPE_CHECKER.redefine_many({
        "date": _is_date,
        "objectId": _is_object_id,
        "binary": _is_binary,
    }),
)


def is_field_spec(value: Any) -> bool:
    """Whether a compiled value is a single field rather than a field map."""
    return isinstance(value, dict) and "type" in value and not isinstance(value["type"], dict)


def type_schema(type_expr: Any) -> dict[str, Any]:
    """JSON Schema for a storage type or array marker."""
    if isinstance(type_expr, list):
        items = type_expr[0] if type_expr else ScalarType.MIXED
        return {"type": "array", "items": value_schema(items)}

    if isinstance(type_expr, str):
        try:
            return dict(SCALAR_SCHEMAS[ScalarType(type_expr)])
        except ValueError:
            return {}

    return {}


def field_schema(spec: dict[str, Any]) -> dict[str, Any]:
    schema = type_schema(spec["type"])
    if "default" in spec:
        schema["default"] = spec["default"]
    for option, keyword in OPTION_KEYWORDS.items():
        if option in spec:
            schema[keyword] = spec[option]
    return schema


def object_schema(fields: dict[str, Any]) -> dict[str, Any]:
    properties = {name: value_schema(value) for name, value in fields.items()}
    required = [
        name for name, value in fields.items()
        if is_field_spec(value) and value.get("required") is True
    ]

    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def value_schema(value: Any) -> dict[str, Any]:
    """JSON Schema for any compiled value."""
    if isinstance(value, (list, str)):
        return type_schema(value)
    if is_field_spec(value):
        return field_schema(value)
    if isinstance(value, dict):
        return object_schema(value)
    return {}


def to_json_schema(schema: CompiledSchema) -> dict[str, Any]:
    """Convert a compiled schema into a JSON Schema document.

    Args:
        schema: The compiled schema

    Returns:
        JSON Schema dict, validated with ``DocumentValidator``
    """
    root = field_schema(schema.fields) if is_field_spec(schema.fields) else object_schema(schema.fields)
    return {"$schema": JSON_SCHEMA_DIALECT, "title": schema.name, **root}
