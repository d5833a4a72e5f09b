"""Normalization of raw definition JSON into schema nodes.

Each raw node is classified once, by the keys it carries, into one of the
``SchemaNode`` shapes. Compilation then dispatches on the node class and
never inspects raw JSON again.
"""

from typing import Any

from pydantic import ValidationError

from swaggering_docstore.config import DEFAULT_EXTENSION_KEY, RESERVED_FIELDS
from swaggering_docstore.errors import (
    CompilationError,
    InvalidSpec,
    PropertyProcessingError,
    UnrecognizedFormat,
    UnrecognizedReference,
    UnrecognizedType,
)
from swaggering_docstore.schemas.base import (
    AnyNode,
    ArrayNode,
    ExtensionMeta,
    ObjectNode,
    PrimitiveNode,
    ReferenceNode,
    SchemaNode,
)


def normalize_node(
    raw: Any,
    extension_key: str = DEFAULT_EXTENSION_KEY,
    root: bool = False,
) -> SchemaNode:
    """Classify a raw JSON node into a SchemaNode.

    Only a definition root may omit ``type: object`` and still be read as
    an object from its ``properties``.

    Args:
        raw: Raw node from the API document
        extension_key: Vendor extension key to read overrides from
        root: Whether the node is a definition root

    Returns:
        Normalized node
    """
    if not isinstance(raw, dict):
        raise InvalidSpec(
            f"Schema node must be an object, got {type(raw).__name__}",
            node=raw,
        )

    common: dict[str, Any] = {
        "raw": raw,
        "extension": _parse_extension(raw, extension_key),
        "default": raw.get("default"),
    }

    if "$ref" in raw:
        pointer = raw["$ref"]
        if not isinstance(pointer, str):
            raise UnrecognizedReference(f'Unrecognised reference "{pointer}"', node=raw)
        return ReferenceNode(pointer=pointer, **common)

    node_type = raw.get("type")

    if node_type == "array":
        items = normalize_node(raw.get("items", {}), extension_key)
        return ArrayNode(items=items, **common)

    if node_type == "object" or (root and node_type is None and "properties" in raw):
        return ObjectNode(
            properties=_normalize_properties(raw.get("properties") or {}, extension_key),
            required=_required_names(raw),
            **common,
        )

    if node_type is not None:
        if not isinstance(node_type, str):
            raise UnrecognizedType(f"Unrecognised property type: {node_type}", node=raw)
        node_format = raw.get("format")
        if node_format is not None and not isinstance(node_format, str):
            raise UnrecognizedFormat(f"Unrecognised schema format: {node_format}", node=raw)
        return PrimitiveNode(type=node_type, format=node_format, **common)

    return AnyNode(**common)


def normalize_definitions(
    definitions: dict[str, Any],
    extension_key: str = DEFAULT_EXTENSION_KEY,
) -> dict[str, SchemaNode]:
    """Normalize every definition of a definitions map."""
    return {
        name: normalize_node(definition, extension_key, root=True)
        for name, definition in definitions.items()
    }


def _required_names(raw: dict[str, Any]) -> frozenset[str]:
    required = raw.get("required")
    if not isinstance(required, list):
        return frozenset()
    if not all(isinstance(name, str) for name in required):
        raise InvalidSpec("'required' must list property names", node=raw)
    return frozenset(required)


def _normalize_properties(properties: Any, extension_key: str) -> dict[str, SchemaNode]:
    if not isinstance(properties, dict):
        raise InvalidSpec("'properties' must be an object", node=properties)

    nodes: dict[str, SchemaNode] = {}
    for key, prop in properties.items():
        if key in RESERVED_FIELDS:
            continue
        try:
            nodes[key] = normalize_node(prop, extension_key)
        except CompilationError as exc:
            raise PropertyProcessingError(key, prop, exc) from exc
    return nodes


def _parse_extension(raw: dict[str, Any], extension_key: str) -> ExtensionMeta | None:
    payload = raw.get(extension_key)
    if payload is None:
        return None
    if not isinstance(payload, dict):
        raise InvalidSpec(f"'{extension_key}' must be an object", node=raw)
    try:
        return ExtensionMeta.from_payload(payload)
    except ValidationError as e:
        raise InvalidSpec(f"Invalid '{extension_key}' payload: {e.error_count()} error(s)", node=raw) from e
