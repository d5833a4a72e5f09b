"""Mapping of API primitive types to storage scalar types."""

from collections.abc import Callable
from typing import Any

from swaggering_docstore.errors import UnrecognizedExtensionType, UnrecognizedFormat, UnrecognizedType, snapshot
from swaggering_docstore.schemas.base import ArrayNode, ObjectNode, PrimitiveNode, ScalarType, SchemaNode

# Types that map directly, regardless of format.
DIRECT_TYPES: dict[str, ScalarType] = {
    "integer": ScalarType.NUMBER,
    "long": ScalarType.NUMBER,
    "float": ScalarType.NUMBER,
    "double": ScalarType.NUMBER,
    "password": ScalarType.STRING,
    "boolean": ScalarType.BOOLEAN,
    "date": ScalarType.DATE,
    "dateTime": ScalarType.DATE,
}

NUMBER_FORMATS = frozenset({"integer", "long", "float", "double"})
DATE_FORMATS = frozenset({"date-time", "date"})

# Types a bare node may declare to be compiled as a single field.
SIMPLE_TYPES = frozenset(DIRECT_TYPES) | {"string", "number", "array", "object"}


def is_simple_type(type_name: Any) -> bool:
    return isinstance(type_name, str) and type_name in SIMPLE_TYPES


def map_type(
    node: SchemaNode,
    on_object: Callable[[ObjectNode], Any] | None = None,
) -> Any:
    """Map a primitive or array node to a storage type.

    Args:
        node: Node to map
        on_object: Compiles object nodes found as array items

    Returns:
        A ScalarType, or a one-element list for arrays
    """
    if isinstance(node, ArrayNode):
        return [map_type(node.items, on_object)]

    if isinstance(node, ObjectNode):
        if on_object is None:
            raise UnrecognizedType(
                f"Object nodes are compiled by the schema builder at: {snapshot(node.raw)}",
                node=node.raw,
            )
        return on_object(node)

    if not isinstance(node, PrimitiveNode):
        type_name = node.raw.get("type")
        raise UnrecognizedType(
            f"Unrecognised property type: {type_name} at: {snapshot(node.raw)}",
            node=node.raw,
        )

    if node.type in DIRECT_TYPES:
        return DIRECT_TYPES[node.type]

    if node.type == "number":
        if node.format in NUMBER_FORMATS:
            return ScalarType.NUMBER
        raise UnrecognizedFormat(f"Unrecognised schema format: {node.format}", node=node.raw)

    if node.type == "string":
        if node.format in DATE_FORMATS:
            return ScalarType.DATE
        return ScalarType.STRING

    raise UnrecognizedType(
        f"Unrecognised property type: {node.type} at: {snapshot(node.raw)}",
        node=node.raw,
    )


class TypeRegistry:
    """Named-type table of the storage engine.

    Resolves the type names used in extension overrides. Every
    ``ScalarType`` is registered under its own name; aliases can be added.
    """

    def __init__(self, aliases: dict[str, str] | None = None):
        self._types: dict[str, ScalarType] = {}
        self._register_defaults()
        for alias, target in (aliases or {}).items():
            self.register_alias(alias, target)

    def _register_defaults(self) -> None:
        for scalar in ScalarType:
            self.register(scalar.value, scalar)

    def register(self, name: str, scalar: ScalarType) -> None:
        """Register a scalar type under a name.

        Args:
            name: Name used in extension overrides
            scalar: The storage type it resolves to
        """
        self._types[name] = scalar

    def register_alias(self, alias: str, target: str) -> None:
        """Register an additional name for an already known type."""
        scalar = self.get(target)
        if scalar is None:
            raise UnrecognizedExtensionType(f"Cannot alias '{alias}' to unknown type '{target}'")
        self.register(alias, scalar)

    def get(self, name: str) -> ScalarType | None:
        """Get a scalar type by name, or None if unknown."""
        if not isinstance(name, str):
            return None
        return self._types.get(name)

    def list_types(self) -> list[str]:
        """List all registered type names."""
        return list(self._types.keys())

    def unregister(self, name: str) -> bool:
        """Remove a name from the table.

        Returns:
            True if removed, False if not found
        """
        if name in self._types:
            del self._types[name]
            return True
        return False

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None
