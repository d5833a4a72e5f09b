"""Merging of vendor extension overrides into compiled fields."""

from typing import Any

from swaggering_docstore.compiler.references import reference_pointer, strip_pointer_root
from swaggering_docstore.compiler.type_mapper import TypeRegistry
from swaggering_docstore.config import DEFAULT_EXTENSION_KEY, REFERENCE_SENTINEL
from swaggering_docstore.errors import UnrecognizedExtensionType, snapshot
from swaggering_docstore.schemas.base import ArrayNode, ExtensionMeta, ScalarType, SchemaNode


def extension_of(node: SchemaNode) -> tuple[ExtensionMeta | None, str | None]:
    """Find the extension metadata of a node and the pointer next to it.

    The node's own extension wins; array nodes fall back to the extension
    on their items.
    """
    if node.extension is not None:
        return node.extension, reference_pointer(node)
    if isinstance(node, ArrayNode) and node.items.extension is not None:
        return node.items.extension, reference_pointer(node.items)
    return None, None


def has_array_extension(node: SchemaNode) -> bool:
    return isinstance(node, ArrayNode) and node.items.extension is not None


class ExtensionMerger:
    """Applies extension metadata over automatically computed fields."""

    def __init__(self, type_registry: TypeRegistry, extension_key: str = DEFAULT_EXTENSION_KEY):
        self.type_registry = type_registry
        self.extension_key = extension_key

    def resolve(self, node: SchemaNode) -> dict[str, Any] | None:
        """Build the override payload for a node.

        Returns:
            Override field keys, or None if the node has no extension
        """
        meta, pointer = extension_of(node)
        if meta is None:
            return None

        payload: dict[str, Any] = dict(meta.options)
        if meta.ref is not None:
            payload["ref"] = meta.ref

        if meta.type == REFERENCE_SENTINEL:
            payload["type"] = ScalarType.OBJECT_ID
            if meta.ref is None and pointer:
                payload["ref"] = strip_pointer_root(pointer)
        elif meta.type is not None:
            scalar = self.type_registry.get(meta.type)
            if scalar is None:
                raise UnrecognizedExtensionType(
                    f"Unrecognised {self.extension_key} type: {meta.type} at: {snapshot(node.raw)}",
                    node=node.raw,
                )
            payload["type"] = scalar

        return payload

    def merge(self, computed: Any, node: SchemaNode) -> Any:
        """Merge a node's extension over its computed field.

        Extension keys overwrite computed keys of the same name; all other
        computed keys are kept. A computed array marker becomes the ``type``
        of the merged field.
        """
        payload = self.resolve(node)
        if payload is None:
            return computed

        if computed is None:
            base: dict[str, Any] = {}
        elif isinstance(computed, list):
            base = {"type": computed}
        else:
            base = dict(computed)

        return {**base, **payload}

    def array_of(self, node: SchemaNode) -> list[dict[str, Any]]:
        """Compile an array whose items carry extension metadata."""
        return [self.resolve(node) or {}]
