"""Recursive assembly of field maps from schema nodes.

The builder walks one definition's properties and, per property, dispatches
to the type mapper, the reference resolver or the extension merger. It
recurses into anonymous nested objects directly and into other definitions
through the reference resolver.
"""

from dataclasses import dataclass, field, replace
from typing import Any

import structlog

from swaggering_docstore.compiler.extensions import ExtensionMerger, has_array_extension
from swaggering_docstore.compiler.references import ReferenceResolver, has_reference
from swaggering_docstore.compiler.type_mapper import TypeRegistry, is_simple_type, map_type
from swaggering_docstore.config import DEFAULT_MAX_REFERENCE_DEPTH, RESERVED_FIELDS, CompilerConfig
from swaggering_docstore.errors import PropertyProcessingError
from swaggering_docstore.schemas.base import (
    ArrayNode,
    ObjectNode,
    PrimitiveNode,
    ReferenceNode,
    SchemaNode,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CompileContext:
    """Where the builder is in the compilation of one definition."""

    owner: str
    definitions: dict[str, SchemaNode] = field(default_factory=dict)
    depth: int = 0
    max_depth: int = DEFAULT_MAX_REFERENCE_DEPTH

    def nested(self, name: str) -> "CompileContext":
        """Context for an anonymous nested object named by its property key."""
        return replace(self, owner=name)

    def expand(self, target: str) -> "CompileContext":
        """Context for the expansion of another definition."""
        return replace(self, owner=target, depth=self.depth + 1)


class SchemaBuilder:
    """Builds the field map of a schema node."""

    def __init__(
        self,
        type_registry: TypeRegistry | None = None,
        config: CompilerConfig | None = None,
    ):
        self.config = config or CompilerConfig()
        self.type_registry = type_registry or TypeRegistry(self.config.type_aliases)
        self.references = ReferenceResolver(self)
        self.extensions = ExtensionMerger(self.type_registry, self.config.extension_key)

    def context(self, name: str, definitions: dict[str, SchemaNode]) -> CompileContext:
        """Create the root context for compiling a named definition."""
        return CompileContext(
            owner=name,
            definitions=definitions,
            max_depth=self.config.max_reference_depth,
        )

    def build(self, node: SchemaNode, context: CompileContext) -> Any:
        """Build the compiled form of a node.

        Args:
            node: Node to compile
            context: Compile context naming the definition being compiled

        Returns:
            Field map for object nodes, or a single field for bare
            single-type nodes
        """
        if isinstance(node, ObjectNode):
            return self._build_properties(node, context)

        if isinstance(node, ArrayNode) and has_reference(node):
            return {"type": self.references.resolve(node, context, container_is_array=True)}

        if isinstance(node, (PrimitiveNode, ArrayNode)) and is_simple_type(node.raw.get("type")):
            return {"type": map_type(node, self._object_builder(context))}

        if isinstance(node, ReferenceNode):
            return self.references.resolve(node, context)

        return {}

    def _build_properties(self, node: ObjectNode, context: CompileContext) -> dict[str, Any]:
        fields: dict[str, Any] = {}

        for key, prop in node.properties.items():
            if key in RESERVED_FIELDS:
                continue

            try:
                compiled = self._build_property(key, prop, node, context)
            except Exception as exc:
                raise PropertyProcessingError(key, prop.raw, exc) from exc

            if compiled is not None:
                fields[key] = compiled

        logger.debug("fields_built", owner=context.owner, depth=context.depth, count=len(fields))
        return fields

    def _build_property(
        self,
        key: str,
        prop: SchemaNode,
        parent: ObjectNode,
        context: CompileContext,
    ) -> Any:
        if has_array_extension(prop):
            return self.extensions.array_of(prop)

        if has_reference(prop):
            compiled = self.references.resolve(prop, context)
        elif isinstance(prop, ObjectNode):
            compiled = self.build(prop, context.nested(key))
        elif isinstance(prop, (PrimitiveNode, ArrayNode)):
            compiled = {"type": map_type(prop, self._object_builder(context.nested(key)))}
            if prop.default:
                compiled["default"] = prop.default
        else:
            compiled = None

        if key in parent.required and has_resolved_type(compiled):
            compiled = {**compiled, "required": True}

        if prop.extension is not None:
            compiled = self.extensions.merge(compiled, prop)

        return compiled

    def _object_builder(self, context: CompileContext):
        return lambda obj: self.build(obj, context)


def has_resolved_type(compiled: Any) -> bool:
    """Whether a compiled field declares a top-level storage type."""
    return isinstance(compiled, dict) and "type" in compiled and not isinstance(compiled["type"], dict)


def build_schema(
    node: SchemaNode,
    name: str,
    definitions: dict[str, SchemaNode],
    config: CompilerConfig | None = None,
) -> Any:
    """Convenience function to build the field map of one definition.

    Args:
        node: Definition node
        name: Definition name
        definitions: All definitions, for reference resolution
        config: Optional compiler configuration

    Returns:
        Compiled field map
    """
    builder = SchemaBuilder(config=config)
    return builder.build(node, builder.context(name, definitions))
