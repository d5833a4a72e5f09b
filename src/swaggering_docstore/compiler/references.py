"""Resolution of pointers between definitions.

A pointer to the definition currently being compiled is a circular
reference and compiles to a terminal stub. Any other pointer is expanded
eagerly into a full copy of the target's compiled fields.

Only direct self-reference is detected. Indirect cycles (A -> B -> A) are
stopped by the reference depth limit of the compile context.
"""

import re
from typing import TYPE_CHECKING, Any

import structlog

from swaggering_docstore.errors import RecursionLimitExceeded, UndefinedReference, UnrecognizedReference
from swaggering_docstore.schemas.base import (
    ArrayNode,
    ObjectNode,
    ReferenceKind,
    ReferenceNode,
    ReferenceSpec,
    SchemaNode,
)

if TYPE_CHECKING:
    from swaggering_docstore.compiler.builder import CompileContext, SchemaBuilder

logger = structlog.get_logger(__name__)

POINTER_ROOTS = ("#/definitions/", "#/components/schemas/")
POINTER_PATTERN = re.compile(r"^#/(?:definitions|components/schemas)/(\w+)$")


def parse_pointer(pointer: str) -> str:
    """Extract the definition name from a pointer.

    Raises:
        UnrecognizedReference: If the pointer is not ``<root>/<identifier>``
    """
    match = POINTER_PATTERN.match(pointer) if isinstance(pointer, str) else None
    if not match:
        raise UnrecognizedReference(f'Unrecognised reference "{pointer}"', node=pointer)
    return match.group(1)


def strip_pointer_root(pointer: str) -> str:
    """Remove both recognized pointer roots without validating the rest."""
    for root in POINTER_ROOTS:
        pointer = pointer.replace(root, "")
    return pointer


def reference_pointer(node: SchemaNode) -> str | None:
    """Pointer carried by a node directly or by its array items."""
    if isinstance(node, ReferenceNode):
        return node.pointer
    if isinstance(node, ArrayNode) and isinstance(node.items, ReferenceNode):
        return node.items.pointer
    return None


def has_reference(node: SchemaNode) -> bool:
    return reference_pointer(node) is not None


class ReferenceResolver:
    """Resolves reference properties into compiled fields."""

    def __init__(self, builder: "SchemaBuilder"):
        self.builder = builder

    def describe(self, node: SchemaNode, context: "CompileContext", container_is_array: bool = False) -> ReferenceSpec:
        """Classify the pointer of a node.

        Args:
            node: Reference node, or array node with reference items
            context: Current compile context
            container_is_array: Whether the enclosing node is an array

        Returns:
            ReferenceSpec for the pointer
        """
        pointer = reference_pointer(node)
        if pointer is None:
            raise UnrecognizedReference("Node carries no reference", node=node.raw)

        target = parse_pointer(pointer)
        kind = ReferenceKind.CIRCULAR if target == context.owner else ReferenceKind.EXTERNAL
        return ReferenceSpec(
            kind=kind,
            target=target,
            is_array=isinstance(node, ArrayNode) or container_is_array,
        )

    def resolve(self, node: SchemaNode, context: "CompileContext", container_is_array: bool = False) -> Any:
        """Compile a reference property.

        Args:
            node: Reference node, or array node with reference items
            context: Current compile context
            container_is_array: Whether the enclosing node is an array

        Returns:
            Reference stub, expanded field map, or either wrapped in a list
        """
        spec = self.describe(node, context, container_is_array)

        if spec.is_circular:
            logger.debug("circular_reference", owner=context.owner, is_array=spec.is_array)
            return spec.to_field_spec()

        expanded = self.expand(spec.target, context)
        return [expanded] if spec.is_array else expanded

    def expand(self, target: str, context: "CompileContext") -> Any:
        """Compile the target definition as an embedded copy."""
        if target not in context.definitions:
            raise UndefinedReference(f"Reference target '{target}' is not defined", node=target)

        if context.depth >= context.max_depth:
            raise RecursionLimitExceeded(
                f"Reference expansion of '{target}' exceeds depth {context.max_depth}; "
                f"check for an indirect reference cycle through '{context.owner}'",
                node=target,
            )

        definition = context.definitions[target]
        # Embedded copies carry the target's properties only.
        if isinstance(definition, ObjectNode):
            definition = definition.model_copy(update={"required": frozenset()})

        logger.debug("expand_reference", owner=context.owner, target=target, depth=context.depth + 1)
        return self.builder.build(definition, context.expand(target))
