"""API document loading and the normalized schema model.

Example usage:
    from swaggering_docstore.schemas import extract_definitions

    definitions = extract_definitions(Path("petstore.json").read_bytes())
    definitions["Pet"].properties.keys()
"""

from swaggering_docstore.schemas.base import (
    AnyNode,
    ArrayNode,
    CompilationResult,
    CompiledSchema,
    ExtensionMeta,
    NodeKind,
    ObjectNode,
    PrimitiveNode,
    ReferenceKind,
    ReferenceNode,
    ReferenceSpec,
    ScalarType,
    SchemaNode,
)
from swaggering_docstore.schemas.document import (
    extract_definitions,
    list_definitions,
    load_document,
    load_document_file,
)
from swaggering_docstore.schemas.normalize import normalize_definitions, normalize_node

__all__ = [
    "AnyNode",
    "ArrayNode",
    "CompilationResult",
    "CompiledSchema",
    "ExtensionMeta",
    "NodeKind",
    "ObjectNode",
    "PrimitiveNode",
    "ReferenceKind",
    "ReferenceNode",
    "ReferenceSpec",
    "ScalarType",
    "SchemaNode",
    "extract_definitions",
    "list_definitions",
    "load_document",
    "load_document_file",
    "normalize_definitions",
    "normalize_node",
]
