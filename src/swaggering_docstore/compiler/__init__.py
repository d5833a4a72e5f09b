"""Schema compiler: definitions map -> storage field maps.

Example usage:
    from swaggering_docstore.compiler import SchemaCompiler

    result = SchemaCompiler().compile(Path("petstore.json").read_bytes())
    result.schemas["Pet"].fields
    result.models["Pet"].insert({"id": 1, "name": "Fluffy"})
"""

from swaggering_docstore.compiler.builder import CompileContext, SchemaBuilder, build_schema
from swaggering_docstore.compiler.extensions import ExtensionMerger
from swaggering_docstore.compiler.pipeline import SchemaCompiler, build_schemas, compile_spec
from swaggering_docstore.compiler.references import ReferenceResolver, parse_pointer, strip_pointer_root
from swaggering_docstore.compiler.type_mapper import TypeRegistry, map_type

__all__ = [
    "CompileContext",
    "SchemaBuilder",
    "build_schema",
    "ExtensionMerger",
    "SchemaCompiler",
    "build_schemas",
    "compile_spec",
    "ReferenceResolver",
    "parse_pointer",
    "strip_pointer_root",
    "TypeRegistry",
    "map_type",
]
