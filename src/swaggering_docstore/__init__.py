"""
Swaggering Docstore - Compile Swagger/OpenAPI definitions into document-store schemas.

Storage schemas are generated from the API contract instead of being
written a second time by hand.
"""

__version__ = "0.1.0"

from swaggering_docstore.schemas.base import CompilationResult, CompiledSchema, ScalarType
from swaggering_docstore.schemas.document import extract_definitions
from swaggering_docstore.compiler.pipeline import SchemaCompiler, build_schemas, compile_spec
from swaggering_docstore.config import CompilerConfig, load_config
from swaggering_docstore.errors import CompilationError, ErrorKind

__all__ = [
    "CompilationResult",
    "CompiledSchema",
    "ScalarType",
    "extract_definitions",
    "SchemaCompiler",
    "build_schemas",
    "compile_spec",
    "CompilerConfig",
    "load_config",
    "CompilationError",
    "ErrorKind",
]
