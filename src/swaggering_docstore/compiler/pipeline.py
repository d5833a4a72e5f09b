"""Compiler pipeline: API document -> compiled schemas -> engine models.

Each compilation is independent: nothing is cached between calls, and
the named-type table and definitions map are passed explicitly.
"""

from typing import Any

import structlog

from swaggering_docstore.adapters.base import EngineAdapter
from swaggering_docstore.adapters.memory import InMemoryAdapter
from swaggering_docstore.compiler.builder import SchemaBuilder
from swaggering_docstore.compiler.type_mapper import TypeRegistry
from swaggering_docstore.config import CompilerConfig
from swaggering_docstore.errors import MissingDefinitions, MissingSchemas
from swaggering_docstore.schemas.base import CompilationResult, CompiledSchema, SchemaNode
from swaggering_docstore.schemas.document import extract_definitions

logger = structlog.get_logger(__name__)


class SchemaCompiler:
    """Compiles API document definitions into storage schemas."""

    def __init__(
        self,
        config: CompilerConfig | None = None,
        type_registry: TypeRegistry | None = None,
        adapter_factory: type[EngineAdapter] = InMemoryAdapter,
    ):
        """Initialize the compiler.

        Args:
            config: Compiler configuration
            type_registry: Named-type table for extension overrides
            adapter_factory: Creates the engine adapter used by ``compile``
        """
        self.config = config or CompilerConfig()
        self.type_registry = type_registry or TypeRegistry(self.config.type_aliases)
        self.adapter_factory = adapter_factory

    def extract_definitions(self, spec: Any) -> dict[str, SchemaNode]:
        """Build the definitions map of an API document."""
        return extract_definitions(spec, self.config.extension_key)

    def build_schemas(
        self,
        definitions: dict[str, SchemaNode] | None,
        names: list[str] | None = None,
    ) -> dict[str, CompiledSchema]:
        """Compile every definition, or the named ones.

        Args:
            definitions: Definitions map from ``extract_definitions``
            names: Definitions to compile; references still resolve
                against the whole map

        Returns:
            Compiled schemas by definition name
        """
        if definitions is None:
            raise MissingDefinitions("Definitions not supplied")

        builder = SchemaBuilder(self.type_registry, self.config)
        schemas: dict[str, CompiledSchema] = {}

        for name in names if names is not None else list(definitions):
            if name not in definitions:
                raise MissingDefinitions(f"Definition '{name}' not found")
            definition = definitions[name]
            logger.debug("compiling_definition", definition=name)
            fields = builder.build(definition, builder.context(name, definitions))
            schemas[name] = CompiledSchema(
                name=name,
                fields=fields,
                options=self._schema_options(definition),
            )

        logger.info("schemas_compiled", count=len(schemas))
        return schemas

    def _schema_options(self, definition: SchemaNode) -> dict[str, Any]:
        # Parsed under the same extension key as the field overrides.
        if definition.extension is None:
            return {}
        return definition.extension.to_payload()

    def register_models(
        self,
        schemas: dict[str, CompiledSchema] | None,
        adapter: EngineAdapter | None = None,
    ) -> dict[str, Any]:
        """Hand compiled schemas to the engine adapter.

        Args:
            schemas: Compiled schemas by name
            adapter: Engine adapter; a new one from ``adapter_factory`` if omitted

        Returns:
            Model handles by name
        """
        if schemas is None:
            raise MissingSchemas("Schemas not supplied")

        adapter = adapter or self.adapter_factory()
        return adapter.register_all(schemas)

    def compile(self, spec: Any, adapter: EngineAdapter | None = None) -> CompilationResult:
        """Compile an API document and register its models.

        Args:
            spec: Parsed document, JSON bytes or a JSON string
            adapter: Optional engine adapter

        Returns:
            Compiled schemas and model handles
        """
        definitions = self.extract_definitions(spec)
        schemas = self.build_schemas(definitions)
        models = self.register_models(schemas, adapter)
        return CompilationResult(schemas=schemas, models=models)


def build_schemas(
    definitions: dict[str, SchemaNode] | None,
    config: CompilerConfig | None = None,
) -> dict[str, CompiledSchema]:
    """Convenience function to compile a definitions map."""
    return SchemaCompiler(config).build_schemas(definitions)


def compile_spec(
    spec: Any,
    config: CompilerConfig | None = None,
    adapter: EngineAdapter | None = None,
) -> CompilationResult:
    """Convenience function to compile an API document.

    Args:
        spec: Parsed document, JSON bytes or a JSON string
        config: Optional compiler configuration
        adapter: Optional engine adapter (in-memory by default)

    Returns:
        Compiled schemas and model handles
    """
    return SchemaCompiler(config).compile(spec, adapter)
