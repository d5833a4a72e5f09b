"""Swagger/OpenAPI document loading.

Accepts OpenAPI 2.0 (Swagger) documents with a ``definitions`` root and
OpenAPI 3.x documents with a ``components.schemas`` root.
"""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog
import yaml

from swaggering_docstore.config import DEFAULT_EXTENSION_KEY
from swaggering_docstore.errors import InvalidSpec, MissingDefinitions, MissingSpec
from swaggering_docstore.schemas.base import SchemaNode
from swaggering_docstore.schemas.normalize import normalize_definitions

logger = structlog.get_logger(__name__)


def load_document(spec: Any) -> dict[str, Any]:
    """Turn an API document into structured data.

    Args:
        spec: Parsed document, JSON bytes or a JSON string

    Returns:
        Parsed document dict
    """
    if spec is None or (isinstance(spec, (str, bytes, bytearray)) and not spec):
        raise MissingSpec("Swagger spec not supplied")

    if isinstance(spec, Mapping):
        document = dict(spec)
    elif isinstance(spec, (str, bytes, bytearray)):
        try:
            document = json.loads(spec)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidSpec(f"Invalid JSON: {e}") from e
    else:
        raise InvalidSpec(f"Unknown or invalid spec object: {type(spec).__name__}")

    if not isinstance(document, dict):
        raise InvalidSpec("Swagger spec must be a JSON object")

    return document


def load_document_file(path: Path | str) -> dict[str, Any]:
    """Load an API document from a JSON or YAML file.

    Args:
        path: Path to the document

    Returns:
        Parsed document dict
    """
    path = Path(path)
    content = path.read_text()

    if path.suffix.lower() in (".yaml", ".yml"):
        try:
            document = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise InvalidSpec(f"Invalid YAML: {e}") from e
        return load_document(document)

    return load_document(content)


def _raw_definitions(document: dict[str, Any]) -> dict[str, Any]:
    definitions = document.get("definitions")
    if definitions is None:
        components = document.get("components")
        if isinstance(components, dict):
            definitions = components.get("schemas")

    if definitions is None:
        raise MissingDefinitions(
            "No definitions found: expected 'definitions' or 'components.schemas'"
        )
    if not isinstance(definitions, dict):
        raise InvalidSpec("Definitions must be an object", node=definitions)

    return definitions


def extract_definitions(
    spec: Any,
    extension_key: str = DEFAULT_EXTENSION_KEY,
) -> dict[str, SchemaNode]:
    """Build the definitions map of an API document.

    Looks under the legacy ``definitions`` root first and falls back to
    ``components.schemas``.

    Args:
        spec: Parsed document, JSON bytes or a JSON string
        extension_key: Vendor extension key to read overrides from

    Returns:
        Mapping of definition name to normalized node
    """
    document = load_document(spec)
    definitions = normalize_definitions(_raw_definitions(document), extension_key)
    logger.debug("definitions_extracted", count=len(definitions))
    return definitions


def list_definitions(spec: Any) -> list[str]:
    """List all definition names in the document."""
    return list(_raw_definitions(load_document(spec)).keys())
