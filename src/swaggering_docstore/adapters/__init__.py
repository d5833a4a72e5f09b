"""Storage engine adapters for compiled schemas."""

from swaggering_docstore.adapters.base import (
    AdapterError,
    DocumentValidationError,
    EngineAdapter,
    ModelOverwriteError,
)
from swaggering_docstore.adapters.json_schema import to_json_schema
from swaggering_docstore.adapters.memory import DocumentCollection, InMemoryAdapter
from swaggering_docstore.adapters.validation import ValidationIssue, ValidationResult

__all__ = [
    "AdapterError",
    "DocumentValidationError",
    "EngineAdapter",
    "ModelOverwriteError",
    "to_json_schema",
    "DocumentCollection",
    "InMemoryAdapter",
    "ValidationIssue",
    "ValidationResult",
]
