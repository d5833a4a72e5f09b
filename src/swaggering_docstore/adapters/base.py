"""Base classes for storage engine adapters.

An adapter turns a compiled schema into a live, queryable model handle.
The compiler only depends on the ``register`` contract below.
"""

from abc import ABC, abstractmethod
from typing import Any

from swaggering_docstore.schemas.base import CompiledSchema


class AdapterError(Exception):
    """Base class for errors raised by engine adapters."""


class ModelOverwriteError(AdapterError):
    """A model name is registered twice with the same adapter."""


class DocumentValidationError(AdapterError):
    """A document does not conform to its model's schema."""

    def __init__(self, message: str, result: Any = None):
        super().__init__(message)
        self.result = result


class EngineAdapter(ABC):
    """Abstract base class for storage engine adapters."""

    @abstractmethod
    def register(self, schema: CompiledSchema) -> Any:
        """Register a compiled schema as a named collection.

        Args:
            schema: The compiled schema

        Returns:
            A handle to the validated, queryable collection
        """
        pass

    def register_all(self, schemas: dict[str, CompiledSchema]) -> dict[str, Any]:
        """Register every schema and return the handles by name."""
        return {name: self.register(schema) for name, schema in schemas.items()}
