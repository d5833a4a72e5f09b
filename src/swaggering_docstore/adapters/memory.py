"""In-memory storage engine adapter.

Keeps one ``DocumentCollection`` per registered schema. Collections
validate documents against the compiled schema and answer simple
equality queries. Schema-level options honoured: ``strict`` (default
true), ``versionKey`` (default ``__v``, ``false`` disables) and
``timestamps``.
"""

import copy
import secrets
from datetime import datetime, timezone
from typing import Any

import structlog

from swaggering_docstore.adapters.base import DocumentValidationError, EngineAdapter, ModelOverwriteError
from swaggering_docstore.adapters.json_schema import DocumentValidator, is_field_spec, to_json_schema
from swaggering_docstore.adapters.validation import ValidationResult
from swaggering_docstore.schemas.base import CompiledSchema

logger = structlog.get_logger(__name__)

ID_FIELD = "_id"
DEFAULT_VERSION_KEY = "__v"
TIMESTAMP_FIELDS = ("createdAt", "updatedAt")


class DocumentCollection:
    """A validated, queryable named collection."""

    def __init__(self, schema: CompiledSchema):
        self.name = schema.name
        self.compiled = schema
        self.json_schema = to_json_schema(schema)
        self._validator = DocumentValidator(self.json_schema)
        self._documents: list[dict[str, Any]] = []

        options = schema.options
        self.strict = options.get("strict", True) is not False
        self.version_key = options.get("versionKey", DEFAULT_VERSION_KEY)
        self.timestamps = bool(options.get("timestamps", False))

    @property
    def fields(self) -> dict[str, Any]:
        return self.compiled.fields

    def _managed_keys(self) -> set[str]:
        keys = {ID_FIELD}
        if self.version_key:
            keys.add(self.version_key)
        if self.timestamps:
            keys.update(TIMESTAMP_FIELDS)
        return keys

    def prepare(self, document: dict[str, Any]) -> dict[str, Any]:
        """Apply strict mode and field defaults to a document copy."""
        data = copy.deepcopy(dict(document))
        if is_field_spec(self.fields):
            return data

        if self.strict:
            allowed = set(self.fields) | self._managed_keys()
            data = {k: v for k, v in data.items() if k in allowed}

        for name, spec in self.fields.items():
            if name not in data and is_field_spec(spec) and "default" in spec:
                data[name] = copy.deepcopy(spec["default"])

        return data

    def validate(self, document: dict[str, Any]) -> ValidationResult:
        """Validate a document against the compiled schema.

        Args:
            document: The document to check

        Returns:
            Validation result
        """
        result = ValidationResult(metadata={"model": self.name})
        for error in self._validator.iter_errors(document):
            result.add_schema_error(error)
        return result

    def insert(self, document: dict[str, Any]) -> dict[str, Any]:
        """Validate and store a document.

        Returns:
            The stored document, including engine-managed keys

        Raises:
            DocumentValidationError: If the document does not validate
        """
        data = self.prepare(document)
        result = self.validate(data)
        if not result.valid:
            messages = "; ".join(issue.message for issue in result.issues)
            raise DocumentValidationError(f"{self.name} validation failed: {messages}", result)

        data.setdefault(ID_FIELD, secrets.token_hex(12))
        if self.version_key:
            data[self.version_key] = 0
        if self.timestamps:
            now = datetime.now(timezone.utc)
            for key in TIMESTAMP_FIELDS:
                data[key] = now

        self._documents.append(data)
        logger.debug("document_inserted", model=self.name, id=data[ID_FIELD])
        return copy.deepcopy(data)

    def find(self, **filters: Any) -> list[dict[str, Any]]:
        """Find documents whose top-level fields equal the given values."""
        return [
            copy.deepcopy(doc) for doc in self._documents
            if all(doc.get(key) == value for key, value in filters.items())
        ]

    def find_one(self, **filters: Any) -> dict[str, Any] | None:
        matches = self.find(**filters)
        return matches[0] if matches else None

    def count(self) -> int:
        return len(self._documents)

    def __len__(self) -> int:
        return self.count()


class InMemoryAdapter(EngineAdapter):
    """Process-local registry of named collections."""

    def __init__(self):
        self._collections: dict[str, DocumentCollection] = {}

    def register(self, schema: CompiledSchema) -> DocumentCollection:
        """Register a compiled schema as a new collection.

        Raises:
            ModelOverwriteError: If the name is already registered
        """
        if schema.name in self._collections:
            raise ModelOverwriteError(f"Cannot overwrite '{schema.name}' model once registered")

        collection = DocumentCollection(schema)
        self._collections[schema.name] = collection
        logger.info("model_registered", model=schema.name, fields=len(schema.fields))
        return collection

    def get(self, name: str) -> DocumentCollection | None:
        return self._collections.get(name)

    def list_models(self) -> list[str]:
        return list(self._collections.keys())

    def unregister(self, name: str) -> bool:
        """Remove a collection from the registry.

        Returns:
            True if removed, False if not found
        """
        if name in self._collections:
            del self._collections[name]
            return True
        return False

    def __contains__(self, name: str) -> bool:
        return name in self._collections
