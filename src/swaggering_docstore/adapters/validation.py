"""Validation results for documents checked against compiled schemas."""

from dataclasses import dataclass, field
from typing import Any

from jsonschema import ValidationError


@dataclass
class ValidationIssue:
    """A document location that failed its JSON Schema."""

    message: str
    path: str = ""
    schema_path: list[Any] = field(default_factory=list)

    @classmethod
    def from_error(cls, error: ValidationError) -> "ValidationIssue":
        return cls(
            message=f"Schema validation failed: {error.message}",
            path=".".join(str(p) for p in error.absolute_path),
            schema_path=list(error.schema_path),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "path": self.path,
            "schema_path": self.schema_path,
        }


@dataclass
class ValidationResult:
    """Outcome of validating one document."""

    valid: bool = True
    issues: list[ValidationIssue] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def error_count(self) -> int:
        return len(self.issues)

    def add_schema_error(self, error: ValidationError) -> None:
        """Record a jsonschema validation error."""
        self.issues.append(ValidationIssue.from_error(error))
        self.valid = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "error_count": self.error_count,
            "issues": [i.to_dict() for i in self.issues],
            "metadata": self.metadata,
        }
