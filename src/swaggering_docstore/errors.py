"""Error taxonomy for schema compilation.

Every failure raised while compiling an API document is a
``CompilationError``. Errors carry a machine-readable ``kind``, a message,
a JSON snapshot of the offending node and, through ``raise ... from``, the
chain of underlying causes.
"""

import json
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Compilation error codes."""

    INVALID_SPEC = "INVALID_SPEC"
    MISSING_SPEC = "MISSING_SPEC"
    MISSING_DEFINITIONS = "MISSING_DEFINITIONS"
    MISSING_SCHEMAS = "MISSING_SCHEMAS"
    UNRECOGNIZED_FORMAT = "UNRECOGNIZED_FORMAT"
    UNRECOGNIZED_TYPE = "UNRECOGNIZED_TYPE"
    UNRECOGNIZED_REFERENCE = "UNRECOGNIZED_REFERENCE"
    UNDEFINED_REFERENCE = "UNDEFINED_REFERENCE"
    UNRECOGNIZED_EXTENSION_TYPE = "UNRECOGNIZED_EXTENSION_TYPE"
    PROPERTY_PROCESSING = "PROPERTY_PROCESSING"
    RECURSION_LIMIT_EXCEEDED = "RECURSION_LIMIT_EXCEEDED"


def snapshot(node: Any) -> str:
    """Render a raw node as compact JSON for diagnostics."""
    try:
        return json.dumps(node, sort_keys=True, default=str)
    except (TypeError, ValueError):
        return repr(node)


class CompilationError(ValueError):
    """Base class for all structural errors found while compiling."""

    kind: ErrorKind = ErrorKind.INVALID_SPEC

    def __init__(self, message: str, node: Any = None):
        super().__init__(message)
        self.message = message
        self.node = node

    @property
    def root_cause(self) -> BaseException:
        """The innermost exception of the cause chain."""
        current: BaseException = self
        while current.__cause__ is not None:
            current = current.__cause__
        return current

    def to_dict(self) -> dict[str, Any]:
        cause = self.__cause__
        if isinstance(cause, CompilationError):
            cause_dict: dict[str, Any] | None = cause.to_dict()
        elif cause is not None:
            cause_dict = {"kind": type(cause).__name__, "message": str(cause)}
        else:
            cause_dict = None

        return {
            "kind": self.kind.value,
            "message": self.message,
            "node": self.node,
            "cause": cause_dict,
        }


class InvalidSpec(CompilationError):
    """The input document is of an unrecognized shape."""

    kind = ErrorKind.INVALID_SPEC


class MissingSpec(InvalidSpec):
    """No input document was supplied."""

    kind = ErrorKind.MISSING_SPEC


class MissingDefinitions(CompilationError):
    """Neither recognized definitions root is present."""

    kind = ErrorKind.MISSING_DEFINITIONS


class MissingSchemas(CompilationError):
    """No compiled schemas were handed to the engine adapter."""

    kind = ErrorKind.MISSING_SCHEMAS


class UnrecognizedFormat(CompilationError):
    kind = ErrorKind.UNRECOGNIZED_FORMAT


class UnrecognizedType(CompilationError):
    kind = ErrorKind.UNRECOGNIZED_TYPE


class UnrecognizedReference(CompilationError):
    """A pointer does not match either recognized root pattern."""

    kind = ErrorKind.UNRECOGNIZED_REFERENCE


class UndefinedReference(UnrecognizedReference):
    """A well-formed pointer names a definition that does not exist."""

    kind = ErrorKind.UNDEFINED_REFERENCE


class UnrecognizedExtensionType(CompilationError):
    kind = ErrorKind.UNRECOGNIZED_EXTENSION_TYPE


class RecursionLimitExceeded(CompilationError):
    """Reference expansion went deeper than the configured limit.

    Raised for indirect reference cycles (A -> B -> A), which are not
    detected as circular references.
    """

    kind = ErrorKind.RECURSION_LIMIT_EXCEEDED


class PropertyProcessingError(CompilationError):
    """Wraps any failure raised while compiling a single property."""

    kind = ErrorKind.PROPERTY_PROCESSING

    def __init__(self, key: str, node: Any, cause: BaseException):
        root = cause.root_cause if isinstance(cause, CompilationError) else cause
        super().__init__(
            f'Exception processing key "{key}" at: {snapshot(node)}: {root}',
            node=node,
        )
        self.key = key
