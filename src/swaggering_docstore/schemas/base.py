"""Base classes for schema representation.

Provides the normalized node model that API document definitions are
converted to before compilation, and the value objects the compiler
produces from them.
"""

from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field


class ScalarType(str, Enum):
    """Named scalar types understood by the document storage engine."""

    STRING = "String"
    NUMBER = "Number"
    BOOLEAN = "Boolean"
    DATE = "Date"
    BUFFER = "Buffer"
    OBJECT_ID = "ObjectId"
    MIXED = "Mixed"
    DECIMAL128 = "Decimal128"
    MAP = "Map"
    UUID = "UUID"
    BIGINT = "BigInt"


class NodeKind(str, Enum):
    """Shapes a schema node can take."""

    PRIMITIVE = "primitive"
    ARRAY = "array"
    OBJECT = "object"
    REFERENCE = "reference"
    ANY = "any"


class ExtensionMeta(BaseModel):
    """Engine-specific override metadata attached to a node."""

    model_config = ConfigDict(frozen=True)

    type: str | None = Field(default=None, description="Override scalar type name")
    ref: str | None = Field(default=None, description="Override reference target")
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Opaque pass-through options for the engine",
    )

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ExtensionMeta":
        options = {k: v for k, v in payload.items() if k not in ("type", "ref")}
        return cls(type=payload.get("type"), ref=payload.get("ref"), options=options)

    def to_payload(self) -> dict[str, Any]:
        """Rebuild the extension payload the metadata was parsed from."""
        payload = dict(self.options)
        if self.type is not None:
            payload["type"] = self.type
        if self.ref is not None:
            payload["ref"] = self.ref
        return payload


class SchemaNode(BaseModel):
    """A normalized schema node.

    Concrete shapes are the subclasses below; ``kind`` identifies which one.
    """

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[NodeKind]

    raw: dict[str, Any] = Field(default_factory=dict, repr=False, description="Source JSON")
    extension: ExtensionMeta | None = Field(default=None, description="Vendor extension metadata")
    default: Any | None = Field(default=None, description="Declared default value")


class PrimitiveNode(SchemaNode):
    kind: ClassVar[NodeKind] = NodeKind.PRIMITIVE

    type: str
    format: str | None = None


class ArrayNode(SchemaNode):
    kind: ClassVar[NodeKind] = NodeKind.ARRAY

    items: SchemaNode


class ObjectNode(SchemaNode):
    kind: ClassVar[NodeKind] = NodeKind.OBJECT

    properties: dict[str, SchemaNode] = Field(default_factory=dict)
    required: frozenset[str] = Field(default_factory=frozenset)


class ReferenceNode(SchemaNode):
    kind: ClassVar[NodeKind] = NodeKind.REFERENCE

    pointer: str


class AnyNode(SchemaNode):
    """A node declaring neither a type, properties nor a pointer."""

    kind: ClassVar[NodeKind] = NodeKind.ANY


class ReferenceKind(str, Enum):
    CIRCULAR = "circular"
    EXTERNAL = "external"


class ReferenceSpec(BaseModel):
    """Outcome of resolving a pointer from one definition to another."""

    model_config = ConfigDict(frozen=True)

    kind: ReferenceKind
    target: str = Field(..., description="Definition the pointer resolves to")
    is_array: bool = Field(default=False, description="Whether the field holds many")

    @property
    def is_circular(self) -> bool:
        return self.kind == ReferenceKind.CIRCULAR

    def to_field_spec(self) -> dict[str, Any] | list[dict[str, Any]]:
        """Render a circular reference as a terminal stub field."""
        stub: dict[str, Any] = {"type": ScalarType.OBJECT_ID, "ref": self.target}
        # A self-referencing array keeps its one-item array marker around the stub.
        return [stub] if self.is_array else stub


class CompiledSchema(BaseModel):
    """The compiled storage schema for one definition."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Definition name")
    fields: dict[str, Any] = Field(default_factory=dict, description="Compiled field map")
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Definition-level extension payload",
    )

    def field_names(self) -> list[str]:
        return list(self.fields.keys())

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain JSON-compatible data."""
        return self.model_dump(mode="json")


class CompilationResult(BaseModel):
    """Compiled schemas together with the engine's model handles."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    schemas: dict[str, CompiledSchema] = Field(default_factory=dict)
    models: dict[str, Any] = Field(default_factory=dict)
