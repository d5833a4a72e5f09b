"""Tests for node normalization and primitive type mapping."""

import pytest

from swaggering_docstore.compiler.type_mapper import TypeRegistry, is_simple_type, map_type
from swaggering_docstore.errors import (
    InvalidSpec,
    PropertyProcessingError,
    UnrecognizedExtensionType,
    UnrecognizedFormat,
    UnrecognizedReference,
    UnrecognizedType,
)
from swaggering_docstore.schemas import (
    AnyNode,
    ArrayNode,
    NodeKind,
    ObjectNode,
    PrimitiveNode,
    ReferenceNode,
    ScalarType,
    normalize_node,
)


# =============================================================================
# Normalization Tests
# =============================================================================

class TestNormalizeNode:
    """Tests for classifying raw JSON nodes."""

    def test_reference_wins_over_type(self):
        node = normalize_node({"$ref": "#/definitions/Pet", "type": "object"})
        assert isinstance(node, ReferenceNode)
        assert node.pointer == "#/definitions/Pet"
        assert node.kind == NodeKind.REFERENCE

    def test_array_node(self):
        node = normalize_node({"type": "array", "items": {"type": "string"}})
        assert isinstance(node, ArrayNode)
        assert isinstance(node.items, PrimitiveNode)
        assert node.items.type == "string"

    def test_array_without_items(self):
        """An array without items has items of any shape."""
        node = normalize_node({"type": "array"})
        assert isinstance(node.items, AnyNode)

    def test_object_node(self):
        node = normalize_node({
            "type": "object",
            "required": ["name"],
            "properties": {"name": {"type": "string"}, "age": {"type": "integer"}},
        })
        assert isinstance(node, ObjectNode)
        assert list(node.properties) == ["name", "age"]
        assert node.required == frozenset({"name"})

    def test_root_properties_without_type_is_object(self):
        node = normalize_node({"properties": {"name": {"type": "string"}}}, root=True)
        assert isinstance(node, ObjectNode)

    def test_nested_properties_without_type_is_any(self):
        node = normalize_node({
            "type": "object",
            "properties": {"meta": {"properties": {"x": {"type": "string"}}}},
        })
        assert isinstance(node.properties["meta"], AnyNode)

    def test_reserved_properties_dropped(self):
        node = normalize_node({
            "type": "object",
            "properties": {
                "_id": {"type": "string"},
                "__v": {"type": "integer"},
                "name": {"type": "string"},
            },
        })
        assert list(node.properties) == ["name"]

    def test_primitive_node_keeps_format_and_default(self):
        node = normalize_node({"type": "string", "format": "date", "default": "2020-01-01"})
        assert isinstance(node, PrimitiveNode)
        assert node.format == "date"
        assert node.default == "2020-01-01"

    def test_extension_metadata(self):
        node = normalize_node({
            "type": "string",
            "x-swaggering-mongoose": {"type": "ObjectId", "ref": "Person", "index": True},
        })
        assert node.extension is not None
        assert node.extension.type == "ObjectId"
        assert node.extension.ref == "Person"
        assert node.extension.options == {"index": True}

    def test_custom_extension_key(self):
        node = normalize_node({"type": "string", "x-store": {"select": False}}, "x-store")
        assert node.extension.options == {"select": False}

    def test_empty_node_is_any(self):
        assert isinstance(normalize_node({}), AnyNode)

    def test_non_object_node_rejected(self):
        with pytest.raises(InvalidSpec):
            normalize_node(["not", "an", "object"])

    def test_non_string_pointer_rejected(self):
        with pytest.raises(UnrecognizedReference):
            normalize_node({"$ref": 42})

    def test_non_string_type_rejected(self):
        with pytest.raises(UnrecognizedType):
            normalize_node({"type": ["string", "null"]})

    def test_extension_must_be_object(self):
        with pytest.raises(InvalidSpec):
            normalize_node({"type": "string", "x-swaggering-mongoose": "ObjectId"})

    def test_extension_type_must_be_name(self):
        with pytest.raises(InvalidSpec, match="Invalid 'x-swaggering-mongoose' payload"):
            normalize_node({"type": "string", "x-swaggering-mongoose": {"type": ["ObjectId"]}})

    def test_bad_property_reports_key(self):
        with pytest.raises(PropertyProcessingError) as exc_info:
            normalize_node({"type": "object", "properties": {"tags": {"type": 7}}})

        assert exc_info.value.key == "tags"
        assert isinstance(exc_info.value.__cause__, UnrecognizedType)

    def test_non_string_format_rejected(self):
        with pytest.raises(UnrecognizedFormat, match="Unrecognised schema format: 5"):
            normalize_node({"type": "number", "format": 5})

    def test_non_string_format_reports_key(self):
        with pytest.raises(PropertyProcessingError) as exc_info:
            normalize_node({"type": "object", "properties": {"n": {"type": "number", "format": 5}}})

        assert exc_info.value.key == "n"
        assert isinstance(exc_info.value.root_cause, UnrecognizedFormat)

    @pytest.mark.parametrize("required", [[["name"]], [{"name": True}], ["name", 3]])
    def test_required_must_list_names(self, required):
        with pytest.raises(InvalidSpec, match="'required' must list property names") as exc_info:
            normalize_node({"type": "object", "properties": {}, "required": required})

        assert exc_info.value.node["required"] == required


# =============================================================================
# Type Mapping Tests
# =============================================================================

class TestMapType:
    """Tests for the primitive type table."""

    @pytest.mark.parametrize("raw,expected", [
        ({"type": "integer"}, ScalarType.NUMBER),
        ({"type": "integer", "format": "int64"}, ScalarType.NUMBER),
        ({"type": "long"}, ScalarType.NUMBER),
        ({"type": "float"}, ScalarType.NUMBER),
        ({"type": "double"}, ScalarType.NUMBER),
        ({"type": "number", "format": "float"}, ScalarType.NUMBER),
        ({"type": "number", "format": "double"}, ScalarType.NUMBER),
        ({"type": "number", "format": "integer"}, ScalarType.NUMBER),
        ({"type": "number", "format": "long"}, ScalarType.NUMBER),
        ({"type": "string"}, ScalarType.STRING),
        ({"type": "string", "format": "email"}, ScalarType.STRING),
        ({"type": "string", "format": "date"}, ScalarType.DATE),
        ({"type": "string", "format": "date-time"}, ScalarType.DATE),
        ({"type": "password"}, ScalarType.STRING),
        ({"type": "boolean"}, ScalarType.BOOLEAN),
        ({"type": "date"}, ScalarType.DATE),
        ({"type": "dateTime"}, ScalarType.DATE),
    ])
    def test_primitive_types(self, raw, expected):
        assert map_type(normalize_node(raw)) == expected

    def test_array_of_primitives(self):
        node = normalize_node({"type": "array", "items": {"type": "integer"}})
        assert map_type(node) == [ScalarType.NUMBER]

    def test_array_of_arrays(self):
        node = normalize_node({
            "type": "array",
            "items": {"type": "array", "items": {"type": "string", "format": "date"}},
        })
        assert map_type(node) == [[ScalarType.DATE]]

    def test_number_without_format(self):
        """Bare 'number' needs a numeric format."""
        with pytest.raises(UnrecognizedFormat, match="Unrecognised schema format"):
            map_type(normalize_node({"type": "number"}))

    def test_number_with_unknown_format(self):
        with pytest.raises(UnrecognizedFormat):
            map_type(normalize_node({"type": "number", "format": "int32"}))

    def test_unknown_type(self):
        with pytest.raises(UnrecognizedType, match="uuid"):
            map_type(normalize_node({"type": "uuid"}))

    def test_typeless_node(self):
        with pytest.raises(UnrecognizedType):
            map_type(normalize_node({"description": "anything"}))

    def test_object_items_use_callback(self):
        node = normalize_node({
            "type": "array",
            "items": {"type": "object", "properties": {"name": {"type": "string"}}},
        })
        assert map_type(node, lambda obj: sorted(obj.properties)) == [["name"]]

    def test_object_without_callback(self):
        with pytest.raises(UnrecognizedType):
            map_type(normalize_node({"type": "object", "properties": {}}))

    def test_simple_types(self):
        assert is_simple_type("string")
        assert is_simple_type("array")
        assert is_simple_type("dateTime")
        assert not is_simple_type("uuid")
        assert not is_simple_type(None)


# =============================================================================
# Type Registry Tests
# =============================================================================

class TestTypeRegistry:
    """Tests for the named-type table."""

    def test_default_types_registered(self):
        registry = TypeRegistry()
        for scalar in ScalarType:
            assert registry.get(scalar.value) == scalar
        assert "Mixed" in registry

    def test_unknown_type(self):
        registry = TypeRegistry()
        assert registry.get("Foo") is None
        assert "Foo" not in registry

    def test_aliases(self):
        registry = TypeRegistry({"ObjectID": "ObjectId", "Any": "Mixed"})
        assert registry.get("ObjectID") == ScalarType.OBJECT_ID
        assert registry.get("Any") == ScalarType.MIXED

    def test_alias_to_unknown_type(self):
        with pytest.raises(UnrecognizedExtensionType):
            TypeRegistry({"Thing": "Nope"})

    def test_unregister(self):
        registry = TypeRegistry()
        assert registry.unregister("Buffer") is True
        assert registry.unregister("Buffer") is False
        assert "Buffer" not in registry.list_types()
