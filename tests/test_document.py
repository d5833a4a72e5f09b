"""Tests for API document loading and definitions extraction."""

import json
import tempfile
from pathlib import Path

import pytest

from swaggering_docstore.errors import InvalidSpec, MissingDefinitions, MissingSpec
from swaggering_docstore.schemas import (
    ObjectNode,
    extract_definitions,
    list_definitions,
    load_document,
    load_document_file,
)


# Test data paths
SPECS_DIR = Path(__file__).parent.parent / "examples" / "specs"
PETSTORE_FILE = SPECS_DIR / "petstore.json"
PETSTORE_YAML_FILE = SPECS_DIR / "petstore.yaml"
HUMAN_FILE = SPECS_DIR / "human.openapi3.json"


class TestLoadDocument:
    """Tests for the three accepted input forms."""

    def test_load_from_dict(self):
        spec = json.loads(PETSTORE_FILE.read_text())
        assert load_document(spec) == spec

    def test_load_from_string(self):
        document = load_document(PETSTORE_FILE.read_text())
        assert document["swagger"] == "2.0"

    def test_load_from_bytes(self):
        document = load_document(PETSTORE_FILE.read_bytes())
        assert "Pet" in document["definitions"]

    def test_dict_is_copied(self):
        spec = {"definitions": {}}
        document = load_document(spec)
        document["extra"] = True
        assert "extra" not in spec

    @pytest.mark.parametrize("spec", [None, "", b""])
    def test_missing_spec(self, spec):
        with pytest.raises(MissingSpec, match="Swagger spec not supplied"):
            load_document(spec)

    def test_empty_mapping_is_a_document(self):
        assert load_document({}) == {}

    def test_missing_spec_is_invalid_spec(self):
        with pytest.raises(InvalidSpec):
            load_document(None)

    def test_invalid_json(self):
        with pytest.raises(InvalidSpec, match="Invalid JSON"):
            load_document("{not json")

    @pytest.mark.parametrize("spec", [42, 1.5, ["definitions"], object()])
    def test_unknown_spec_object(self, spec):
        with pytest.raises(InvalidSpec, match="Unknown or invalid spec object"):
            load_document(spec)

    def test_json_array_rejected(self):
        with pytest.raises(InvalidSpec):
            load_document("[1, 2, 3]")


class TestLoadDocumentFile:
    """Tests for loading documents from disk."""

    def test_load_json_file(self):
        assert "definitions" in load_document_file(PETSTORE_FILE)

    def test_load_yaml_file(self):
        document = load_document_file(PETSTORE_YAML_FILE)
        assert document["definitions"]["Pet"]["required"] == ["id"]

    def test_invalid_yaml_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "broken.yaml"
            path.write_text("definitions: [unclosed")
            with pytest.raises(InvalidSpec, match="Invalid YAML"):
                load_document_file(path)

    def test_empty_yaml_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "empty.yaml"
            path.write_text("")
            with pytest.raises(MissingSpec):
                load_document_file(path)


class TestExtractDefinitions:
    """Tests for locating the definitions root."""

    def test_swagger2_definitions(self):
        definitions = extract_definitions(PETSTORE_FILE.read_text())
        assert list(definitions) == ["Pet", "Address", "Error"]
        assert isinstance(definitions["Pet"], ObjectNode)

    def test_openapi3_components(self):
        definitions = extract_definitions(HUMAN_FILE.read_text())
        assert list(definitions) == ["Human", "Owner", "Pet"]

    def test_definitions_preferred_over_components(self):
        definitions = extract_definitions({
            "definitions": {"Legacy": {"type": "object", "properties": {}}},
            "components": {"schemas": {"Modern": {"type": "object", "properties": {}}}},
        })
        assert list(definitions) == ["Legacy"]

    def test_no_definitions(self):
        with pytest.raises(MissingDefinitions):
            extract_definitions({"swagger": "2.0", "paths": {}})

    def test_components_without_schemas(self):
        with pytest.raises(MissingDefinitions):
            extract_definitions({"openapi": "3.0.0", "components": {"responses": {}}})

    def test_definitions_must_be_object(self):
        with pytest.raises(InvalidSpec):
            extract_definitions({"definitions": ["Pet"]})

    def test_empty_document_has_no_definitions(self):
        with pytest.raises(MissingDefinitions):
            extract_definitions({})

    def test_empty_definitions(self):
        assert extract_definitions({"definitions": {}}) == {}

    def test_list_definitions(self):
        assert list_definitions(HUMAN_FILE.read_bytes()) == ["Human", "Owner", "Pet"]
