import json
from pathlib import Path

import pytest

from openapi_lint.errors import DocumentLoadError, LintError
from openapi_lint.parser.base import (
    AnySchema,
    ArraySchema,
    Combinator,
    CompositeSchema,
    ObjectSchema,
    PrimitiveSchema,
    PrimitiveType,
    ReferenceSchema,
)
from openapi_lint.parser.detect import detect_format, load_raw
from openapi_lint.parser.openapi import build_document, parse_openapi

FIXTURES = Path(__file__).parent / "fixtures"


class TestDetectFormat:
    def test_detect_openapi_yaml(self):
        assert detect_format(load_raw(FIXTURES / "petstore.yaml")) == "openapi3"

    def test_detect_openapi_json(self):
        assert detect_format(load_raw(FIXTURES / "errors.json")) == "openapi3"

    def test_detect_swagger(self):
        assert detect_format({"swagger": "2.0"}) == "swagger2"

    def test_detect_unknown_format(self):
        assert detect_format({"title": "not an api"}) == "unknown"

    def test_load_rejects_scalar(self, tmp_path):
        f = tmp_path / "doc.yaml"
        f.write_text("just some text")
        with pytest.raises(DocumentLoadError):
            load_raw(f)

    def test_load_rejects_invalid_yaml(self, tmp_path):
        f = tmp_path / "doc.yaml"
        f.write_text("key: [invalid\n")
        with pytest.raises(DocumentLoadError):
            load_raw(f)


class TestOpenApiParser:
    def test_parse_petstore_paths(self):
        doc = parse_openapi(FIXTURES / "petstore.yaml")
        assert list(doc.paths) == ["/pets", "/pets/{pet_id}", "/pet-owners/{owner_id}/pets"]
        assert set(doc.paths["/pets"].operations) == {"get", "post"}

    def test_parse_list_pets(self):
        doc = parse_openapi(FIXTURES / "petstore.yaml")
        list_pets = doc.paths["/pets"].operations["get"]
        assert list_pets.operation_id == "list_pets"
        assert list_pets.summary == "List all pets"
        assert list_pets.parameters[0].name == "limit"
        assert list_pets.parameters[0].location == "query"
        assert list_pets.parameters[0].required is False

    def test_parse_request_body_reference(self):
        doc = parse_openapi(FIXTURES / "petstore.yaml")
        body = doc.paths["/pets"].operations["post"].request_body
        assert body is not None and body.required is True
        assert isinstance(body.content[0].schema_, ReferenceSchema)
        assert body.content[0].schema_.target_name == "NewPet"

    def test_parse_no_content_response(self):
        doc = parse_openapi(FIXTURES / "petstore.yaml")
        deleted = doc.paths["/pets/{pet_id}"].operations["delete"].responses["204"]
        assert deleted.content is None

    def test_parse_registry_variants(self):
        doc = parse_openapi(FIXTURES / "petstore.yaml")
        assert isinstance(doc.schemas["Pet"], ObjectSchema)
        assert doc.schemas["Pet"].required == ["id", "name"]
        assert isinstance(doc.schemas["PetStatus"], PrimitiveSchema)
        assert doc.schemas["PetStatus"].enum == ["available", "pending", "sold_out"]
        kind = doc.schemas["PetKind"]
        assert isinstance(kind, CompositeSchema)
        assert kind.combinator is Combinator.ONE_OF
        assert len(kind.subschemas) == 2
        children = doc.schemas["FamilyTree"].properties["children"]
        assert isinstance(children, ArraySchema)
        assert isinstance(children.items, ReferenceSchema)

    def test_parse_clean_document_has_no_defects(self):
        doc = parse_openapi(FIXTURES / "petstore.yaml")
        assert doc.defects == []


class TestBuildDocument:
    def test_none_document_is_fatal(self):
        with pytest.raises(LintError):
            build_document(None)

    def test_non_mapping_document_is_fatal(self):
        with pytest.raises(LintError):
            build_document(["openapi"])

    def test_type_inferred_from_keywords(self):
        doc = build_document({"components": {"schemas": {
            "Bag": {"properties": {"x": {"type": "string"}}},
            "List": {"items": {"type": "string"}},
        }}})
        assert isinstance(doc.schemas["Bag"], ObjectSchema)
        assert isinstance(doc.schemas["List"], ArraySchema)

    def test_untyped_string_enum_inferred_as_string(self):
        doc = build_document({"components": {"schemas": {
            "State": {"enum": ["Running", "stopped", None]},
            "Mixed": {"enum": ["on", 1]},
            "Empty": {"enum": []},
        }}})
        state = doc.schemas["State"]
        assert isinstance(state, PrimitiveSchema)
        assert state.type is PrimitiveType.STRING
        assert state.enum == ["Running", "stopped", None]
        assert isinstance(doc.schemas["Mixed"], AnySchema)
        assert isinstance(doc.schemas["Empty"], AnySchema)

    def test_type_list_with_null_is_nullable(self):
        doc = build_document({"components": {"schemas": {"Maybe": {"type": ["string", "null"]}}}})
        maybe = doc.schemas["Maybe"]
        assert maybe.type is PrimitiveType.STRING
        assert maybe.nullable is True

    def test_unknown_type_recorded_as_defect(self):
        doc = build_document({"components": {"schemas": {"Odd": {"type": "file"}}}})
        assert isinstance(doc.schemas["Odd"], AnySchema)
        assert doc.defects[0].location == "components.schemas.Odd"
        assert "file" in doc.defects[0].message

    def test_component_references_are_followed(self):
        doc = build_document({
            "paths": {"/items": {"get": {
                "operationId": "list_items",
                "parameters": [{"$ref": "#/components/parameters/PageToken"}],
                "responses": {"200": {"$ref": "#/components/responses/Items"}},
            }}},
            "components": {
                "parameters": {"PageToken": {"name": "page_token", "in": "query", "schema": {"type": "string"}}},
                "responses": {"Items": {"description": "ok", "content": {"application/json": {"schema": {"type": "array"}}}}},
            },
        })
        op = doc.paths["/items"].operations["get"]
        assert op.parameters[0].name == "page_token"
        assert isinstance(op.responses["200"].content[0].schema_, ArraySchema)

    def test_dangling_component_reference_is_defect(self):
        doc = build_document({"paths": {"/items": {"get": {
            "responses": {"200": {"$ref": "#/components/responses/Gone"}},
        }}}})
        assert doc.paths["/items"].operations["get"].responses == {}
        assert doc.defects[0].location == "paths./items.get.responses.200"

    def test_bad_operation_does_not_drop_siblings(self):
        doc = build_document({"paths": {"/items": {
            "get": "not an operation",
            "post": {"operationId": "create_item", "responses": {}},
        }}})
        assert set(doc.paths["/items"].operations) == {"post"}
        assert doc.defects[0].location == "paths./items.get"

    def test_yaml_integer_status_codes(self):
        doc = build_document({"paths": {"/x": {"get": {"responses": {200: {"description": "ok"}}}}}})
        assert "200" in doc.paths["/x"].operations["get"].responses

    def test_document_json_roundtrip(self):
        doc = parse_openapi(FIXTURES / "errors.json")
        data = json.loads(doc.model_dump_json())
        assert data["schemas"]["ImageSource"]["kind"] == "composite"
