"""OpenAPI 3.0 document builder.

Converts a raw OpenAPI mapping into the Document model. Structural problems
are recorded on the document as defects so linting can still report on the
rest of it.
"""

import logging
from pathlib import Path
from typing import Any

from openapi_lint.errors import LintError, MalformedDocumentShape
from openapi_lint.parser.base import (
    HTTP_METHODS,
    AnySchema,
    ArraySchema,
    Combinator,
    CompositeSchema,
    Document,
    DocumentDefect,
    MediaType,
    ObjectSchema,
    Operation,
    Parameter,
    PathItem,
    PrimitiveSchema,
    PrimitiveType,
    ReferenceSchema,
    RequestBody,
    Response,
    Schema,
)
from openapi_lint.parser.detect import load_raw

logger = logging.getLogger(__name__)

MAX_REF_HOPS = 32


def parse_openapi(file_path: Path) -> Document:
    """Parse an OpenAPI JSON/YAML file into a Document."""
    data = load_raw(file_path)
    return build_document(data)


def build_document(data: Any) -> Document:
    """Build a Document from an already-deserialized OpenAPI mapping."""
    if data is None:
        raise LintError("document is empty")
    if not isinstance(data, dict):
        raise LintError(f"document must be a mapping, got {type(data).__name__}")
    return _DocumentBuilder(data).build()


class _DocumentBuilder:
    """Single-use converter from a raw mapping to a Document."""

    def __init__(self, data: dict):
        self.data = data
        self.components = data.get("components") or {}
        self.defects: list[DocumentDefect] = []

    def build(self) -> Document:
        info = self.data.get("info") or {}
        if not isinstance(self.components, dict):
            self._defect("components", "components must be a mapping")
            self.components = {}

        schemas = self._parse_registry()
        paths = self._parse_paths()
        logger.debug("built document with %d paths and %d schemas", len(paths), len(schemas))

        return Document(
            openapi=str(self.data.get("openapi", "3.0.3")),
            title=_text(info.get("title")) if isinstance(info, dict) else "",
            description=_text(info.get("description")) if isinstance(info, dict) else "",
            paths=paths,
            schemas=schemas,
            defects=self.defects,
        )

    def _defect(self, location: str, message: str) -> None:
        self.defects.append(DocumentDefect(location=location, message=message))

    # -- schemas --------------------------------------------------------------

    def _parse_registry(self) -> dict[str, Schema]:
        raw = self.components.get("schemas") or {}
        if not isinstance(raw, dict):
            self._defect("components.schemas", "schemas must be a mapping")
            return {}
        return {
            str(name): self._parse_schema(value, f"components.schemas.{name}")
            for name, value in raw.items()
        }

    def _parse_schema(self, raw: Any, loc: str) -> Schema:
        if not isinstance(raw, dict):
            self._defect(loc, f"schema must be a mapping, got {type(raw).__name__}")
            return AnySchema()

        notes = {
            "title": _text(raw.get("title")) or None,
            "description": _text(raw.get("description")) or None,
        }

        if "$ref" in raw:
            return ReferenceSchema(ref=str(raw["$ref"]), **notes)

        for combinator in (Combinator.ONE_OF, Combinator.ANY_OF, Combinator.ALL_OF):
            if combinator.value not in raw:
                continue
            members = raw[combinator.value]
            if not isinstance(members, list):
                self._defect(loc, f"{combinator.value} must be a list")
                return AnySchema(**notes)
            return CompositeSchema(
                combinator=combinator,
                subschemas=[
                    self._parse_schema(member, f"{loc}.{combinator.value}[{i}]")
                    for i, member in enumerate(members)
                ],
                **notes,
            )

        schema_type = raw.get("type")
        nullable = bool(raw.get("nullable", False))
        if isinstance(schema_type, list):
            # 3.1-style type arrays: ["string", "null"] is a nullable string
            non_null = [t for t in schema_type if t != "null"]
            if len(non_null) > 1:
                self._defect(loc, f"multiple types {schema_type} are not supported")
                return AnySchema(**notes)
            nullable = nullable or len(non_null) < len(schema_type)
            schema_type = non_null[0] if non_null else "null"

        if schema_type is None:
            if "properties" in raw or "additionalProperties" in raw:
                schema_type = "object"
            elif "items" in raw:
                schema_type = "array"
            elif _is_string_enum(raw.get("enum")):
                schema_type = "string"
            else:
                return AnySchema(**notes)

        if schema_type == "object":
            return self._parse_object(raw, loc, notes)
        if schema_type == "array":
            items = raw.get("items")
            return ArraySchema(
                items=self._parse_schema(items, f"{loc}.items") if items is not None else None,
                **notes,
            )

        try:
            primitive = PrimitiveType(schema_type)
        except ValueError:
            self._defect(loc, f"unknown schema type {schema_type!r}")
            return AnySchema(**notes)

        enum = raw.get("enum")
        if enum is not None and not isinstance(enum, list):
            self._defect(loc, "enum must be a list")
            enum = None
        return PrimitiveSchema(
            type=primitive,
            enum=enum,
            nullable=nullable,
            format=_text(raw.get("format")) or None,
            **notes,
        )

    def _parse_object(self, raw: dict, loc: str, notes: dict) -> ObjectSchema:
        properties = raw.get("properties") or {}
        if not isinstance(properties, dict):
            self._defect(loc, "properties must be a mapping")
            properties = {}

        additional = raw.get("additionalProperties")
        required = raw.get("required") or []
        return ObjectSchema(
            properties={
                str(name): self._parse_schema(value, f"{loc}.properties.{name}")
                for name, value in properties.items()
            },
            required=[str(r) for r in required] if isinstance(required, list) else [],
            additional_properties=(
                self._parse_schema(additional, f"{loc}.additionalProperties")
                if isinstance(additional, dict)
                else None
            ),
            **notes,
        )

    # -- components -----------------------------------------------------------

    def _lookup(self, section: str, raw: dict, loc: str) -> dict:
        """Follow `$ref`s into components/<section> until a concrete entry is found."""
        prefix = f"#/components/{section}/"
        for _ in range(MAX_REF_HOPS):
            if "$ref" not in raw:
                return raw
            ref = str(raw["$ref"])
            entries = self.components.get(section) or {}
            target = entries.get(ref[len(prefix):]) if ref.startswith(prefix) else None
            if not isinstance(target, dict):
                raise MalformedDocumentShape(loc, f"dangling reference {ref!r}")
            raw = target
        raise MalformedDocumentShape(loc, f"reference chain in components.{section} does not terminate")

    def _parse_content(self, raw: Any, loc: str) -> list[MediaType]:
        if not isinstance(raw, dict):
            self._defect(loc, "content must be a mapping")
            return []
        result = []
        for media_type, entry in raw.items():
            if not isinstance(entry, dict):
                self._defect(f"{loc}.{media_type}", "media type entry must be a mapping")
                continue
            schema = entry.get("schema")
            result.append(
                MediaType(
                    media_type=str(media_type),
                    schema_=self._parse_schema(schema, f"{loc}.{media_type}.schema") if schema is not None else None,
                )
            )
        return result

    def _parse_parameters(self, params: Any, loc: str) -> list[Parameter]:
        if not isinstance(params, list):
            self._defect(loc, "parameters must be a list")
            return []

        result = []
        for i, raw in enumerate(params):
            item_loc = f"{loc}[{i}]"
            try:
                if not isinstance(raw, dict):
                    raise MalformedDocumentShape(item_loc, "parameter must be a mapping")
                p = self._lookup("parameters", raw, item_loc)
                if "name" not in p:
                    raise MalformedDocumentShape(item_loc, "parameter has no name")
            except MalformedDocumentShape as e:
                self._defect(e.location, e.message)
                continue

            name = str(p["name"])
            param_loc = f"{loc}.{name}"
            schema = p.get("schema")
            result.append(
                Parameter(
                    name=name,
                    location=str(p.get("in", "query")),
                    required=bool(p.get("required", False)),
                    description=_text(p.get("description")),
                    schema_=self._parse_schema(schema, f"{param_loc}.schema") if schema is not None else None,
                    content=self._parse_content(p["content"], f"{param_loc}.content") if "content" in p else [],
                )
            )
        return result

    def _parse_request_body(self, raw: Any, loc: str) -> RequestBody | None:
        if raw is None:
            return None
        try:
            if not isinstance(raw, dict):
                raise MalformedDocumentShape(loc, "requestBody must be a mapping")
            body = self._lookup("requestBodies", raw, loc)
        except MalformedDocumentShape as e:
            self._defect(e.location, e.message)
            return None
        return RequestBody(
            description=_text(body.get("description")),
            required=bool(body.get("required", False)),
            content=self._parse_content(body.get("content") or {}, f"{loc}.content"),
        )

    def _parse_responses(self, responses: Any, loc: str) -> dict[str, Response]:
        if not isinstance(responses, dict):
            self._defect(loc, "responses must be a mapping")
            return {}

        result = {}
        for status_code, raw in responses.items():
            resp_loc = f"{loc}.{status_code}"
            try:
                if not isinstance(raw, dict):
                    raise MalformedDocumentShape(resp_loc, "response must be a mapping")
                resp = self._lookup("responses", raw, resp_loc)
            except MalformedDocumentShape as e:
                self._defect(e.location, e.message)
                continue
            result[str(status_code)] = Response(
                description=_text(resp.get("description")),
                content=self._parse_content(resp["content"], f"{resp_loc}.content") if "content" in resp else None,
            )
        return result

    # -- paths ----------------------------------------------------------------

    def _parse_paths(self) -> dict[str, PathItem]:
        paths = self.data.get("paths") or {}
        if not isinstance(paths, dict):
            self._defect("paths", "paths must be a mapping")
            return {}

        result = {}
        for path, methods in paths.items():
            loc = f"paths.{path}"
            try:
                result[str(path)] = self._parse_path_item(methods, loc)
            except MalformedDocumentShape as e:
                self._defect(e.location, e.message)
        return result

    def _parse_path_item(self, methods: Any, loc: str) -> PathItem:
        if not isinstance(methods, dict):
            raise MalformedDocumentShape(loc, "path item must be a mapping")

        operations = {}
        for key, operation in methods.items():
            method = str(key).lower()
            if method not in HTTP_METHODS:
                continue
            try:
                operations[method] = self._parse_operation(method, operation, f"{loc}.{method}")
            except MalformedDocumentShape as e:
                self._defect(e.location, e.message)

        return PathItem(
            operations=operations,
            parameters=self._parse_parameters(methods.get("parameters", []), f"{loc}.parameters"),
        )

    def _parse_operation(self, method: str, operation: Any, loc: str) -> Operation:
        if not isinstance(operation, dict):
            raise MalformedDocumentShape(loc, "operation must be a mapping")

        op_id = operation.get("operationId")
        return Operation(
            method=method,
            operation_id=str(op_id) if op_id is not None else None,
            summary=_text(operation.get("summary")),
            description=_text(operation.get("description")),
            parameters=self._parse_parameters(operation.get("parameters", []), f"{loc}.parameters"),
            request_body=self._parse_request_body(operation.get("requestBody"), f"{loc}.requestBody"),
            responses=self._parse_responses(operation.get("responses", {}), f"{loc}.responses"),
            tags=[str(t) for t in operation.get("tags", []) or []],
        )


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _is_string_enum(values: Any) -> bool:
    """An untyped enum of strings (nulls allowed) is a string schema."""
    if not isinstance(values, list) or not values:
        return False
    return all(v is None or isinstance(v, str) for v in values)
