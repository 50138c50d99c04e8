"""Document models for parsed OpenAPI 3.0 content.

The loader converts raw JSON/YAML mappings into these models; the resolver,
classifier and rules only ever read them.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

SCHEMA_REF_PREFIX = "#/components/schemas/"

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


class PrimitiveType(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


class Combinator(str, Enum):
    ALL_OF = "allOf"
    ONE_OF = "oneOf"
    ANY_OF = "anyOf"


class SchemaBase(BaseModel):
    """Annotations shared by every schema variant."""

    title: str | None = None
    description: str | None = None


class ReferenceSchema(SchemaBase):
    """A `$ref` to another schema; resolved by registry lookup."""

    kind: Literal["reference"] = "reference"
    ref: str

    @property
    def target_name(self) -> str | None:
        if not self.ref.startswith(SCHEMA_REF_PREFIX):
            return None
        return self.ref[len(SCHEMA_REF_PREFIX):]


class PrimitiveSchema(SchemaBase):
    kind: Literal["primitive"] = "primitive"
    type: PrimitiveType
    enum: list[Any] | None = None
    nullable: bool = False
    format: str | None = None


class ObjectSchema(SchemaBase):
    kind: Literal["object"] = "object"
    properties: dict[str, "Schema"] = {}
    required: list[str] = []
    additional_properties: "Schema | None" = None


class ArraySchema(SchemaBase):
    kind: Literal["array"] = "array"
    items: "Schema | None" = None


class CompositeSchema(SchemaBase):
    """allOf / oneOf / anyOf over an ordered list of sub-schemas."""

    kind: Literal["composite"] = "composite"
    combinator: Combinator
    subschemas: list["Schema"]


class AnySchema(SchemaBase):
    """A schema without type information (e.g. `{}`)."""

    kind: Literal["any"] = "any"


Schema = Annotated[
    Union[ReferenceSchema, PrimitiveSchema, ObjectSchema, ArraySchema, CompositeSchema, AnySchema],
    Field(discriminator="kind"),
]

for _model in (ObjectSchema, ArraySchema, CompositeSchema):
    _model.model_rebuild()


class MediaType(BaseModel):
    """One entry of a `content` map. `schema_` is None when the entry has no schema."""

    media_type: str
    schema_: Schema | None = None


class Parameter(BaseModel):
    """A single operation parameter (query, path, header, or cookie)."""

    name: str
    location: str  # query / path / header / cookie
    required: bool = False
    description: str = ""
    schema_: Schema | None = None
    content: list[MediaType] = []


class RequestBody(BaseModel):
    description: str = ""
    required: bool = False
    content: list[MediaType] = []


class Response(BaseModel):
    description: str = ""
    content: list[MediaType] | None = None


class Operation(BaseModel):
    """A single HTTP operation with everything the rules inspect."""

    method: str  # lowercase http method
    operation_id: str | None = None
    summary: str = ""
    description: str = ""
    parameters: list[Parameter] = []
    request_body: RequestBody | None = None
    responses: dict[str, Response] = {}  # {status_code | "default": Response}
    tags: list[str] = []


class PathItem(BaseModel):
    operations: dict[str, Operation] = {}  # {method: Operation}
    parameters: list[Parameter] = []


class DocumentDefect(BaseModel):
    """A structural problem found while building the model."""

    location: str
    message: str


class Document(BaseModel):
    """Root of a parsed OpenAPI document."""

    openapi: str = "3.0.3"
    title: str = ""
    description: str = ""
    paths: dict[str, PathItem] = {}
    schemas: dict[str, Schema] = {}
    defects: list[DocumentDefect] = []
