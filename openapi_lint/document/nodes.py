"""
Typed object graph for an OpenAPI 3.0 description.

These nodes are produced by the DocumentParser and only ever read by the
analyzer and the rules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeVar, Union

T = TypeVar("T")

# Order in which a path item's operations are visited
HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

PARAMETER_LOCATIONS = ("query", "header", "path", "cookie")


@dataclass
class Reference:
    """A $ref pointing into one of the components collections."""

    reference: str = ""


# An inline item or a reference to one
RefOr = Union[Reference, T]


# ---------------------------------------------------------------------------
# Schema kinds
# ---------------------------------------------------------------------------


@dataclass
class StringType:
    format: str | None = None
    pattern: str | None = None
    enumeration: list[str | None] = field(default_factory=list)
    min_length: int | None = None
    max_length: int | None = None

    category = "string"


@dataclass
class NumberType:
    format: str | None = None
    multiple_of: float | None = None
    minimum: float | None = None
    maximum: float | None = None
    exclusive_minimum: bool = False
    exclusive_maximum: bool = False
    enumeration: list[float | None] = field(default_factory=list)

    category = "number"


@dataclass
class IntegerType:
    format: str | None = None
    multiple_of: int | None = None
    minimum: int | None = None
    maximum: int | None = None
    exclusive_minimum: bool = False
    exclusive_maximum: bool = False
    enumeration: list[int | None] = field(default_factory=list)

    category = "integer"


@dataclass
class BooleanType:
    enumeration: list[bool | None] = field(default_factory=list)

    category = "boolean"


@dataclass
class ObjectType:
    # Declaration order is preserved
    properties: dict[str, RefOr[Schema]] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    # None when absent, a bool toggle, or a schema for the extra values
    additional_properties: bool | RefOr[Schema] | None = None
    min_properties: int | None = None
    max_properties: int | None = None

    category = "object"


@dataclass
class ArrayType:
    items: RefOr[Schema] | None = None
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool = False

    category = "array"


SchemaType = Union[StringType, NumberType, IntegerType, BooleanType, ObjectType, ArrayType]


@dataclass
class OneOf:
    one_of: list[RefOr[Schema]] = field(default_factory=list)


@dataclass
class AllOf:
    all_of: list[RefOr[Schema]] = field(default_factory=list)


@dataclass
class AnyOf:
    any_of: list[RefOr[Schema]] = field(default_factory=list)


@dataclass
class Not:
    not_: RefOr[Schema] | None = None


@dataclass
class AnySchema:
    """A schema without a single recognizable shape.

    Every constraint keyword that was present in the source is recorded so
    that the walker can tell a truly free-form value from an unhandled mix.
    """

    typ: str | None = None
    pattern: str | None = None
    multiple_of: float | None = None
    exclusive_minimum: bool | None = None
    exclusive_maximum: bool | None = None
    minimum: float | None = None
    maximum: float | None = None
    properties: dict[str, RefOr[Schema]] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    additional_properties: bool | RefOr[Schema] | None = None
    min_properties: int | None = None
    max_properties: int | None = None
    items: RefOr[Schema] | None = None
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool | None = None
    enumeration: list[Any] = field(default_factory=list)
    format: str | None = None
    min_length: int | None = None
    max_length: int | None = None
    one_of: list[RefOr[Schema]] = field(default_factory=list)
    all_of: list[RefOr[Schema]] = field(default_factory=list)
    any_of: list[RefOr[Schema]] = field(default_factory=list)
    not_: RefOr[Schema] | None = None

    def constraints(self) -> list[str]:
        """Names of the constraint fields that are set."""
        names = []
        for name, value in vars(self).items():
            if value is None or value == [] or value == {}:
                continue
            names.append(name)
        return names

    def is_unconstrained(self) -> bool:
        return not self.constraints()


SchemaKind = Union[SchemaType, OneOf, AllOf, AnyOf, Not, AnySchema]


@dataclass
class Schema:
    """One schema node: common data plus its kind."""

    kind: SchemaKind = field(default_factory=AnySchema)
    title: str | None = None
    description: str | None = None
    nullable: bool = False
    read_only: bool = False
    write_only: bool = False
    deprecated: bool = False
    default: Any = None
    extensions: dict[str, Any] = field(default_factory=dict)

    # JSON pointer of the node in the source document (for error messages)
    source_path: str = ""


# ---------------------------------------------------------------------------
# Document structure
# ---------------------------------------------------------------------------


@dataclass
class MediaType:
    schema: RefOr[Schema] | None = None


@dataclass
class Parameter:
    name: str = ""
    location: str = "query"  # query / header / path / cookie
    description: str | None = None
    required: bool = False
    deprecated: bool = False
    # Exactly one of schema or content is set
    schema: RefOr[Schema] | None = None
    content: dict[str, MediaType] | None = None


@dataclass
class RequestBody:
    description: str | None = None
    content: dict[str, MediaType] = field(default_factory=dict)
    required: bool = False


@dataclass
class Response:
    description: str = ""
    content: dict[str, MediaType] = field(default_factory=dict)


@dataclass
class Responses:
    default: RefOr[Response] | None = None
    # Status code -> response, in declaration order
    responses: dict[str, RefOr[Response]] = field(default_factory=dict)


@dataclass
class Operation:
    operation_id: str | None = None
    summary: str | None = None
    description: str | None = None
    tags: list[str] = field(default_factory=list)
    parameters: list[RefOr[Parameter]] = field(default_factory=list)
    request_body: RefOr[RequestBody] | None = None
    responses: Responses = field(default_factory=Responses)
    deprecated: bool = False


@dataclass
class PathItem:
    summary: str | None = None
    description: str | None = None
    # Method -> operation, ordered by HTTP_METHODS
    operations: dict[str, Operation] = field(default_factory=dict)
    parameters: list[RefOr[Parameter]] = field(default_factory=list)

    def iter_operations(self):
        """Yield (method, operation) pairs in method-table order."""
        for method in HTTP_METHODS:
            if method in self.operations:
                yield method, self.operations[method]


@dataclass
class Components:
    schemas: dict[str, RefOr[Schema]] = field(default_factory=dict)
    responses: dict[str, RefOr[Response]] = field(default_factory=dict)
    parameters: dict[str, RefOr[Parameter]] = field(default_factory=dict)
    request_bodies: dict[str, RefOr[RequestBody]] = field(default_factory=dict)


@dataclass
class Info:
    title: str = ""
    version: str = ""
    description: str | None = None


@dataclass
class Document:
    """Root of a parsed OpenAPI description."""

    openapi: str = "3.0.3"
    info: Info = field(default_factory=Info)
    # Path template -> path item, in document order
    paths: dict[str, RefOr[PathItem]] = field(default_factory=dict)
    components: Components | None = None
