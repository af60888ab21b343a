"""
OpenAPI document parser that builds the typed object graph.

Turns a decoded JSON/YAML mapping into Document nodes without following any
references. Only the structure is checked here; whether the document is
ergonomic is the validator's business.
"""

from __future__ import annotations

from typing import Any, Callable

from ..errors import DocumentParseError
from .nodes import (
    HTTP_METHODS,
    PARAMETER_LOCATIONS,
    AllOf,
    AnyOf,
    AnySchema,
    ArrayType,
    BooleanType,
    Components,
    Document,
    Info,
    IntegerType,
    MediaType,
    Not,
    NumberType,
    ObjectType,
    OneOf,
    Operation,
    Parameter,
    PathItem,
    Reference,
    RefOr,
    RequestBody,
    Response,
    Responses,
    Schema,
    SchemaKind,
    StringType,
)

# Keywords that constrain a schema's shape, mapped to AnySchema field names
CONSTRAINT_KEYWORDS = {
    "type": "typ",
    "pattern": "pattern",
    "multipleOf": "multiple_of",
    "exclusiveMinimum": "exclusive_minimum",
    "exclusiveMaximum": "exclusive_maximum",
    "minimum": "minimum",
    "maximum": "maximum",
    "required": "required",
    "minProperties": "min_properties",
    "maxProperties": "max_properties",
    "minItems": "min_items",
    "maxItems": "max_items",
    "uniqueItems": "unique_items",
    "enum": "enumeration",
    "format": "format",
    "minLength": "min_length",
    "maxLength": "max_length",
}

COMPOSITION_KEYWORDS = ("oneOf", "allOf", "anyOf", "not")

SCHEMA_TYPES = ("string", "number", "integer", "boolean", "object", "array")


def escape_pointer(token: str) -> str:
    """Escape one JSON pointer reference token."""
    return token.replace("~", "~0").replace("/", "~1")


class DocumentParser:
    """Parses a decoded OpenAPI 3.0 mapping into a Document."""

    def parse(self, raw: dict[str, Any]) -> Document:
        """
        Parse an OpenAPI document.

        Args:
            raw: The decoded JSON or YAML mapping

        Returns:
            Document with every path, operation and component parsed

        Raises:
            DocumentParseError: If the structure is not that of an OpenAPI document
        """
        raw = self._expect_mapping(raw, "#")

        document = Document(
            openapi=str(raw.get("openapi", "")),
            info=self._parse_info(raw.get("info") or {}, "#/info"),
        )

        paths = self._expect_mapping(raw.get("paths") or {}, "#/paths")
        for path, item in paths.items():
            location = f"#/paths/{escape_pointer(path)}"
            document.paths[path] = self._parse_ref_or(item, location, self._parse_path_item)

        if "components" in raw:
            document.components = self._parse_components(raw["components"], "#/components")

        return document

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _expect_mapping(self, value: Any, location: str) -> dict[str, Any]:
        if not isinstance(value, dict):
            raise DocumentParseError(f"expected a mapping, got {type(value).__name__}", location)
        return value

    def _expect_list(self, value: Any, location: str) -> list[Any]:
        if not isinstance(value, list):
            raise DocumentParseError(f"expected a list, got {type(value).__name__}", location)
        return value

    def _parse_ref_or(self, value: Any, location: str, parse_item: Callable[[dict[str, Any], str], Any]) -> RefOr[Any]:
        """Parse either a $ref mapping or an inline item."""
        value = self._expect_mapping(value, location)
        if "$ref" in value:
            reference = value["$ref"]
            if not isinstance(reference, str):
                raise DocumentParseError("$ref must be a string", location)
            return Reference(reference=reference)
        return parse_item(value, location)

    def _parse_map(
        self,
        value: Any,
        location: str,
        parse_item: Callable[[dict[str, Any], str], Any],
    ) -> dict[str, Any]:
        """Parse a mapping of name -> (reference or item), keeping key order."""
        result = {}
        for key, item in self._expect_mapping(value, location).items():
            key = str(key)
            result[key] = self._parse_ref_or(item, f"{location}/{escape_pointer(key)}", parse_item)
        return result

    # ------------------------------------------------------------------
    # Document structure
    # ------------------------------------------------------------------

    def _parse_info(self, raw: dict[str, Any], location: str) -> Info:
        raw = self._expect_mapping(raw, location)
        return Info(
            title=str(raw.get("title", "")),
            version=str(raw.get("version", "")),
            description=raw.get("description"),
        )

    def _parse_path_item(self, raw: dict[str, Any], location: str) -> PathItem:
        item = PathItem(summary=raw.get("summary"), description=raw.get("description"))

        # Insert in method-table order so iteration never depends on source key order
        for method in HTTP_METHODS:
            if method in raw:
                item.operations[method] = self._parse_operation(raw[method], f"{location}/{method}")

        item.parameters = self._parse_parameter_list(raw.get("parameters") or [], f"{location}/parameters")
        return item

    def _parse_parameter_list(self, raw: Any, location: str) -> list[RefOr[Parameter]]:
        return [
            self._parse_ref_or(p, f"{location}/{i}", self._parse_parameter)
            for i, p in enumerate(self._expect_list(raw, location))
        ]

    def _parse_operation(self, raw: Any, location: str) -> Operation:
        raw = self._expect_mapping(raw, location)

        operation = Operation(
            operation_id=raw.get("operationId"),
            summary=raw.get("summary"),
            description=raw.get("description"),
            tags=list(raw.get("tags") or []),
            parameters=self._parse_parameter_list(raw.get("parameters") or [], f"{location}/parameters"),
            deprecated=bool(raw.get("deprecated", False)),
        )

        if "requestBody" in raw:
            operation.request_body = self._parse_ref_or(
                raw["requestBody"], f"{location}/requestBody", self._parse_request_body
            )

        operation.responses = self._parse_responses(raw.get("responses") or {}, f"{location}/responses")
        return operation

    def _parse_responses(self, raw: Any, location: str) -> Responses:
        responses = Responses()
        for status, item in self._expect_mapping(raw, location).items():
            # YAML decodes unquoted status codes as integers
            status = str(status)
            parsed = self._parse_ref_or(item, f"{location}/{status}", self._parse_response)
            if status == "default":
                responses.default = parsed
            else:
                responses.responses[status] = parsed
        return responses

    def _parse_response(self, raw: dict[str, Any], location: str) -> Response:
        return Response(
            description=str(raw.get("description", "")),
            content=self._parse_content(raw.get("content") or {}, f"{location}/content"),
        )

    def _parse_request_body(self, raw: dict[str, Any], location: str) -> RequestBody:
        return RequestBody(
            description=raw.get("description"),
            content=self._parse_content(raw.get("content") or {}, f"{location}/content"),
            required=bool(raw.get("required", False)),
        )

    def _parse_content(self, raw: Any, location: str) -> dict[str, MediaType]:
        content = {}
        for media_type, entry in self._expect_mapping(raw, location).items():
            entry_location = f"{location}/{escape_pointer(media_type)}"
            entry = self._expect_mapping(entry, entry_location)
            schema = None
            if "schema" in entry:
                schema = self._parse_schema_ref(entry["schema"], f"{entry_location}/schema")
            content[media_type] = MediaType(schema=schema)
        return content

    def _parse_parameter(self, raw: dict[str, Any], location: str) -> Parameter:
        if "name" not in raw:
            raise DocumentParseError("parameter has no name", location)
        if raw.get("in") not in PARAMETER_LOCATIONS:
            raise DocumentParseError(f"parameter 'in' must be one of {', '.join(PARAMETER_LOCATIONS)}", location)

        parameter = Parameter(
            name=str(raw["name"]),
            location=raw["in"],
            description=raw.get("description"),
            required=bool(raw.get("required", False)),
            deprecated=bool(raw.get("deprecated", False)),
        )

        if "schema" in raw:
            parameter.schema = self._parse_schema_ref(raw["schema"], f"{location}/schema")
        elif "content" in raw:
            parameter.content = self._parse_content(raw["content"], f"{location}/content")
        else:
            raise DocumentParseError("parameter needs either 'schema' or 'content'", location)

        return parameter

    def _parse_components(self, raw: Any, location: str) -> Components:
        raw = self._expect_mapping(raw, location)
        return Components(
            schemas=self._parse_map(raw.get("schemas") or {}, f"{location}/schemas", self._parse_schema),
            responses=self._parse_map(raw.get("responses") or {}, f"{location}/responses", self._parse_response),
            parameters=self._parse_map(raw.get("parameters") or {}, f"{location}/parameters", self._parse_parameter),
            request_bodies=self._parse_map(
                raw.get("requestBodies") or {}, f"{location}/requestBodies", self._parse_request_body
            ),
        )

    # ------------------------------------------------------------------
    # Schemas
    # ------------------------------------------------------------------

    def _parse_schema_ref(self, raw: Any, location: str) -> RefOr[Schema]:
        return self._parse_ref_or(raw, location, self._parse_schema)

    def _parse_schema(self, raw: dict[str, Any], location: str) -> Schema:
        """
        Parse a schema node recursively.

        Args:
            raw: The schema mapping
            location: JSON pointer of the schema (for error messages)

        Returns:
            Schema with its kind decided from the keywords present
        """
        return Schema(
            kind=self._parse_schema_kind(raw, location),
            title=raw.get("title"),
            description=raw.get("description"),
            nullable=bool(raw.get("nullable", False)),
            read_only=bool(raw.get("readOnly", False)),
            write_only=bool(raw.get("writeOnly", False)),
            deprecated=bool(raw.get("deprecated", False)),
            default=raw.get("default"),
            extensions={k: v for k, v in raw.items() if isinstance(k, str) and k.startswith("x-")},
            source_path=location,
        )

    def _parse_schema_kind(self, raw: dict[str, Any], location: str) -> SchemaKind:
        compositions = [k for k in COMPOSITION_KEYWORDS if k in raw]
        others = [k for k in CONSTRAINT_KEYWORDS if k in raw] + [
            k for k in ("properties", "additionalProperties", "items") if k in raw
        ]

        # Exactly one composition keyword and nothing else constraining the value
        if len(compositions) == 1 and not others:
            keyword = compositions[0]
            if keyword == "not":
                return Not(not_=self._parse_schema_ref(raw["not"], f"{location}/not"))
            members = self._parse_schema_list(raw[keyword], f"{location}/{keyword}")
            if keyword == "oneOf":
                return OneOf(one_of=members)
            if keyword == "allOf":
                return AllOf(all_of=members)
            return AnyOf(any_of=members)

        if "type" in raw and not compositions:
            return self._parse_type(raw, location)

        return self._parse_any_schema(raw, location)

    def _parse_schema_list(self, raw: Any, location: str) -> list[RefOr[Schema]]:
        return [
            self._parse_schema_ref(member, f"{location}/{i}") for i, member in enumerate(self._expect_list(raw, location))
        ]

    def _parse_properties(self, raw: Any, location: str) -> dict[str, RefOr[Schema]]:
        return self._parse_map(raw, location, self._parse_schema)

    def _parse_additional_properties(self, raw: dict[str, Any], location: str) -> bool | RefOr[Schema] | None:
        if "additionalProperties" not in raw:
            return None
        value = raw["additionalProperties"]
        if isinstance(value, bool):
            return value
        return self._parse_schema_ref(value, f"{location}/additionalProperties")

    def _parse_type(self, raw: dict[str, Any], location: str) -> SchemaKind:
        type_name = raw["type"]
        if type_name not in SCHEMA_TYPES:
            raise DocumentParseError(f"unknown schema type {type_name!r}", f"{location}/type")

        enumeration = list(raw.get("enum") or [])

        if type_name == "string":
            return StringType(
                format=raw.get("format"),
                pattern=raw.get("pattern"),
                enumeration=enumeration,
                min_length=raw.get("minLength"),
                max_length=raw.get("maxLength"),
            )

        if type_name in ("number", "integer"):
            cls = NumberType if type_name == "number" else IntegerType
            return cls(
                format=raw.get("format"),
                multiple_of=raw.get("multipleOf"),
                minimum=raw.get("minimum"),
                maximum=raw.get("maximum"),
                exclusive_minimum=bool(raw.get("exclusiveMinimum", False)),
                exclusive_maximum=bool(raw.get("exclusiveMaximum", False)),
                enumeration=enumeration,
            )

        if type_name == "boolean":
            return BooleanType(enumeration=enumeration)

        if type_name == "object":
            return ObjectType(
                properties=self._parse_properties(raw.get("properties") or {}, f"{location}/properties"),
                required=list(raw.get("required") or []),
                additional_properties=self._parse_additional_properties(raw, location),
                min_properties=raw.get("minProperties"),
                max_properties=raw.get("maxProperties"),
            )

        items = None
        if "items" in raw:
            items = self._parse_schema_ref(raw["items"], f"{location}/items")
        return ArrayType(
            items=items,
            min_items=raw.get("minItems"),
            max_items=raw.get("maxItems"),
            unique_items=bool(raw.get("uniqueItems", False)),
        )

    def _parse_any_schema(self, raw: dict[str, Any], location: str) -> AnySchema:
        """Record every constraint keyword of a schema with no single shape."""
        schema = AnySchema()
        for keyword, attr in CONSTRAINT_KEYWORDS.items():
            if keyword in raw:
                value = raw[keyword]
                setattr(schema, attr, list(value) if isinstance(value, list) else value)

        if "properties" in raw:
            schema.properties = self._parse_properties(raw["properties"], f"{location}/properties")
        schema.additional_properties = self._parse_additional_properties(raw, location)
        if "items" in raw:
            schema.items = self._parse_schema_ref(raw["items"], f"{location}/items")
        if "oneOf" in raw:
            schema.one_of = self._parse_schema_list(raw["oneOf"], f"{location}/oneOf")
        if "allOf" in raw:
            schema.all_of = self._parse_schema_list(raw["allOf"], f"{location}/allOf")
        if "anyOf" in raw:
            schema.any_of = self._parse_schema_list(raw["anyOf"], f"{location}/anyOf")
        if "not" in raw:
            schema.not_ = self._parse_schema_ref(raw["not"], f"{location}/not")
        return schema
