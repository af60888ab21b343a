"""
Schema graph walker.

Enumerates every schema node reachable from a document, in source
declaration order, as (name, schema) pairs. Children are produced before the
node that contains them. Only the top node of a components schema entry
carries that entry's name. Nested references are checked but not expanded
in place, so each components schema is walked exactly once.
"""

from __future__ import annotations

import logging
from typing import Iterator, NamedTuple

from ..document.nodes import (
    AllOf,
    AnyOf,
    AnySchema,
    ArrayType,
    BooleanType,
    Components,
    Document,
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
    Schema,
    StringType,
)
from ..errors import UnsupportedSchemaError
from .reference_resolver import SCHEMAS, ReferenceResolver

logger = logging.getLogger(__name__)


class WalkedSchema(NamedTuple):
    """One visited schema node."""

    name: str | None
    schema: Schema


class SchemaWalker:
    """Walks every schema of a document."""

    def __init__(self, resolver: ReferenceResolver, report_unsupported: bool = False):
        """
        Initialize the walker.

        Args:
            resolver: Resolver used to follow references between schemas
            report_unsupported: Yield constrained free-form schemas as leaves
                instead of raising UnsupportedSchemaError
        """
        self.resolver = resolver
        self.report_unsupported = report_unsupported

        # Reference locators already resolved during this walk
        self.visited: set[str] = set()

    def walk(self, document: Document) -> Iterator[WalkedSchema]:
        """
        Walk every schema in the document.

        Paths come first, in document order, followed by the components.

        Args:
            document: The document to walk

        Yields:
            WalkedSchema for every schema node reached

        Raises:
            ReferenceResolutionError: If a reference cannot be followed
            UnsupportedSchemaError: If a schema has a shape with no rules
        """
        for path_item in document.paths.values():
            if isinstance(path_item, Reference):
                continue
            yield from self.walk_path_item(path_item)

        if document.components is not None:
            yield from self.walk_components(document.components)

    def walk_path_item(self, path_item: PathItem) -> Iterator[WalkedSchema]:
        for _, operation in path_item.iter_operations():
            yield from self.walk_operation(operation)
        yield from self.walk_parameters(path_item.parameters)

    def walk_operation(self, operation: Operation) -> Iterator[WalkedSchema]:
        yield from self.walk_parameters(operation.parameters)
        if operation.request_body is not None:
            yield from self.walk_request_body(operation.request_body)
        if operation.responses.default is not None:
            yield from self.walk_response(operation.responses.default)
        for response in operation.responses.responses.values():
            yield from self.walk_response(response)

    def walk_parameters(self, parameters: list[RefOr[Parameter]]) -> Iterator[WalkedSchema]:
        for parameter in parameters:
            yield from self.walk_parameter(parameter)

    def walk_parameter(self, parameter: RefOr[Parameter]) -> Iterator[WalkedSchema]:
        # Referenced parameters are walked with the components
        if isinstance(parameter, Reference):
            return
        if parameter.schema is not None:
            yield from self.walk_schema(parameter.schema)
        elif parameter.content is not None:
            yield from self.walk_content(parameter.content)

    def walk_request_body(self, request_body: RefOr[RequestBody]) -> Iterator[WalkedSchema]:
        if isinstance(request_body, Reference):
            return
        yield from self.walk_content(request_body.content)

    def walk_response(self, response: RefOr[Response]) -> Iterator[WalkedSchema]:
        if isinstance(response, Reference):
            return
        yield from self.walk_content(response.content)

    def walk_content(self, content: dict[str, MediaType]) -> Iterator[WalkedSchema]:
        for media_type in content.values():
            if media_type.schema is not None:
                yield from self.walk_schema(media_type.schema)

    def walk_components(self, components: Components) -> Iterator[WalkedSchema]:
        for response in components.responses.values():
            yield from self.walk_response(response)
        yield from self.walk_parameters(list(components.parameters.values()))
        for request_body in components.request_bodies.values():
            yield from self.walk_request_body(request_body)
        for name, schema in components.schemas.items():
            yield from self.walk_named_schema(name, schema)

    def walk_named_schema(self, name: str, schema: RefOr[Schema]) -> Iterator[WalkedSchema]:
        """Walk one entry of the components schemas; its top node carries the name."""
        yield from self.walk_schema(schema, name)

    def walk_schema(self, schema: RefOr[Schema], name: str | None = None) -> Iterator[WalkedSchema]:
        """
        Walk a schema and everything below it.

        A reference at the top of a site is not followed: its target is a
        components entry and gets walked there.

        Args:
            schema: The schema (or reference) to walk
            name: Name to attach to the top node

        Yields:
            WalkedSchema for the node and its descendants, children first
        """
        if isinstance(schema, Reference):
            return
        yield from self._walk_node(schema, name)

    def _walk_child(self, child: RefOr[Schema]) -> Iterator[WalkedSchema]:
        """Walk a nested schema.

        A nested reference is resolved, so a dangling one still aborts the
        run, but its target is not expanded here: every target is a
        components entry and is walked once, under its own name.
        """
        if isinstance(child, Reference):
            if child.reference not in self.visited:
                logger.debug(f"Resolving nested reference {child.reference}")
                _, chain = self.resolver.resolve_chain(child, SCHEMAS)
                self.visited.update(chain)
            return
        yield from self._walk_node(child, None)

    def _walk_node(self, schema: Schema, name: str | None) -> Iterator[WalkedSchema]:
        kind = schema.kind
        match kind:
            case ObjectType():
                for prop in kind.properties.values():
                    yield from self._walk_child(prop)
                if kind.additional_properties is not None and not isinstance(kind.additional_properties, bool):
                    yield from self._walk_child(kind.additional_properties)
            case ArrayType():
                if kind.items is not None:
                    yield from self._walk_child(kind.items)
            case OneOf():
                for member in kind.one_of:
                    yield from self._walk_child(member)
            case AllOf():
                for member in kind.all_of:
                    yield from self._walk_child(member)
            case AnyOf():
                for member in kind.any_of:
                    yield from self._walk_child(member)
            case Not():
                if kind.not_ is not None:
                    yield from self._walk_child(kind.not_)
            case StringType() | NumberType() | IntegerType() | BooleanType():
                pass
            case AnySchema():
                if not kind.is_unconstrained() and not self.report_unsupported:
                    raise UnsupportedSchemaError(
                        f"free-form schema constrained by {', '.join(kind.constraints())}",
                        schema.source_path,
                    )
            case _:
                raise UnsupportedSchemaError(f"unknown schema kind {type(kind).__name__}", schema.source_path)

        yield WalkedSchema(name, schema)
