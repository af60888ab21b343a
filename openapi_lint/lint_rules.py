"""
Lint rule objects that inspect document sites.

Each rule looks at one kind of site (a schema node, a path template, an
operation, a parameter or a components schema name) and yields zero or more
Diagnostics. Rules keep no state of their own; the only run-scoped state
(operation ids seen so far) lives in the LintContext.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterator

from .analyzer.reference_resolver import RESPONSES, SCHEMAS, ReferenceResolver
from .analyzer.walker import WalkedSchema
from .config import LintConfig, NamingConvention
from .diagnostic import UNKNOWN_NAME, Diagnostic
from .document.nodes import (
    AllOf,
    AnyOf,
    AnySchema,
    ArrayType,
    BooleanType,
    IntegerType,
    NumberType,
    ObjectType,
    OneOf,
    Operation,
    Parameter,
    Reference,
    RefOr,
    Schema,
    SchemaType,
    StringType,
)
from .errors import UnsupportedSchemaError
from .templates import render
from .utils import (
    to_kebab_case,
    to_lower_camel_case,
    to_pascal_case,
    to_shouty_snake_case,
    to_snake_case,
)

UUID_SUFFIX = "_uuid"
ID_SUFFIX = "_id"

# A {placeholder} inside a path template segment
PATH_PLACEHOLDER = re.compile(r"\{[^{}/]*\}")

# Punctuation kept as-is around placeholders, e.g. the dot in "{name}.{ext}"
_SEGMENT_PUNCTUATION = "-._~"

# Path-qualified identifiers such as crate::module::Item
PATH_QUALIFIER_PATTERN = re.compile(r"\b[A-Za-z_][A-Za-z0-9_]*(?:::[A-Za-z_][A-Za-z0-9_]*)+")

# A bracketed code span with no link target, such as [`Item`]
DANGLING_LINK_PATTERN = re.compile(r"\[`[^`\]]+`\](?![(\[])")


def convention_name(convention: NamingConvention) -> str:
    return "snake_case" if convention == NamingConvention.SNAKE_CASE else "camelCase"


def apply_convention(name: str, convention: NamingConvention) -> str:
    """Spell a name the way the convention wants it."""
    if convention == NamingConvention.SNAKE_CASE:
        return to_snake_case(name)
    return to_lower_camel_case(name)


def kebab_segment(segment: str) -> str:
    """Kebab-case the literal parts of a path segment, leaving placeholders alone."""

    def kebab_literal(text: str) -> str:
        core = text.strip(_SEGMENT_PUNCTUATION)
        if not core:
            return text
        lead = text[: len(text) - len(text.lstrip(_SEGMENT_PUNCTUATION))]
        trail = text[len(text.rstrip(_SEGMENT_PUNCTUATION)) :]
        return lead + to_kebab_case(core) + trail

    parts = []
    pos = 0
    for match in PATH_PLACEHOLDER.finditer(segment):
        parts.append(kebab_literal(segment[pos : match.start()]))
        parts.append(match.group())
        pos = match.end()
    parts.append(kebab_literal(segment[pos:]))
    return "".join(parts)


def find_markup_tokens(text: str) -> list[str]:
    """
    Find implementation-specific documentation markup in a piece of text.

    A qualified path inside a dangling link is reported once, as the link.

    Args:
        text: A title or description

    Returns:
        Distinct offending tokens, in order of appearance
    """
    spans = [(m.start(), m.end(), m.group()) for m in DANGLING_LINK_PATTERN.finditer(text)]
    link_spans = list(spans)
    for m in PATH_QUALIFIER_PATTERN.finditer(text):
        if any(start <= m.start() and m.end() <= end for start, end, _ in link_spans):
            continue
        spans.append((m.start(), m.end(), m.group()))

    tokens: list[str] = []
    for _, _, token in sorted(spans):
        if token not in tokens:
            tokens.append(token)
    return tokens


@dataclass
class LintContext:
    """Everything a rule may consult during one run."""

    config: LintConfig
    resolver: ReferenceResolver

    # Operation id -> (method, path) where it was first declared, for this run only
    operation_ids: dict[str, tuple[str, str]] = field(default_factory=dict)


@dataclass(frozen=True)
class OperationSite:
    path: str
    method: str
    operation: Operation


@dataclass(frozen=True)
class ParameterSite:
    """A parameter, with the operation (or path item) that declares it."""

    parameter: Parameter
    path: str
    method: str | None = None
    operation_id: str | None = None


class LintRule(ABC):
    """Base class for all lint rules"""

    # Stable identifier of the rule category, used as the docs anchor
    rule_id: str = ""

    # Which kind of site the rule inspects
    site_kind: str = ""

    def get_string(self, key: str, **params: Any) -> str:
        """Render one of this rule's message templates."""
        return render(self.__class__.__name__, key, **params)

    def make_diagnostic(
        self,
        ctx: LintContext,
        params: dict[str, Any],
        message_key: str = "message",
        with_suggestion: bool = False,
        **fields: Any,
    ) -> Diagnostic:
        """
        Build a Diagnostic from this rule's templates.

        Args:
            ctx: The lint context (for the docs URL)
            params: Parameters for the message templates
            message_key: Which template to use for the explanation
            with_suggestion: Whether to render the 'suggestion' template too
            **fields: Context fields of the Diagnostic (value, path, ...)

        Returns:
            The Diagnostic
        """
        return Diagnostic(
            rule_id=self.rule_id,
            message=self.get_string(message_key, **params),
            suggestion=self.get_string("suggestion", **params) if with_suggestion else None,
            reference=f"{ctx.config.docs_url}#{self.rule_id}",
            **fields,
        )

    @abstractmethod
    def check(self, site: Any, ctx: LintContext) -> Iterator[Diagnostic]:
        """Yield the diagnostics for one site."""
        pass


class SchemaRule(LintRule):
    """Base class for rules that inspect walked schema nodes."""

    site_kind = "schema"

    def schema_fields(self, walked: WalkedSchema, value: str | None = None) -> dict[str, Any]:
        return {"value": value, "type_name": walked.name, "location": walked.schema.source_path or None}


class TypeMismatchRule(SchemaRule):
    """Flags compositions whose members are not all of the same type category."""

    rule_id = "type-mismatch"

    def check(self, site: WalkedSchema, ctx: LintContext) -> Iterator[Diagnostic]:
        schema = site.schema
        if not isinstance(schema.kind, (OneOf, AllOf, AnyOf)):
            return

        leaves = self.leaf_types(schema, ctx, frozenset())
        if not leaves:
            return

        first_type, first_schema = leaves[0]
        for other_type, other_schema in leaves[1:]:
            if other_type.category != first_type.category:
                params = {
                    "first": self._describe(first_type, first_schema),
                    "other": self._describe(other_type, other_schema),
                }
                yield self.make_diagnostic(ctx, params, **self.schema_fields(site))
                return

    def leaf_types(self, schema: Schema, ctx: LintContext, in_progress: frozenset[str]) -> list[tuple[SchemaType, Schema]]:
        """
        Flatten compositions down to their concrete types, in member order.

        Args:
            schema: The schema to flatten
            ctx: The lint context
            in_progress: References already being flattened on this branch

        Returns:
            (type, schema it came from) for every concrete leaf

        Raises:
            UnsupportedSchemaError: For a negation or constrained free-form member,
                unless unsupported constructs are reported instead
        """
        kind = schema.kind
        match kind:
            case OneOf():
                members = kind.one_of
            case AllOf():
                members = kind.all_of
            case AnyOf():
                members = kind.any_of
            case StringType() | NumberType() | IntegerType() | BooleanType() | ObjectType() | ArrayType():
                return [(kind, schema)]
            case AnySchema() if kind.is_unconstrained():
                # Carries no type of its own, e.g. a member adding only a description
                return []
            case _:
                if ctx.config.report_unsupported:
                    return []
                raise UnsupportedSchemaError(
                    f"{type(kind).__name__} schema inside a composition",
                    schema.source_path,
                )

        leaves: list[tuple[SchemaType, Schema]] = []
        for member in members:
            member_progress = in_progress
            if isinstance(member, Reference):
                if member.reference in in_progress:
                    continue
                member, chain = ctx.resolver.resolve_chain(member, SCHEMAS)
                member_progress = in_progress.union(chain)
            leaves.extend(self.leaf_types(member, ctx, member_progress))
        return leaves

    def _describe(self, schema_type: SchemaType, schema: Schema) -> str:
        if schema.source_path:
            return f"{schema_type.category} ({schema.source_path})"
        return schema_type.category


class PropertyNamingRule(SchemaRule):
    """Property names must follow the configured naming convention."""

    rule_id = "property-naming"

    def check(self, site: WalkedSchema, ctx: LintContext) -> Iterator[Diagnostic]:
        kind = site.schema.kind
        if not isinstance(kind, ObjectType):
            return

        convention = ctx.config.naming_convention
        for name in kind.properties:
            corrected = apply_convention(name, convention)
            if corrected != name:
                params = {"name": name, "corrected": corrected, "convention": convention_name(convention)}
                yield self.make_diagnostic(ctx, params, with_suggestion=True, **self.schema_fields(site, name))


class UuidSuffixRule(SchemaRule):
    """A plain uuid-formatted property should not also say uuid in its name."""

    rule_id = "uuid-suffix"

    def check(self, site: WalkedSchema, ctx: LintContext) -> Iterator[Diagnostic]:
        kind = site.schema.kind
        if not isinstance(kind, ObjectType):
            return

        for name, prop in kind.properties.items():
            if not name.endswith(UUID_SUFFIX):
                continue
            if not self._is_plain_uuid(ctx.resolver.resolve(prop, SCHEMAS)):
                continue
            corrected = name[: -len(UUID_SUFFIX)] + ID_SUFFIX
            params = {"name": name, "corrected": corrected}
            yield self.make_diagnostic(ctx, params, with_suggestion=True, **self.schema_fields(site, name))

    def _is_plain_uuid(self, schema: Schema) -> bool:
        kind = schema.kind
        return (
            isinstance(kind, StringType)
            and kind.format == "uuid"
            and kind.pattern is None
            and not kind.enumeration
            and kind.min_length is None
            and kind.max_length is None
        )


class EnumCasingRule(SchemaRule):
    """Enumerated string values must be snake_case or SHOUTY_SNAKE_CASE."""

    rule_id = "enum-casing"

    def check(self, site: WalkedSchema, ctx: LintContext) -> Iterator[Diagnostic]:
        kind = site.schema.kind
        if not isinstance(kind, StringType):
            return

        for value in kind.enumeration:
            if not isinstance(value, str):
                continue
            if value == to_snake_case(value) or value == to_shouty_snake_case(value):
                continue
            params = {"value": value, "corrected": to_snake_case(value)}
            yield self.make_diagnostic(ctx, params, with_suggestion=True, **self.schema_fields(site, value))


class PathCasingRule(LintRule):
    """Literal path segments must be kebab-case."""

    rule_id = "path-casing"
    site_kind = "path"

    def check(self, site: str, ctx: LintContext) -> Iterator[Diagnostic]:
        for segment in site.split("/"):
            if not segment:
                continue
            corrected = kebab_segment(segment)
            if corrected != segment:
                params = {"segment": segment, "corrected": corrected}
                yield self.make_diagnostic(ctx, params, with_suggestion=True, value=segment, path=site)


class OperationIdRule(LintRule):
    """Every operation needs a unique, conventionally cased operation id."""

    rule_id = "operation-id"
    site_kind = "operation"

    def check(self, site: OperationSite, ctx: LintContext) -> Iterator[Diagnostic]:
        operation_id = site.operation.operation_id
        fields = {"path": site.path, "method": site.method}

        if not operation_id:
            yield self.make_diagnostic(ctx, {}, message_key="missing", **fields)
            return

        fields["operation_id"] = operation_id
        convention = ctx.config.naming_convention
        corrected = apply_convention(operation_id, convention)
        if corrected != operation_id:
            params = {"operation_id": operation_id, "corrected": corrected, "convention": convention_name(convention)}
            yield self.make_diagnostic(
                ctx, params, message_key="casing", with_suggestion=True, value=operation_id, **fields
            )

        if operation_id in ctx.operation_ids:
            first_method, first_path = ctx.operation_ids[operation_id]
            params = {"operation_id": operation_id, "first_method": first_method, "first_path": first_path}
            yield self.make_diagnostic(ctx, params, message_key="duplicate", value=operation_id, **fields)
        else:
            ctx.operation_ids[operation_id] = (site.method, site.path)


class ParameterNamingRule(LintRule):
    """Parameter names must follow the configured naming convention.

    Header parameters are checked too unless the config exempts them.
    """

    rule_id = "parameter-naming"
    site_kind = "parameter"

    def check(self, site: ParameterSite, ctx: LintContext) -> Iterator[Diagnostic]:
        parameter = site.parameter
        if parameter.location == "header" and ctx.config.exempt_header_parameters:
            return

        convention = ctx.config.naming_convention
        corrected = apply_convention(parameter.name, convention)
        if corrected == parameter.name:
            return

        params = {
            "name": parameter.name,
            "corrected": corrected,
            "location": parameter.location,
            "convention": convention_name(convention),
        }
        fields: dict[str, Any] = {
            "value": parameter.name,
            "path": site.path,
            "method": site.method,
            "operation_id": site.operation_id or UNKNOWN_NAME,
        }
        yield self.make_diagnostic(ctx, params, with_suggestion=True, **fields)


class NullResponseRule(LintRule):
    """A response whose body can only ever be null is not a useful return type."""

    rule_id = "null-response"
    site_kind = "operation"

    def check(self, site: OperationSite, ctx: LintContext) -> Iterator[Diagnostic]:
        responses = site.operation.responses
        entries: list[tuple[str, RefOr[Any]]] = []
        if responses.default is not None:
            entries.append(("default", responses.default))
        entries.extend(responses.responses.items())

        for status, response in entries:
            response = ctx.resolver.resolve(response, RESPONSES)
            for media_type, media in response.content.items():
                if media.schema is None:
                    continue
                if not self._is_null_only(ctx.resolver.resolve(media.schema, SCHEMAS)):
                    continue
                yield self.make_diagnostic(
                    ctx,
                    {"status": status, "media_type": media_type},
                    value=status,
                    path=site.path,
                    method=site.method,
                    operation_id=site.operation.operation_id,
                )

    def _is_null_only(self, schema: Schema) -> bool:
        kind = schema.kind
        return isinstance(kind, StringType) and kind.enumeration == [None]


class SchemaNamingRule(LintRule):
    """Names of components schemas must be PascalCase."""

    rule_id = "schema-naming"
    site_kind = "schema_name"

    def check(self, site: str, ctx: LintContext) -> Iterator[Diagnostic]:
        corrected = to_pascal_case(site)
        if corrected != site:
            params = {"name": site, "corrected": corrected}
            yield self.make_diagnostic(ctx, params, with_suggestion=True, value=site, type_name=site)


class SchemaDocumentationRule(SchemaRule):
    """Schema titles and descriptions must not carry implementation-specific markup."""

    rule_id = "external-docs"

    def check(self, site: WalkedSchema, ctx: LintContext) -> Iterator[Diagnostic]:
        for field_name in ("title", "description"):
            text = getattr(site.schema, field_name)
            if not text:
                continue
            for token in find_markup_tokens(text):
                params = {"field": field_name, "token": token}
                yield self.make_diagnostic(ctx, params, **self.schema_fields(site, token))


class OperationDocumentationRule(LintRule):
    """Operation descriptions must not carry implementation-specific markup."""

    rule_id = "external-docs"
    site_kind = "operation"

    def check(self, site: OperationSite, ctx: LintContext) -> Iterator[Diagnostic]:
        text = site.operation.description
        if not text:
            return
        for token in find_markup_tokens(text):
            yield self.make_diagnostic(
                ctx,
                {"field": "description", "token": token},
                value=token,
                path=site.path,
                method=site.method,
                operation_id=site.operation.operation_id,
            )


class UnsupportedSchemaRule(SchemaRule):
    """Reports free-form schemas with constraints the walker cannot descend."""

    rule_id = "unsupported-schema"

    def check(self, site: WalkedSchema, ctx: LintContext) -> Iterator[Diagnostic]:
        kind = site.schema.kind
        if not isinstance(kind, AnySchema) or kind.is_unconstrained():
            return
        params = {"constraints": ", ".join(kind.constraints())}
        yield self.make_diagnostic(ctx, params, **self.schema_fields(site))


# Catalog order is the order diagnostics appear in within one site
RULE_CATALOG: tuple[type[LintRule], ...] = (
    TypeMismatchRule,
    PropertyNamingRule,
    UuidSuffixRule,
    EnumCasingRule,
    PathCasingRule,
    OperationIdRule,
    ParameterNamingRule,
    NullResponseRule,
    SchemaNamingRule,
    SchemaDocumentationRule,
    OperationDocumentationRule,
    UnsupportedSchemaRule,
)
