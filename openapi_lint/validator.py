"""
Validator that runs the lint rules over a whole document.

Sites are visited in document order: each path with its operations, then the
components. Within a site, diagnostics come out in rule catalog order.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from .analyzer.reference_resolver import PARAMETERS, ReferenceResolver
from .analyzer.walker import SchemaWalker, WalkedSchema
from .config import LintConfig
from .diagnostic import Diagnostic
from .document.nodes import Document, Operation, Parameter, PathItem, Reference, RefOr
from .lint_rules import (
    RULE_CATALOG,
    LintContext,
    LintRule,
    OperationDocumentationRule,
    OperationSite,
    ParameterSite,
    SchemaDocumentationRule,
    UnsupportedSchemaRule,
)

logger = logging.getLogger(__name__)


class Validator:
    """Lint an OpenAPI document for constructs that make awkward client code."""

    def __init__(self, config: LintConfig | None = None):
        """
        Initialize the validator.

        Args:
            config: Lint configuration (defaults to snake_case, no external doc checks)
        """
        self.config = config or LintConfig()
        self.rules = [rule_cls() for rule_cls in RULE_CATALOG if self._is_enabled(rule_cls)]

    def _is_enabled(self, rule_cls: type[LintRule]) -> bool:
        if rule_cls in (SchemaDocumentationRule, OperationDocumentationRule):
            return self.config.check_external_docs
        if rule_cls is UnsupportedSchemaRule:
            return self.config.report_unsupported
        return True

    def _rules_for(self, *site_kinds: str) -> list[LintRule]:
        return [rule for rule in self.rules if rule.site_kind in site_kinds]

    def run(self, document: Document) -> list[Diagnostic]:
        """
        Lint a document.

        Args:
            document: The parsed document; it is only read

        Returns:
            Every diagnostic, in site visitation order

        Raises:
            ReferenceResolutionError: If a reference cannot be followed
            UnsupportedSchemaError: If a schema has a shape with no rules
        """
        resolver = ReferenceResolver(document)
        ctx = LintContext(config=self.config, resolver=resolver)
        walker = SchemaWalker(resolver, report_unsupported=self.config.report_unsupported)

        diagnostics = list(self._lint_document(document, walker, ctx))
        logger.debug(f"Found {len(diagnostics)} problems")
        return diagnostics

    def validate(self, document: Document) -> list[str]:
        """Lint a document and render each diagnostic as text."""
        return [diagnostic.format() for diagnostic in self.run(document)]

    def _lint_document(self, document: Document, walker: SchemaWalker, ctx: LintContext) -> Iterator[Diagnostic]:
        for path, path_item in document.paths.items():
            if isinstance(path_item, Reference):
                logger.debug(f"Skipping referenced path item {path}")
                continue
            yield from self._lint_path_item(path, path_item, walker, ctx)

        components = document.components
        if components is None:
            return

        for response in components.responses.values():
            yield from self._lint_schemas(walker.walk_response(response), ctx)
        for parameter in components.parameters.values():
            yield from self._lint_schemas(walker.walk_parameter(parameter), ctx)
        for request_body in components.request_bodies.values():
            yield from self._lint_schemas(walker.walk_request_body(request_body), ctx)
        for name, schema in components.schemas.items():
            yield from self._lint_site(self._rules_for("schema_name"), name, ctx)
            yield from self._lint_schemas(walker.walk_named_schema(name, schema), ctx)

    def _lint_path_item(
        self, path: str, path_item: PathItem, walker: SchemaWalker, ctx: LintContext
    ) -> Iterator[Diagnostic]:
        yield from self._lint_site(self._rules_for("path"), path, ctx)
        shared = [self._resolve_parameter(parameter, ctx) for parameter in path_item.parameters]

        if not path_item.operations:
            # No operation owns the shared parameters
            for parameter in shared:
                yield from self._lint_site(self._rules_for("parameter"), ParameterSite(parameter, path), ctx)

        for method, operation in path_item.iter_operations():
            logger.debug(f"Linting {method.upper()} {path}")
            site = OperationSite(path=path, method=method, operation=operation)
            yield from self._lint_operation(site, shared, ctx)
            yield from self._lint_schemas(walker.walk_operation(operation), ctx)

        yield from self._lint_schemas(walker.walk_parameters(path_item.parameters), ctx)

    def _lint_operation(
        self, site: OperationSite, shared: list[Parameter], ctx: LintContext
    ) -> Iterator[Diagnostic]:
        """Run operation rules, and parameter rules over its parameters, in catalog order."""
        parameters = self._effective_parameters(site.operation, shared, ctx)
        for rule in self._rules_for("operation", "parameter"):
            if rule.site_kind == "operation":
                yield from rule.check(site, ctx)
                continue
            for parameter in parameters:
                parameter_site = ParameterSite(
                    parameter=parameter,
                    path=site.path,
                    method=site.method,
                    operation_id=site.operation.operation_id,
                )
                yield from rule.check(parameter_site, ctx)

    def _effective_parameters(
        self, operation: Operation, shared: list[Parameter], ctx: LintContext
    ) -> list[Parameter]:
        """Shared parameters the operation does not override, followed by its own."""
        own = [self._resolve_parameter(parameter, ctx) for parameter in operation.parameters]
        overridden = {(parameter.name, parameter.location) for parameter in own}
        return [p for p in shared if (p.name, p.location) not in overridden] + own

    def _lint_schemas(self, walked: Iterator[WalkedSchema], ctx: LintContext) -> Iterator[Diagnostic]:
        rules = self._rules_for("schema")
        for site in walked:
            yield from self._lint_site(rules, site, ctx)

    def _lint_site(self, rules: list[LintRule], site: Any, ctx: LintContext) -> Iterator[Diagnostic]:
        for rule in rules:
            yield from rule.check(site, ctx)

    def _resolve_parameter(self, parameter: RefOr[Parameter], ctx: LintContext) -> Parameter:
        return ctx.resolver.resolve(parameter, PARAMETERS)


def validate(document: Document, config: LintConfig | None = None) -> list[str]:
    """
    Lint a document and return the problems found as text.

    Args:
        document: The parsed document
        config: Lint configuration

    Returns:
        One rendered message per diagnostic; empty when the document is clean
    """
    return Validator(config).validate(document)
