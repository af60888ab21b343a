"""
Diagnostic records produced by the lint rules.
"""

from __future__ import annotations

from dataclasses import dataclass

from .templates import render

UNKNOWN_NAME = "<unknown>"


@dataclass(frozen=True)
class Diagnostic:
    """One ergonomic defect found in a document.

    Attributes:
        rule_id: Stable identifier of the rule category (also the docs anchor)
        message: Explanation of the problem
        reference: URL documenting the rule category
        value: The offending value or name
        suggestion: Suggested fix, if the rule has one
        type_name: Components schema name, for schema sites
        location: JSON pointer of the offending schema
        path: Path template, for path and operation sites
        method: HTTP method, for operation sites
        operation_id: Operation id of the owning operation, if known
    """

    rule_id: str
    message: str
    reference: str
    value: str | None = None
    suggestion: str | None = None
    type_name: str | None = None
    location: str | None = None
    path: str | None = None
    method: str | None = None
    operation_id: str | None = None

    def context(self) -> str:
        """Describe where the problem is, for the rendered message."""
        if self.path is not None:
            if self.method is not None:
                context = f"{self.method.upper()} {self.path}"
            else:
                context = f"path {self.path}"
            if self.operation_id:
                context += f" (operation {self.operation_id})"
            return context

        context = f"type {self.type_name or UNKNOWN_NAME}"
        if self.location:
            context += f" at {self.location}"
        return context

    def format(self) -> str:
        """Render the diagnostic as human-readable text."""
        return render(
            "_template",
            "diagnostic",
            context=self.context(),
            message=self.message,
            suggestion=self.suggestion,
            reference=self.reference,
        )

    def __str__(self) -> str:
        return self.format()
