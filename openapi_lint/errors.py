"""
Exceptions raised for input the linter cannot analyze.

Style and consistency findings are never raised; they are returned as
Diagnostic values. Everything here aborts the run.
"""

from __future__ import annotations


class LintError(Exception):
    """Base class for unrecoverable linting conditions."""

    pass


class DocumentParseError(LintError):
    """Raised when a document does not have the structure of an OpenAPI 3.0 description.

    Attributes:
        location: JSON pointer of the offending value
    """

    def __init__(self, message: str, location: str = "#"):
        super().__init__(f"{location}: {message}")
        self.location = location


class ReferenceResolutionError(LintError):
    """Raised when a $ref cannot be followed to a concrete item."""

    def __init__(self, message: str, reference: str):
        super().__init__(message)
        self.reference = reference


class InvalidReferenceError(ReferenceResolutionError):
    """The locator is not a local pointer into the expected components collection."""

    pass


class MissingComponentsError(ReferenceResolutionError):
    """The document has no components collection the reference could point into."""

    pass


class UnresolvedReferenceError(ReferenceResolutionError):
    """The referenced key is not present in its components collection."""

    pass


class ReferenceCycleError(ReferenceResolutionError):
    """A chain of references loops back on itself before reaching an item.

    Attributes:
        chain: The locators followed, in order
    """

    def __init__(self, chain: list[str]):
        super().__init__(f"reference cycle: {' -> '.join(chain)}", chain[-1])
        self.chain = chain


class UnsupportedSchemaError(LintError):
    """Raised for schema shapes the linter has no rules for yet.

    The run stops instead of silently skipping the schema, so that new shapes
    get handled explicitly.
    """

    def __init__(self, message: str, location: str):
        super().__init__(f"unimplemented construct at {location}: {message}")
        self.location = location
