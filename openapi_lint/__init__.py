"""OpenAPI Lint

A Python package for finding constructs in OpenAPI 3.0 descriptions that make
generated client code awkward: mismatched union types, inconsistent naming,
redundant suffixes, meaningless response types and leaking doc markup.
"""

__version__ = "0.1.0"

from .config import LintConfig, NamingConvention
from .diagnostic import Diagnostic
from .document import DocumentParser, load_document
from .errors import (
    DocumentParseError,
    LintError,
    ReferenceResolutionError,
    UnsupportedSchemaError,
)
from .validator import Validator, validate

__all__ = [
    "Validator",
    "validate",
    "LintConfig",
    "NamingConvention",
    "Diagnostic",
    "DocumentParser",
    "load_document",
    "LintError",
    "DocumentParseError",
    "ReferenceResolutionError",
    "UnsupportedSchemaError",
]
