"""
Analyzer module.

Contains reference resolution and the schema graph walker.
"""

from __future__ import annotations

from .reference_resolver import (
    PARAMETERS,
    REQUEST_BODIES,
    RESPONSES,
    SCHEMAS,
    ComponentCollection,
    ReferenceResolver,
)
from .walker import SchemaWalker, WalkedSchema

__all__ = [
    "ComponentCollection",
    "ReferenceResolver",
    "SchemaWalker",
    "WalkedSchema",
    "SCHEMAS",
    "PARAMETERS",
    "RESPONSES",
    "REQUEST_BODIES",
]
