"""
Document module.

Contains the typed OpenAPI object graph, its parser and the file loader.
"""

from __future__ import annotations

from .loader import load_document
from .nodes import (
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
    RequestBody,
    Response,
    Responses,
    Schema,
    StringType,
)
from .parser import DocumentParser

__all__ = [
    "AllOf",
    "AnyOf",
    "AnySchema",
    "ArrayType",
    "BooleanType",
    "Components",
    "Document",
    "DocumentParser",
    "IntegerType",
    "MediaType",
    "Not",
    "NumberType",
    "ObjectType",
    "OneOf",
    "Operation",
    "Parameter",
    "PathItem",
    "Reference",
    "RequestBody",
    "Response",
    "Responses",
    "Schema",
    "StringType",
    "load_document",
]
