"""
Reference resolver for $ref resolution.

Follows local $ref pointers into the document's components collections until
a concrete item is reached. Which collection a reference points into is
decided by a ComponentCollection, so one resolver serves schemas, parameters,
responses and request bodies alike.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from ..document.nodes import (
    Components,
    Document,
    Parameter,
    Reference,
    RefOr,
    RequestBody,
    Response,
    Schema,
)
from ..errors import (
    InvalidReferenceError,
    MissingComponentsError,
    ReferenceCycleError,
    UnresolvedReferenceError,
)

T = TypeVar("T")


def unescape_pointer(token: str) -> str:
    """Unescape one JSON pointer reference token."""
    return token.replace("~1", "/").replace("~0", "~")


class ComponentCollection(ABC, Generic[T]):
    """Selects the components collection a kind of reference points into."""

    # Key of the collection under #/components/
    collection_name: str = ""

    @property
    def prefix(self) -> str:
        return f"#/components/{self.collection_name}/"

    @abstractmethod
    def select(self, components: Components) -> dict[str, RefOr[T]]:
        """Return the collection holding items of this kind."""
        pass

    def key_of(self, reference: Reference) -> str:
        """
        Extract the collection key a reference names.

        Args:
            reference: The reference to decode

        Returns:
            The unescaped key within the collection

        Raises:
            InvalidReferenceError: If the locator is not a local pointer into this collection
        """
        locator = reference.reference
        if not locator.startswith(self.prefix):
            raise InvalidReferenceError(
                f"reference {locator!r} does not point into {self.prefix}",
                locator,
            )
        key = locator[len(self.prefix) :]
        if not key or "/" in key:
            raise InvalidReferenceError(f"reference {locator!r} is not of the form {self.prefix}<name>", locator)
        return unescape_pointer(key)


class SchemaCollection(ComponentCollection[Schema]):
    collection_name = "schemas"

    def select(self, components: Components) -> dict[str, RefOr[Schema]]:
        return components.schemas


class ParameterCollection(ComponentCollection[Parameter]):
    collection_name = "parameters"

    def select(self, components: Components) -> dict[str, RefOr[Parameter]]:
        return components.parameters


class ResponseCollection(ComponentCollection[Response]):
    collection_name = "responses"

    def select(self, components: Components) -> dict[str, RefOr[Response]]:
        return components.responses


class RequestBodyCollection(ComponentCollection[RequestBody]):
    collection_name = "requestBodies"

    def select(self, components: Components) -> dict[str, RefOr[RequestBody]]:
        return components.request_bodies


SCHEMAS = SchemaCollection()
PARAMETERS = ParameterCollection()
RESPONSES = ResponseCollection()
REQUEST_BODIES = RequestBodyCollection()


class ReferenceResolver:
    """Resolves $ref to actual definitions."""

    def __init__(self, document: Document):
        """
        Initialize the resolver.

        Args:
            document: The document whose components references point into
        """
        self.components = document.components

    def resolve(self, item: RefOr[T], collection: ComponentCollection[T]) -> T:
        """
        Resolve a possibly-indirect item to the concrete item it denotes.

        Chains of references are followed until an inline item is reached.

        Args:
            item: An inline item or a Reference
            collection: The collection references of this kind point into

        Returns:
            The concrete item

        Raises:
            InvalidReferenceError: If a locator is malformed or points elsewhere
            MissingComponentsError: If the document has no such collection
            UnresolvedReferenceError: If a referenced key is absent
            ReferenceCycleError: If the chain loops before reaching an item
        """
        target, _ = self.resolve_chain(item, collection)
        return target

    def resolve_chain(self, item: RefOr[T], collection: ComponentCollection[T]) -> tuple[T, list[str]]:
        """Resolve an item, also returning every locator followed on the way."""
        chain: list[str] = []
        while isinstance(item, Reference):
            if item.reference in chain:
                raise ReferenceCycleError(chain + [item.reference])
            chain.append(item.reference)
            item = self.lookup(item, collection)
        return item, chain

    def lookup(self, reference: Reference, collection: ComponentCollection[T]) -> RefOr[T]:
        """Follow exactly one reference, which may land on another reference."""
        key = collection.key_of(reference)

        entries = collection.select(self.components) if self.components is not None else {}
        if not entries:
            raise MissingComponentsError(
                f"reference {reference.reference!r} used but the document has no "
                f"components/{collection.collection_name}",
                reference.reference,
            )
        if key not in entries:
            raise UnresolvedReferenceError(
                f"reference {reference.reference!r} names no entry of components/{collection.collection_name}",
                reference.reference,
            )
        return entries[key]
