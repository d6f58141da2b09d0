"""
schema-engine — reference resolution

File: src/schema_engine/refs.py
Last updated: 2026-10-19

Purpose
- Locate the schema node a ``$ref`` points at, relative to the location of the referring node.

Functional requirements
- ``#<pointer>`` fragments resolve inside the referring document.
- Absolute and relative URIs resolve against an in-memory store; there is no network access.
- Every failure is a ``RefResolutionError``.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Protocol, runtime_checkable
from urllib.parse import unquote, urldefrag, urljoin

from schema_engine.errors import RefResolutionError
from schema_engine.tree.node_type import JSONValue
from schema_engine.tree.pointer import JsonPointer, SchemaLocation


@runtime_checkable
class RefResolver(Protocol):
    """Narrow lookup interface used by the ``$ref`` keyword."""

    def resolve(self, ref: str, base: SchemaLocation) -> tuple[SchemaLocation, JSONValue]: ...


class LocalRefResolver:
    """Resolve references against the root schema and a fixed store of documents."""

    __slots__ = ("_base_uri", "_documents")

    def __init__(
        self,
        root: JSONValue,
        *,
        base_uri: str = "",
        store: Mapping[str, JSONValue] | None = None,
    ) -> None:
        documents: dict[str, JSONValue] = {}
        for uri, document in (store or {}).items():
            documents[_normalize_uri(uri)] = document
        self._base_uri = _normalize_uri(base_uri)
        documents[self._base_uri] = root
        self._documents = MappingProxyType(documents)

    @property
    def base_uri(self) -> str:
        return self._base_uri

    @property
    def documents(self) -> Mapping[str, JSONValue]:
        return self._documents

    def with_root(self, root: JSONValue) -> LocalRefResolver:
        """Same store, different root document."""

        store = {uri: doc for uri, doc in self._documents.items() if uri != self._base_uri}
        return LocalRefResolver(root, base_uri=self._base_uri, store=store)

    def resolve(self, ref: str, base: SchemaLocation) -> tuple[SchemaLocation, JSONValue]:
        if not isinstance(ref, str):
            raise RefResolutionError(f"reference must be a string, got {type(ref).__name__}")

        target = urljoin(base.uri, ref) if base.uri else ref
        uri, fragment = urldefrag(target)
        uri = _normalize_uri(uri) if uri else base.uri

        if uri not in self._documents:
            raise RefResolutionError(f"no document registered for {uri!r}")
        document = self._documents[uri]

        try:
            pointer = JsonPointer.parse(unquote(fragment))
        except ValueError as exc:
            raise RefResolutionError(f"invalid fragment {fragment!r}: {exc}") from exc
        node = pointer.resolve(document)
        return SchemaLocation(uri, pointer), node


def _normalize_uri(uri: str) -> str:
    normalized, _ = urldefrag(uri)
    return normalized


__all__ = ["LocalRefResolver", "RefResolver"]
