"""
schema-engine — node type classification

File: src/schema_engine/tree/node_type.py
Last updated: 2026-10-19

Purpose
- Map any JSON-like instance value to exactly one semantic kind, used as the dispatch key.

Functional requirements
- Classification is structural: booleans before integers, Python ``int`` is ``integer``,
  every other finite real is ``number``.
- ``number`` is the numeric superset when matching type names.

Non-functional requirements
- Pure and allocation-free on the hot path; called once per dispatched node.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from enum import StrEnum
from typing import Final

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | Sequence["JSONValue"] | Mapping[str, "JSONValue"]


class NodeType(StrEnum):
    """Closed set of instance kinds."""

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"

    @classmethod
    def of(cls, value: object) -> NodeType:
        """Classify ``value``; raise ``TypeError`` for values outside the JSON model."""

        if value is None:
            return cls.NULL
        if isinstance(value, bool):
            return cls.BOOLEAN
        if isinstance(value, int):
            return cls.INTEGER
        if isinstance(value, float):
            if not math.isfinite(value):
                raise TypeError(f"non-finite number {value!r} is not a JSON value")
            return cls.NUMBER
        if isinstance(value, str):
            return cls.STRING
        if isinstance(value, Mapping):
            return cls.OBJECT
        if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
            return cls.ARRAY
        raise TypeError(f"{type(value).__name__} is not a JSON value")

    @classmethod
    def parse(cls, name: object) -> NodeType:
        if isinstance(name, NodeType):
            return name
        if not isinstance(name, str):
            raise ValueError(f"type name must be a string, got {type(name).__name__}")
        try:
            return cls(name)
        except ValueError:
            allowed = ", ".join(item.value for item in cls)
            raise ValueError(f"unknown type name {name!r}; expected one of: {allowed}") from None

    @classmethod
    def matches(cls, name: str, value: object) -> bool:
        """Return whether ``value`` is of the named type (``any`` matches everything)."""

        if name == ANY_TYPE:
            return True
        expected = cls.parse(name)
        actual = cls.of(value)
        if expected is actual:
            return True
        return expected is cls.NUMBER and actual is cls.INTEGER


ANY_TYPE: Final[str] = "any"
ALL_TYPES: Final[frozenset[NodeType]] = frozenset(NodeType)
NUMERIC_TYPES: Final[frozenset[NodeType]] = frozenset({NodeType.INTEGER, NodeType.NUMBER})
TYPE_NAMES: Final[frozenset[str]] = frozenset({item.value for item in NodeType} | {ANY_TYPE})


__all__ = [
    "ALL_TYPES",
    "ANY_TYPE",
    "JSONScalar",
    "JSONValue",
    "NUMERIC_TYPES",
    "NodeType",
    "TYPE_NAMES",
]
