"""Tree abstraction: instance kinds and tree paths."""

from schema_engine.tree.node_type import (
    ALL_TYPES,
    ANY_TYPE,
    NUMERIC_TYPES,
    TYPE_NAMES,
    JSONScalar,
    JSONValue,
    NodeType,
)
from schema_engine.tree.pointer import JsonPointer, SchemaLocation, Token, TreePath

__all__ = [
    "ALL_TYPES",
    "ANY_TYPE",
    "JSONScalar",
    "JSONValue",
    "JsonPointer",
    "NUMERIC_TYPES",
    "NodeType",
    "SchemaLocation",
    "TYPE_NAMES",
    "Token",
    "TreePath",
]
