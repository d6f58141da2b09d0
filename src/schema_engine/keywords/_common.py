"""Shared helpers for built-in keyword builders."""

from __future__ import annotations

import json
import math
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import NoReturn

from schema_engine.errors import KeywordConstructionError
from schema_engine.tree.node_type import JSONValue

Number = int | float


def reject(keyword: str, message: str) -> NoReturn:
    raise KeywordConstructionError(keyword, message)


def is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_array(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def expect_number(keyword: str, value: object) -> Number:
    if not is_number(value):
        reject(keyword, f"expected a number, got {type_label(value)}")
    if isinstance(value, float) and not math.isfinite(value):
        reject(keyword, "number must be finite")
    return value  # type: ignore[return-value]


def expect_count(keyword: str, value: object) -> int:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        reject(keyword, f"expected a non-negative integer, got {type_label(value)}")
    if value < 0:
        reject(keyword, f"expected a non-negative integer, got {value}")
    return value


def expect_bool(keyword: str, value: object) -> bool:
    if not isinstance(value, bool):
        reject(keyword, f"expected a boolean, got {type_label(value)}")
    return value


def expect_string(keyword: str, value: object) -> str:
    if not isinstance(value, str):
        reject(keyword, f"expected a string, got {type_label(value)}")
    return value


def expect_schema(keyword: str, value: object) -> Mapping[str, JSONValue]:
    if not isinstance(value, Mapping):
        reject(keyword, f"expected a schema, got {type_label(value)}")
    return value


def expect_schema_map(keyword: str, value: object) -> Mapping[str, Mapping[str, JSONValue]]:
    members = expect_schema(keyword, value)
    for name, member in members.items():
        if not isinstance(member, Mapping):
            reject(keyword, f"member {name!r}: expected a schema, got {type_label(member)}")
    return members  # type: ignore[return-value]


def expect_schemas(
    keyword: str, value: object
) -> tuple[tuple[int | None, Mapping[str, JSONValue]], ...]:
    """A schema or an array of schemas, each paired with its array index.

    A lone schema is paired with ``None``.
    """

    if isinstance(value, Mapping):
        return ((None, value),)
    if not is_array(value):
        reject(keyword, f"expected a schema or an array of schemas, got {type_label(value)}")
    pairs: list[tuple[int | None, Mapping[str, JSONValue]]] = []
    for index, member in enumerate(value):  # type: ignore[arg-type]
        if not isinstance(member, Mapping):
            reject(keyword, f"element {index}: expected a schema, got {type_label(member)}")
        pairs.append((index, member))
    return tuple(pairs)


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, int):
        return Decimal(value)
    return Decimal(repr(value))


def json_equal(left: object, right: object) -> bool:
    """Equality in the JSON data model: ``1 == 1.0`` but ``true != 1``."""

    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    if is_number(left) and is_number(right):
        return to_decimal(left) == to_decimal(right)  # type: ignore[arg-type]
    if isinstance(left, str) or isinstance(right, str):
        return isinstance(left, str) and isinstance(right, str) and left == right
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if left.keys() != right.keys():
            return False
        return all(json_equal(left[key], right[key]) for key in left)
    if is_array(left) and is_array(right):
        if len(left) != len(right):  # type: ignore[arg-type]
            return False
        return all(json_equal(a, b) for a, b in zip(left, right))  # type: ignore[call-overload]
    return False


def type_label(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if is_array(value):
        return "array"
    return type(value).__name__


def render(value: object, *, limit: int = 60) -> str:
    """Compact JSON rendering for messages."""

    text = json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


__all__ = [
    "Number",
    "expect_bool",
    "expect_count",
    "expect_number",
    "expect_schema",
    "expect_schema_map",
    "expect_schemas",
    "expect_string",
    "is_array",
    "is_number",
    "json_equal",
    "reject",
    "render",
    "to_decimal",
    "type_label",
]
