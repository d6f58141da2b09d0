"""Array keywords.

``items`` and schema-valued ``additionalItems`` only steer container recursion; their node-level
checker is ``AlwaysTrue`` once the constraint value has been checked for shape.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from schema_engine.checkers import ALWAYS_TRUE, AlwaysTrue
from schema_engine.keywords._common import (
    expect_bool,
    expect_count,
    expect_schemas,
    is_array,
    json_equal,
    reject,
    type_label,
)

if TYPE_CHECKING:
    from schema_engine.context import ValidationContext
    from schema_engine.report import ListReport
    from schema_engine.tree.node_type import JSONValue


@dataclass(frozen=True, slots=True)
class ItemCountLogic:
    keyword: str
    limit: int
    lower: bool

    def evaluate(self, context: ValidationContext, report: ListReport) -> bool:
        count = len(context.instance)  # type: ignore[arg-type]
        if (count >= self.limit) if self.lower else (count <= self.limit):
            return True
        relation = "fewer" if self.lower else "more"
        return context.fail(
            report,
            f"array has {relation} than {self.limit} items (found {count})",
            keyword=self.keyword,
            found=count,
            limit=self.limit,
        )


@dataclass(frozen=True, slots=True)
class UniqueItemsLogic:
    def evaluate(self, context: ValidationContext, report: ListReport) -> bool:
        items = list(context.instance)  # type: ignore[arg-type]
        for right in range(1, len(items)):
            for left in range(right):
                if json_equal(items[left], items[right]):
                    return context.fail(
                        report,
                        f"array items {left} and {right} are equal",
                        keyword="uniqueItems",
                        duplicates=[left, right],
                    )
        return True


@dataclass(frozen=True, slots=True)
class TupleLengthLogic:
    """``additionalItems: false`` against a positional ``items`` array."""

    allowed: int

    def evaluate(self, context: ValidationContext, report: ListReport) -> bool:
        count = len(context.instance)  # type: ignore[arg-type]
        if count <= self.allowed:
            return True
        return context.fail(
            report,
            f"array has {count} items but additional items are not allowed beyond {self.allowed}",
            keyword="additionalItems",
            found=count,
            allowed=self.allowed,
        )


def build_min_items(context: ValidationContext, instance: JSONValue) -> ItemCountLogic:
    limit = expect_count("minItems", context.schema_node["minItems"])
    return ItemCountLogic("minItems", limit, True)


def build_max_items(context: ValidationContext, instance: JSONValue) -> ItemCountLogic:
    limit = expect_count("maxItems", context.schema_node["maxItems"])
    return ItemCountLogic("maxItems", limit, False)


def build_unique_items(
    context: ValidationContext, instance: JSONValue
) -> UniqueItemsLogic | AlwaysTrue:
    if expect_bool("uniqueItems", context.schema_node["uniqueItems"]):
        return UniqueItemsLogic()
    return ALWAYS_TRUE


def build_items(context: ValidationContext, instance: JSONValue) -> AlwaysTrue:
    expect_schemas("items", context.schema_node["items"])
    return ALWAYS_TRUE


def build_additional_items(
    context: ValidationContext, instance: JSONValue
) -> TupleLengthLogic | AlwaysTrue:
    schema = context.schema_node
    value = schema["additionalItems"]
    if not isinstance(value, bool):
        if not isinstance(value, Mapping):
            reject("additionalItems", f"expected a boolean or a schema, got {type_label(value)}")
        return ALWAYS_TRUE
    items = schema.get("items")
    if value or not is_array(items):
        return ALWAYS_TRUE
    return TupleLengthLogic(len(items))  # type: ignore[arg-type]


__all__ = [
    "ItemCountLogic",
    "TupleLengthLogic",
    "UniqueItemsLogic",
    "build_additional_items",
    "build_items",
    "build_max_items",
    "build_min_items",
    "build_unique_items",
]
