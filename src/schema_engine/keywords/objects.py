"""Object keywords: ``properties``, ``patternProperties`` and ``additionalProperties``."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from schema_engine.checkers import ALWAYS_TRUE, AlwaysTrue
from schema_engine.containers import compile_pattern
from schema_engine.keywords._common import (
    expect_bool,
    expect_schema_map,
    reject,
    type_label,
)

if TYPE_CHECKING:
    from schema_engine.context import ValidationContext
    from schema_engine.report import ListReport
    from schema_engine.tree.node_type import JSONValue


@dataclass(frozen=True, slots=True)
class RequiredLogic:
    """Draft-03 ``required: true`` members declared under ``properties``."""

    required: tuple[str, ...]

    def evaluate(self, context: ValidationContext, report: ListReport) -> bool:
        members = context.instance
        missing = [name for name in self.required if name not in members]  # type: ignore[operator]
        if not missing:
            return True
        return context.fail(
            report,
            f"required properties are missing: {', '.join(missing)}",
            keyword="properties",
            missing=missing,
        )


@dataclass(frozen=True, slots=True)
class NoAdditionalPropertiesLogic:
    declared: frozenset[str]
    patterns: tuple[re.Pattern[str], ...]

    def evaluate(self, context: ValidationContext, report: ListReport) -> bool:
        extra = [
            name
            for name in context.instance  # type: ignore[union-attr]
            if name not in self.declared and not any(p.search(name) for p in self.patterns)
        ]
        if not extra:
            return True
        return context.fail(
            report,
            f"additional properties are not allowed: {', '.join(sorted(extra))}",
            keyword="additionalProperties",
            unwanted=sorted(extra),
        )


def build_properties(context: ValidationContext, instance: JSONValue) -> RequiredLogic | AlwaysTrue:
    properties = expect_schema_map("properties", context.schema_node["properties"])
    required: list[str] = []
    for name, subschema in properties.items():
        if expect_bool(f"properties.{name}.required", subschema.get("required", False)):
            required.append(name)
    if not required:
        return ALWAYS_TRUE
    return RequiredLogic(tuple(required))


def build_pattern_properties(context: ValidationContext, instance: JSONValue) -> AlwaysTrue:
    _compile_all(expect_schema_map("patternProperties", context.schema_node["patternProperties"]))
    return ALWAYS_TRUE


def build_additional_properties(
    context: ValidationContext, instance: JSONValue
) -> NoAdditionalPropertiesLogic | AlwaysTrue:
    schema = context.schema_node
    value = schema["additionalProperties"]
    if not isinstance(value, bool):
        if not isinstance(value, Mapping):
            reject(
                "additionalProperties",
                f"expected a boolean or a schema, got {type_label(value)}",
            )
        return ALWAYS_TRUE
    if value:
        return ALWAYS_TRUE

    properties = schema.get("properties", {})
    patterns = schema.get("patternProperties", {})
    if not isinstance(properties, Mapping) or not isinstance(patterns, Mapping):
        reject("additionalProperties", "sibling properties/patternProperties must be objects")
    return NoAdditionalPropertiesLogic(
        declared=frozenset(properties),
        patterns=_compile_all(patterns),
    )


def _compile_all(patterns: Mapping[str, object]) -> tuple[re.Pattern[str], ...]:
    compiled: list[re.Pattern[str]] = []
    for source in patterns:
        try:
            compiled.append(compile_pattern(source))
        except re.error as exc:
            reject("patternProperties", f"invalid regular expression {source!r}: {exc}")
    return tuple(compiled)


__all__ = [
    "NoAdditionalPropertiesLogic",
    "RequiredLogic",
    "build_additional_properties",
    "build_pattern_properties",
    "build_properties",
]
