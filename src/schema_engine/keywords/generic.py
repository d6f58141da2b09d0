"""
schema-engine — keywords applying to every instance type

File: src/schema_engine/keywords/generic.py
Last updated: 2026-10-19

Purpose
- ``type``, ``disallow``, ``enum``, ``extends``, ``dependencies`` and ``$ref``.

Functional requirements
- Keywords that apply a nested schema to the same instance re-enter the dispatch engine
  with a derived context; nested diagnostics keep the instance path of the node.
- Union members that are schemas are tried in scratch contexts; their findings only reach the
  caller's report when the union as a whole fails.
- ``$ref`` targets are looked up through the context's resolver at evaluation time; lookup
  failures and reference loops are reported with the ``ref`` domain.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from schema_engine.checkers import evaluate
from schema_engine.context import absorb
from schema_engine.dispatch import get_validator
from schema_engine.errors import RefResolutionError
from schema_engine.keywords._common import (
    expect_schemas,
    expect_string,
    is_array,
    json_equal,
    reject,
    render,
    type_label,
)
from schema_engine.tree.node_type import TYPE_NAMES, JSONValue, NodeType

if TYPE_CHECKING:
    from schema_engine.context import ValidationContext
    from schema_engine.report import ListReport

SchemaMember = tuple[int | None, Mapping[str, JSONValue]]


@dataclass(frozen=True, slots=True)
class TypeUnionLogic:
    """``type`` (instance must match a member) or ``disallow`` (must match none)."""

    keyword: str
    names: tuple[str, ...]
    schemas: tuple[SchemaMember, ...]
    negate: bool

    def evaluate(self, context: ValidationContext, report: ListReport) -> bool:
        value = context.instance
        matched = any(NodeType.matches(name, value) for name in self.names)
        trials: list[ValidationContext] = []
        if not matched:
            for index, member in self.schemas:
                location = context.schema_location.append(self.keyword)
                if index is not None:
                    location = location.append(index)
                trial = context.scratch(member, location)
                trials.append(trial)
                if evaluate(get_validator(trial), trial.report):
                    matched = True
                    break

        found = context.instance_type.value
        if self.negate:
            if not matched:
                return True
            return context.fail(
                report,
                f"instance type {found} matches a disallowed type",
                keyword=self.keyword,
                found=found,
                disallowed=list(self.names),
            )

        if matched:
            return True
        context.fail(
            report,
            f"instance type {found} is not allowed (allowed: {', '.join(self.describe())})",
            keyword=self.keyword,
            found=found,
            expected=list(self.names),
        )
        for trial in trials:
            absorb(report, trial)
        return False

    def describe(self) -> list[str]:
        labels = list(self.names)
        labels.extend(
            "schema" if index is None else f"schema #{index}" for index, _ in self.schemas
        )
        return labels


@dataclass(frozen=True, slots=True)
class EnumLogic:
    values: tuple[JSONValue, ...]

    def evaluate(self, context: ValidationContext, report: ListReport) -> bool:
        value = context.instance
        if any(json_equal(value, candidate) for candidate in self.values):
            return True
        return context.fail(
            report,
            f"value {render(value)} is not one of the enumerated values",
            keyword="enum",
            enum=list(self.values),
        )


@dataclass(frozen=True, slots=True)
class ExtendsLogic:
    schemas: tuple[SchemaMember, ...]

    def evaluate(self, context: ValidationContext, report: ListReport) -> bool:
        verdicts: list[bool] = []
        for index, member in self.schemas:
            location = context.schema_location.append("extends")
            if index is not None:
                location = location.append(index)
            nested = context.with_schema(member, location, report=report)
            verdicts.append(evaluate(get_validator(nested), report))
        return all(verdicts)


@dataclass(frozen=True, slots=True)
class DependenciesLogic:
    """Members of an object that, when present, require siblings or a schema."""

    required: tuple[tuple[str, tuple[str, ...]], ...]
    schemas: tuple[tuple[str, Mapping[str, JSONValue]], ...]

    def evaluate(self, context: ValidationContext, report: ListReport) -> bool:
        members = context.instance
        if not isinstance(members, Mapping):
            return True

        verdicts: list[bool] = []
        for name, siblings in self.required:
            if name not in members:
                continue
            missing = [sibling for sibling in siblings if sibling not in members]
            if missing:
                verdicts.append(
                    context.fail(
                        report,
                        f"property {name!r} requires missing properties: {', '.join(missing)}",
                        keyword="dependencies",
                        property=name,
                        missing=missing,
                    )
                )
        for name, schema in self.schemas:
            if name not in members:
                continue
            location = context.schema_location.append("dependencies", name)
            nested = context.with_schema(schema, location, report=report)
            verdicts.append(evaluate(get_validator(nested), report))
        return all(verdicts)


@dataclass(frozen=True, slots=True)
class RefLogic:
    ref: str

    def evaluate(self, context: ValidationContext, report: ListReport) -> bool:
        try:
            location, target = context.resolver.resolve(self.ref, context.schema_location)
        except RefResolutionError as exc:
            return context.fail(
                report,
                f"cannot resolve reference {self.ref!r}: {exc}",
                keyword="$ref",
                domain="ref",
                ref=self.ref,
            )

        if (location, context.path) in context.ref_trail:
            trail = [str(visited) for visited, path in context.ref_trail if path == context.path]
            return context.fail(
                report,
                f"reference loop detected through {self.ref!r}",
                keyword="$ref",
                domain="ref",
                ref=self.ref,
                trail=trail,
            )

        nested = context.with_schema(target, location, report=report, via_ref=True)
        return evaluate(get_validator(nested), report)


def build_type(context: ValidationContext, instance: JSONValue) -> TypeUnionLogic:
    return _build_union("type", context, negate=False)


def build_disallow(context: ValidationContext, instance: JSONValue) -> TypeUnionLogic:
    return _build_union("disallow", context, negate=True)


def build_enum(context: ValidationContext, instance: JSONValue) -> EnumLogic:
    values = context.schema_node["enum"]
    if not is_array(values):
        reject("enum", f"expected an array, got {type_label(values)}")
    if not values:
        reject("enum", "array must not be empty")
    return EnumLogic(tuple(values))  # type: ignore[arg-type]


def build_extends(context: ValidationContext, instance: JSONValue) -> ExtendsLogic:
    return ExtendsLogic(expect_schemas("extends", context.schema_node["extends"]))


def build_dependencies(context: ValidationContext, instance: JSONValue) -> DependenciesLogic:
    value = context.schema_node["dependencies"]
    if not isinstance(value, Mapping):
        reject("dependencies", f"expected an object, got {type_label(value)}")

    required: list[tuple[str, tuple[str, ...]]] = []
    schemas: list[tuple[str, Mapping[str, JSONValue]]] = []
    for name, dependency in value.items():
        if isinstance(dependency, str):
            required.append((name, (dependency,)))
        elif isinstance(dependency, Mapping):
            schemas.append((name, dependency))
        elif is_array(dependency):
            siblings = tuple(
                expect_string(f"dependencies.{name}", sibling) for sibling in dependency
            )
            required.append((name, siblings))
        else:
            reject(
                "dependencies",
                f"member {name!r}: expected a string, an array of strings or a schema, "
                f"got {type_label(dependency)}",
            )
    return DependenciesLogic(tuple(required), tuple(schemas))


def build_ref(context: ValidationContext, instance: JSONValue) -> RefLogic:
    return RefLogic(expect_string("$ref", context.schema_node["$ref"]))


def _build_union(keyword: str, context: ValidationContext, *, negate: bool) -> TypeUnionLogic:
    value = context.schema_node[keyword]
    members: tuple[object, ...]
    if isinstance(value, str):
        members = (value,)
    elif is_array(value):
        members = tuple(value)  # type: ignore[arg-type]
        if not members:
            reject(keyword, "array must not be empty")
    else:
        reject(keyword, f"expected a string or an array, got {type_label(value)}")

    names: list[str] = []
    schemas: list[SchemaMember] = []
    for index, member in enumerate(members):
        if isinstance(member, str):
            if member not in TYPE_NAMES:
                reject(keyword, f"unknown type name {member!r}")
            names.append(member)
        elif isinstance(member, Mapping):
            schemas.append((index if is_array(value) else None, member))
        else:
            reject(keyword, f"element {index}: expected a type name or a schema")
    return TypeUnionLogic(keyword, tuple(names), tuple(schemas), negate)


__all__ = [
    "DependenciesLogic",
    "EnumLogic",
    "ExtendsLogic",
    "RefLogic",
    "TypeUnionLogic",
    "build_dependencies",
    "build_disallow",
    "build_enum",
    "build_extends",
    "build_ref",
    "build_type",
]
