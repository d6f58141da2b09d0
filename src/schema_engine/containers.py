"""
schema-engine — container recursion

File: src/schema_engine/containers.py
Last updated: 2026-10-19

Purpose
- Derive child schemas for array elements and object members, and validate every child
  through the dispatch engine.

What should be included in this file
- Child-schema derivation functions for arrays (``items``/``additionalItems``) and objects
  (``properties``/``patternProperties``/``additionalProperties``).
- Serial recursion and deterministic thread-pool fan-out.

Functional requirements
- Children are always checked, whatever the node-level verdict.
- Fan-out merges child reports in child order, so output matches a serial run.
- A child without any applicable schema is accepted without dispatch.

Non-functional requirements
- Worker threads never touch another child's report.
"""

from __future__ import annotations

import contextvars
import logging
import re
from collections.abc import Callable, Iterator, Mapping, Sequence
from concurrent.futures import Executor
from functools import lru_cache
from typing import TYPE_CHECKING, TypeAlias

from schema_engine.context import absorb
from schema_engine.tree.node_type import JSONValue, NodeType
from schema_engine.tree.pointer import Token

if TYPE_CHECKING:
    from schema_engine.checkers import Checker, ContainerChecker
    from schema_engine.context import ValidationContext
    from schema_engine.report import ListReport

ChildSchema: TypeAlias = tuple[tuple[Token, ...], JSONValue]
ChildSchemaFn: TypeAlias = Callable[[Mapping[str, JSONValue], Token], tuple[ChildSchema, ...]]
Evaluator: TypeAlias = Callable[["Checker", "ListReport"], bool]

_LOGGER = logging.getLogger(__name__)


def array_child_schemas(schema: Mapping[str, JSONValue], index: Token) -> tuple[ChildSchema, ...]:
    """Schemas that apply to element ``index`` of an array."""

    items = schema.get("items")
    if isinstance(items, Mapping):
        return ((("items",), items),)
    if isinstance(items, Sequence) and not isinstance(items, str):
        position = int(index)
        if position < len(items):
            return ((("items", position), items[position]),)
        additional = schema.get("additionalItems")
        if isinstance(additional, Mapping):
            return ((("additionalItems",), additional),)
    return ()


def object_child_schemas(schema: Mapping[str, JSONValue], key: Token) -> tuple[ChildSchema, ...]:
    """Schemas that apply to member ``key`` of an object."""

    name = str(key)
    found: list[ChildSchema] = []

    properties = schema.get("properties")
    if isinstance(properties, Mapping) and name in properties:
        found.append((("properties", name), properties[name]))

    patterns = schema.get("patternProperties")
    if isinstance(patterns, Mapping):
        for regex, subschema in patterns.items():
            if compile_pattern(regex).search(name):
                found.append((("patternProperties", regex), subschema))

    if found:
        return tuple(found)

    additional = schema.get("additionalProperties")
    if isinstance(additional, Mapping):
        return ((("additionalProperties",), additional),)
    return ()


CHILD_SCHEMAS: Mapping[NodeType, ChildSchemaFn] = {
    NodeType.ARRAY: array_child_schemas,
    NodeType.OBJECT: object_child_schemas,
}


@lru_cache(maxsize=512)
def compile_pattern(regex: str) -> re.Pattern[str]:
    return re.compile(regex)


def iter_children(instance: JSONValue) -> Iterator[tuple[Token, JSONValue]]:
    """Array elements by index or object members in mapping order."""

    if isinstance(instance, Mapping):
        yield from instance.items()
    elif isinstance(instance, Sequence) and not isinstance(instance, str):
        yield from enumerate(instance)


def validate_children(
    container: ContainerChecker,
    report: ListReport,
    evaluate: Evaluator,
) -> bool:
    """Dispatch and evaluate every (child, child schema) pair of ``container``."""

    context = container.context
    schema = context.schema_node
    jobs: list[tuple[Token, JSONValue, ChildSchema]] = []
    for token, value in iter_children(context.instance):
        for pair in container.child_schemas(schema, token):
            jobs.append((token, value, pair))

    if not jobs:
        return True

    executor = context.executor
    if executor is not None and len(jobs) >= context.options.parallel_min_children:
        return _validate_parallel(container, report, evaluate, jobs, executor)

    verdicts: list[bool] = []
    for token, value, (schema_tokens, subschema) in jobs:
        child = context.child(subschema, value, token, schema_tokens, report=report)
        verdicts.append(evaluate(container.dispatch(child), report))
    return all(verdicts)


def _validate_parallel(
    container: ContainerChecker,
    report: ListReport,
    evaluate: Evaluator,
    jobs: list[tuple[Token, JSONValue, ChildSchema]],
    executor: Executor,
) -> bool:
    context = container.context

    children = [
        context.child(subschema, value, token, schema_tokens, isolated=True)
        for token, value, (schema_tokens, subschema) in jobs
    ]
    _LOGGER.debug(
        "fanning out container children",
        extra={"instance_path": str(context.path), "children": len(children)},
    )
    futures = [
        executor.submit(
            contextvars.copy_context().run,
            _validate_one,
            container.dispatch,
            evaluate,
            child,
        )
        for child in children
    ]

    verdicts: list[bool] = []
    for child, future in zip(children, futures, strict=True):
        verdicts.append(future.result())
        absorb(report, child)
    return all(verdicts)


def _validate_one(
    dispatch: Callable[[ValidationContext], Checker],
    evaluate: Evaluator,
    child: ValidationContext,
) -> bool:
    return evaluate(dispatch(child), child.report)


__all__ = [
    "CHILD_SCHEMAS",
    "ChildSchema",
    "ChildSchemaFn",
    "Evaluator",
    "array_child_schemas",
    "compile_pattern",
    "iter_children",
    "object_child_schemas",
    "validate_children",
]
