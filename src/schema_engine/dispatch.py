"""
schema-engine — dispatch engine

File: src/schema_engine/dispatch.py
Last updated: 2026-10-19

Purpose
- Turn (schema node, instance) into one composed checker: select applicable keywords, build
  their checkers, compose them and wrap container instances for recursion.

Functional requirements
- Keywords are built in registry (canonical) order.
- A builder failure aborts the whole node: one diagnostic, one ``AlwaysFalse``.
- Building is free of side effects on shared state; the diagnostic travels inside the checker.
- An empty schema node accepts everything without recursion.

Non-functional requirements
- Never raises for malformed constraint values; classification errors for values outside the
  JSON model do propagate.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from schema_engine.checkers import (
    ALWAYS_TRUE,
    AlwaysFalse,
    Checker,
    ContainerChecker,
    all_of,
    as_checker,
)
from schema_engine.containers import CHILD_SCHEMAS
from schema_engine.context import ValidationContext
from schema_engine.errors import SchemaTypeError

_LOGGER = logging.getLogger(__name__)


def get_validator(context: ValidationContext) -> Checker:
    """Build the checker for ``context.instance`` under ``context.schema``."""

    schema = context.schema
    if not isinstance(schema, Mapping):
        error = SchemaTypeError(f"schema must be an object, got {type(schema).__name__}")
        return _construction_failure(context, None, error)
    if not schema:
        return ALWAYS_TRUE

    instance_type = context.instance_type
    registry = context.registry
    selected = registry.applicable_keywords(schema.keys(), instance_type)
    if _LOGGER.isEnabledFor(logging.DEBUG):
        _LOGGER.debug(
            "dispatching schema node",
            extra={
                "instance_path": str(context.path),
                "schema_location": str(context.schema_location),
                "instance_type": instance_type.value,
                "keywords": list(selected),
            },
        )

    built: list[Checker] = []
    for name in selected:
        registration = registry.lookup(name)
        if registration is None:
            continue
        try:
            built.append(as_checker(name, registration.builder(context, context.instance), context))
        except Exception as exc:  # noqa: BLE001 - any builder fault degrades the node
            return _construction_failure(context, name, exc)

    checker = all_of(built)
    child_schemas = CHILD_SCHEMAS.get(instance_type)
    if child_schemas is None:
        return checker
    return ContainerChecker(
        kind=instance_type,
        node=checker,
        context=context,
        child_schemas=child_schemas,
        dispatch=get_validator,
    )


def _construction_failure(
    context: ValidationContext,
    keyword: str | None,
    error: BaseException,
) -> AlwaysFalse:
    location = context.schema_location
    error_class = type(error).__name__

    subject = f"keyword {keyword}" if keyword is not None else "schema node"
    diagnostic = context.diagnostic(
        f"cannot instantiate validator for {subject}: {error_class}",
        keyword=keyword,
        domain="construction",
        error_class=error_class,
        error=str(error),
    )
    _LOGGER.warning(
        "keyword construction failed",
        extra={
            "keyword": keyword,
            "error_class": error_class,
            "instance_path": str(context.path),
            "schema_location": str(location),
        },
    )
    return AlwaysFalse(diagnostic)


__all__ = ["get_validator"]
