"""
schema-engine — public validation entry points

File: src/schema_engine/engine.py
Last updated: 2026-10-19

Purpose
- Build the top-level validation context, run the dispatch engine and hand back the verdict
  with its report.

What should be included in this file
- ``ValidationResult``: ``(valid, report)`` pair plus the construction failures it contains.
- ``Validator``: reusable, thread-safe binding of one schema to a frozen registry.
- ``validate``: one-shot convenience wrapper.

Functional requirements
- Each call owns its report and (when parallel) its thread pool.
- Construction failures are gathered from the finished report; optional collapsing of
  repeated schema faults happens there, never during evaluation.
- Log records emitted during a call carry a ``validation_id`` correlation field.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Iterator, Mapping
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass

from schema_engine.checkers import evaluate
from schema_engine.context import ValidationContext
from schema_engine.dispatch import get_validator
from schema_engine.observability.logging import correlation_scope
from schema_engine.options import EngineOptions
from schema_engine.refs import LocalRefResolver, RefResolver
from schema_engine.registry import (
    FrozenKeywordRegistry,
    KeywordRegistry,
    RegistryView,
    default_registry,
)
from schema_engine.report import (
    Diagnostic,
    ListReport,
    LogLevel,
    SyntaxReport,
    collect_schema_faults,
)
from schema_engine.tree.node_type import JSONValue
from schema_engine.tree.pointer import SchemaLocation

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Verdict of one validation call; unpacks as ``valid, report``."""

    valid: bool
    report: ListReport
    faults: SyntaxReport

    @property
    def messages(self) -> tuple[Diagnostic, ...]:
        return self.report.messages

    def __iter__(self) -> Iterator[bool | ListReport]:
        yield self.valid
        yield self.report

    def __bool__(self) -> bool:
        return self.valid


class Validator:
    """A schema bound to a frozen keyword vocabulary, options and reference store."""

    __slots__ = ("_location", "_options", "_registry", "_resolver", "_schema")

    def __init__(
        self,
        schema: JSONValue,
        *,
        registry: RegistryView | None = None,
        options: EngineOptions | None = None,
        resolver: RefResolver | None = None,
        base_uri: str = "",
        store: Mapping[str, JSONValue] | None = None,
    ) -> None:
        self._schema = schema
        self._registry = _frozen(registry)
        self._options = options if options is not None else EngineOptions()
        if resolver is None:
            resolver = LocalRefResolver(schema, base_uri=base_uri, store=store)
            base_uri = resolver.base_uri
        self._resolver = resolver
        self._location = SchemaLocation(base_uri)

    @classmethod
    def from_config(
        cls,
        schema: JSONValue,
        config: Mapping[str, object],
        **kwargs: object,
    ) -> Validator:
        """Validator whose options come from a loaded configuration mapping."""

        options = EngineOptions.from_config(config)
        return cls(schema, options=options, **kwargs)  # type: ignore[arg-type]

    @property
    def schema(self) -> JSONValue:
        return self._schema

    @property
    def registry(self) -> FrozenKeywordRegistry:
        return self._registry

    @property
    def options(self) -> EngineOptions:
        return self._options

    def validate(
        self, instance: JSONValue, *, enclosing: ListReport | None = None
    ) -> ValidationResult:
        """Validate ``instance``; with ``enclosing``, also fold the findings into that report."""

        findings = ListReport(log_level=LogLevel.DEBUG)
        validation_id = f"val-{secrets.token_hex(6)}"

        with correlation_scope(validation_id=validation_id), self._executor() as executor:
            context = ValidationContext(
                schema=self._schema,
                instance=instance,
                registry=self._registry,
                report=findings,
                resolver=self._resolver,
                options=self._options,
                schema_location=self._location,
                executor=executor,
            )
            valid = evaluate(get_validator(context), findings)
            report = ListReport(log_level=self._options.report_log_level)
            faults = collect_schema_faults(
                findings,
                report,
                collapse_repeats=self._options.suppress_repeated_schema_faults,
            )
            _LOGGER.debug(
                "validation finished",
                extra={"valid": valid, "messages": len(report), "schema_faults": len(faults)},
            )

        if enclosing is not None:
            report.inject_into(enclosing)
        return ValidationResult(valid=valid, report=report, faults=faults)

    @contextmanager
    def _executor(self) -> Iterator[ThreadPoolExecutor | None]:
        if not self._options.parallel:
            yield None
            return
        with ThreadPoolExecutor(
            max_workers=self._options.max_workers,
            thread_name_prefix="schema-engine",
        ) as executor:
            yield executor


def validate(
    schema: JSONValue,
    instance: JSONValue,
    *,
    registry: RegistryView | None = None,
    options: EngineOptions | None = None,
    resolver: RefResolver | None = None,
    store: Mapping[str, JSONValue] | None = None,
) -> ValidationResult:
    """Validate ``instance`` against ``schema`` and return ``(valid, report)``."""

    validator = Validator(
        schema, registry=registry, options=options, resolver=resolver, store=store
    )
    return validator.validate(instance)


def _frozen(registry: RegistryView | None) -> FrozenKeywordRegistry:
    if registry is None:
        return default_registry()
    if isinstance(registry, KeywordRegistry):
        return registry.freeze()
    if isinstance(registry, FrozenKeywordRegistry):
        return registry
    raise TypeError(f"expected a keyword registry, got {type(registry).__name__}")


__all__ = ["ValidationResult", "Validator", "validate"]
