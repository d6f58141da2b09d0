"""
schema-engine — validation context

File: src/schema_engine/context.py
Last updated: 2026-10-19

Purpose
- Per-call environment threaded through dispatch: current schema node, instance, paths,
  registry, report sink, resolver and options.

What should be included in this file
- ``ValidationContext`` and its derivation helpers (child, same-instance re-dispatch, scratch).
- ``absorb``: ordered merge of an isolated context's findings into an enclosing sink.

Functional requirements
- Contexts carry no mutable state besides the report sink they write to.
- Isolated children and scratch trials never share a report with their parent.
- Only the top-level context may carry an executor; children never inherit it.

Non-functional requirements
- Contexts are immutable values; derivation is cheap.
"""

from __future__ import annotations

from collections.abc import Mapping
from concurrent.futures import Executor
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from schema_engine.errors import SchemaTypeError
from schema_engine.options import EngineOptions
from schema_engine.report import Diagnostic, DiagnosticDomain, ListReport, LogLevel
from schema_engine.tree.node_type import JSONValue, NodeType
from schema_engine.tree.pointer import JsonPointer, SchemaLocation, Token

if TYPE_CHECKING:
    from schema_engine.refs import RefResolver
    from schema_engine.registry import RegistryView

RefTrail = tuple[tuple[SchemaLocation, JsonPointer], ...]


@dataclass(frozen=True, slots=True)
class ValidationContext:
    """Everything one dispatch step needs; derive, never mutate."""

    schema: JSONValue
    instance: JSONValue
    registry: RegistryView
    report: ListReport
    resolver: RefResolver
    options: EngineOptions = field(default_factory=EngineOptions)
    path: JsonPointer = JsonPointer.ROOT
    schema_location: SchemaLocation = SchemaLocation()
    ref_trail: RefTrail = ()
    executor: Executor | None = None

    @property
    def instance_type(self) -> NodeType:
        return NodeType.of(self.instance)

    @property
    def schema_node(self) -> Mapping[str, JSONValue]:
        if not isinstance(self.schema, Mapping):
            found = type(self.schema).__name__
            raise SchemaTypeError(f"{self.schema_location}: schema must be an object, got {found}")
        return self.schema

    def child(
        self,
        schema: JSONValue,
        instance: JSONValue,
        token: Token,
        schema_tokens: tuple[Token, ...],
        *,
        report: ListReport | None = None,
        isolated: bool = False,
    ) -> ValidationContext:
        """Context for one array element or object member.

        ``isolated`` gives the child its own report so it can run on another thread; merge it
        back with ``absorb``.
        """

        if isolated:
            sink = ListReport(log_level=self.report.log_level)
        else:
            sink = report if report is not None else self.report
        return replace(
            self,
            schema=schema,
            instance=instance,
            report=sink,
            path=self.path.append(token),
            schema_location=self.schema_location.append(*schema_tokens),
            ref_trail=(),
            executor=None,
        )

    def with_schema(
        self,
        schema: JSONValue,
        location: SchemaLocation,
        *,
        report: ListReport | None = None,
        via_ref: bool = False,
    ) -> ValidationContext:
        """Same instance and path, different schema node (``$ref``, ``extends``, unions)."""

        trail = self.ref_trail
        if via_ref:
            trail = (*trail, (location, self.path))
        return replace(
            self,
            schema=schema,
            report=report if report is not None else self.report,
            schema_location=location,
            ref_trail=trail,
        )

    def scratch(self, schema: JSONValue, location: SchemaLocation) -> ValidationContext:
        """Trial context with a fresh DEBUG-level report."""

        return replace(
            self,
            schema=schema,
            report=ListReport(log_level=LogLevel.DEBUG),
            schema_location=location,
            executor=None,
        )

    def diagnostic(
        self,
        message: str,
        *,
        keyword: str | None = None,
        level: LogLevel = LogLevel.ERROR,
        domain: DiagnosticDomain = "validation",
        **details: JSONValue,
    ) -> Diagnostic:
        return Diagnostic(
            level=level,
            message=message,
            path=self.path,
            keyword=keyword,
            schema=self.schema_location,
            domain=domain,
            details=details,
        )

    def fail(
        self,
        report: ListReport,
        message: str,
        *,
        keyword: str | None = None,
        domain: DiagnosticDomain = "validation",
        **details: JSONValue,
    ) -> bool:
        """Log an ERROR diagnostic at the current path and return ``False``."""

        report.log(self.diagnostic(message, keyword=keyword, domain=domain, **details))
        return False


def absorb(report: ListReport, isolated: ValidationContext) -> None:
    """Fold an isolated context's findings into ``report``, in order."""

    for message in isolated.report:
        report.log(message)


__all__ = ["RefTrail", "ValidationContext", "absorb"]
