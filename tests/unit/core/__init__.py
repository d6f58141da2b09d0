"""Shared helpers for core engine tests."""

from __future__ import annotations

from dataclasses import dataclass, field

from schema_engine.context import ValidationContext
from schema_engine.options import EngineOptions
from schema_engine.refs import LocalRefResolver
from schema_engine.registry import FrozenKeywordRegistry, KeywordRegistry, builtin_registry
from schema_engine.report import ListReport, LogLevel
from schema_engine.tree.node_type import JSONValue


def make_context(
    schema: JSONValue,
    instance: JSONValue,
    *,
    registry: KeywordRegistry | FrozenKeywordRegistry | None = None,
    options: EngineOptions | None = None,
    report: ListReport | None = None,
) -> ValidationContext:
    if registry is None:
        frozen = builtin_registry().freeze()
    elif isinstance(registry, KeywordRegistry):
        frozen = registry.freeze()
    else:
        frozen = registry
    return ValidationContext(
        schema=schema,
        instance=instance,
        registry=frozen,
        report=report if report is not None else ListReport(log_level=LogLevel.DEBUG),
        resolver=LocalRefResolver(schema),
        options=options if options is not None else EngineOptions(),
    )


@dataclass(frozen=True)
class FixedLogic:
    """Keyword logic with a predetermined verdict and optional message."""

    verdict: bool
    message: str | None = None
    keyword: str = "fixed"

    def evaluate(self, context: ValidationContext, report: ListReport) -> bool:
        if self.message is not None:
            report.log(context.diagnostic(self.message, keyword=self.keyword))
        return self.verdict


@dataclass
class RecordingBuilder:
    """Builder that records invocations and returns fixed logic (or raises)."""

    verdict: bool = True
    message: str | None = None
    error: Exception | None = None
    calls: list[JSONValue] = field(default_factory=list)

    def __call__(self, context: ValidationContext, instance: JSONValue) -> FixedLogic:
        self.calls.append(instance)
        if self.error is not None:
            raise self.error
        return FixedLogic(self.verdict, self.message)


__all__ = ["FixedLogic", "RecordingBuilder", "make_context"]
