"""
schema-engine — constraint checker algebra

File: src/schema_engine/checkers.py
Last updated: 2026-10-19

Purpose
- Closed set of checker variants and the single function that evaluates them.

What should be included in this file
- ``AlwaysTrue``, ``AlwaysFalse``, ``Single``, ``All`` and the container wrapper.
- ``KeywordLogic``: the narrow capability interface keyword implementations satisfy.

Functional requirements
- ``All`` evaluates every member; its verdict is the AND of member verdicts.
- ``AlwaysFalse`` appends its bound diagnostic (when it carries one) on every evaluation.
- Evaluating a checker twice yields the same verdict and the same diagnostics.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, Protocol, TypeAlias, runtime_checkable

from schema_engine.containers import ChildSchemaFn, validate_children
from schema_engine.report import Diagnostic, ListReport
from schema_engine.tree.node_type import NodeType

if TYPE_CHECKING:
    from schema_engine.context import ValidationContext


@runtime_checkable
class KeywordLogic(Protocol):
    """Keyword-specific evaluation: pure function of context and report."""

    def evaluate(self, context: ValidationContext, report: ListReport) -> bool: ...


@dataclass(frozen=True, slots=True)
class AlwaysTrue:
    """Accepts everything and reports nothing."""


@dataclass(frozen=True, slots=True)
class AlwaysFalse:
    """Rejects everything; appends ``diagnostic`` when one is bound."""

    diagnostic: Diagnostic | None = None


@dataclass(frozen=True, slots=True)
class Single:
    """One keyword's logic bound to the context it was built from."""

    keyword: str
    logic: KeywordLogic
    context: ValidationContext


@dataclass(frozen=True, slots=True)
class All:
    """AND-composite over member checkers, evaluated in order without short-circuit."""

    members: tuple[Checker, ...]


@dataclass(frozen=True, slots=True)
class ContainerChecker:
    """Node-level checker plus recursion into array elements or object members."""

    kind: NodeType
    node: Checker
    context: ValidationContext
    child_schemas: ChildSchemaFn
    dispatch: Callable[[ValidationContext], Checker]


Checker: TypeAlias = AlwaysTrue | AlwaysFalse | Single | All | ContainerChecker
CHECKER_TYPES: Final[tuple[type, ...]] = (AlwaysTrue, AlwaysFalse, Single, All, ContainerChecker)

ALWAYS_TRUE: Final[AlwaysTrue] = AlwaysTrue()


def evaluate(checker: Checker, report: ListReport) -> bool:
    """Evaluate ``checker``, appending its diagnostics to ``report``."""

    match checker:
        case AlwaysTrue():
            return True
        case AlwaysFalse(diagnostic=diagnostic):
            if diagnostic is not None:
                report.log(diagnostic)
            return False
        case Single(keyword=name, logic=logic, context=context):
            verdict = logic.evaluate(context, report)
            if not isinstance(verdict, bool):
                raise TypeError(
                    f"keyword {name!r} logic returned {type(verdict).__name__}, expected bool"
                )
            return verdict
        case All(members=members):
            verdicts = [evaluate(member, report) for member in members]
            return all(verdicts)
        case ContainerChecker(node=node):
            node_verdict = evaluate(node, report)
            children_verdict = validate_children(checker, report, evaluate)
            return node_verdict and children_verdict
        case _:
            raise TypeError(f"{type(checker).__name__} is not a checker")


def as_checker(keyword: str, built: object, context: ValidationContext) -> Checker:
    """Normalize a builder result: checkers pass through, keyword logic is wrapped."""

    if isinstance(built, CHECKER_TYPES):
        return built  # type: ignore[return-value]
    if isinstance(built, KeywordLogic):
        return Single(keyword=keyword, logic=built, context=context)
    raise TypeError(
        f"builder for keyword {keyword!r} returned {type(built).__name__}, "
        "expected a checker or keyword logic"
    )


def all_of(checkers: list[Checker] | tuple[Checker, ...]) -> Checker:
    """Compose built checkers: none -> AlwaysTrue, one -> itself, more -> All."""

    if not checkers:
        return ALWAYS_TRUE
    if len(checkers) == 1:
        return checkers[0]
    return All(tuple(checkers))


__all__ = [
    "ALWAYS_TRUE",
    "All",
    "AlwaysFalse",
    "AlwaysTrue",
    "CHECKER_TYPES",
    "Checker",
    "ContainerChecker",
    "KeywordLogic",
    "Single",
    "all_of",
    "as_checker",
    "evaluate",
]
