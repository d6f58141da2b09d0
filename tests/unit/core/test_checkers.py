"""
schema-engine — unit tests for the checker algebra

File: tests/unit/core/test_checkers.py
Last updated: 2026-10-19

Purpose
- AND-composition without short-circuit, idempotence, and builder-result normalization.
"""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from schema_engine.checkers import (
    ALWAYS_TRUE,
    All,
    AlwaysFalse,
    AlwaysTrue,
    Single,
    all_of,
    as_checker,
    evaluate,
)
from schema_engine.report import Diagnostic, ListReport, LogLevel

from . import FixedLogic, make_context


def _single(verdict: bool, message: str | None = None) -> Single:
    context = make_context({}, 1)
    return Single(keyword="fixed", logic=FixedLogic(verdict, message), context=context)


def test_always_true_reports_nothing() -> None:
    report = ListReport()
    assert evaluate(AlwaysTrue(), report) is True
    assert len(report) == 0


def test_always_false_appends_bound_diagnostic_every_time() -> None:
    diagnostic = Diagnostic(level=LogLevel.ERROR, message="broken")
    checker = AlwaysFalse(diagnostic)
    report = ListReport()

    assert evaluate(checker, report) is False
    assert evaluate(checker, report) is False
    assert list(report) == [diagnostic, diagnostic]


def test_always_false_without_diagnostic_is_silent() -> None:
    report = ListReport()
    assert evaluate(AlwaysFalse(), report) is False
    assert len(report) == 0


def test_single_rejects_non_boolean_verdicts() -> None:
    class Sloppy:
        def evaluate(self, context: object, report: ListReport) -> object:
            return 1

    checker = Single("sloppy", Sloppy(), make_context({}, 1))  # type: ignore[arg-type]
    with pytest.raises(TypeError, match="expected bool"):
        evaluate(checker, ListReport())


def test_evaluate_rejects_foreign_objects() -> None:
    with pytest.raises(TypeError, match="is not a checker"):
        evaluate(object(), ListReport())  # type: ignore[arg-type]


def test_all_of_shapes() -> None:
    first, second = _single(True), _single(False)
    assert all_of([]) is ALWAYS_TRUE
    assert all_of([first]) is first
    assert all_of([first, second]) == All((first, second))


def test_as_checker_wraps_logic_and_passes_checkers_through() -> None:
    context = make_context({}, 1)
    logic = FixedLogic(True)
    assert as_checker("k", logic, context) == Single("k", logic, context)
    assert as_checker("k", ALWAYS_TRUE, context) is ALWAYS_TRUE
    with pytest.raises(TypeError, match="expected a checker or keyword logic"):
        as_checker("k", 42, context)


_MEMBER = st.tuples(st.booleans(), st.one_of(st.none(), st.sampled_from(["a", "b", "c"])))


@given(members=st.lists(_MEMBER, min_size=2, max_size=6))
@settings(max_examples=100, deadline=None)
def test_all_is_and_of_members_and_union_of_their_diagnostics(
    members: list[tuple[bool, str | None]],
) -> None:
    checkers = tuple(_single(verdict, message) for verdict, message in members)

    composite_report = ListReport(log_level=LogLevel.DEBUG)
    verdict = evaluate(All(checkers), composite_report)

    separate_report = ListReport(log_level=LogLevel.DEBUG)
    separate = [evaluate(checker, separate_report) for checker in checkers]

    assert verdict is all(separate)
    assert composite_report.messages == separate_report.messages
    assert [item.message for item in composite_report] == [
        message for _, message in members if message is not None
    ]


@given(members=st.lists(_MEMBER, min_size=1, max_size=5))
@settings(max_examples=50, deadline=None)
def test_evaluation_is_idempotent(members: list[tuple[bool, str | None]]) -> None:
    checker = all_of([_single(verdict, message) for verdict, message in members])

    first, second = ListReport(), ListReport()
    assert evaluate(checker, first) is evaluate(checker, second)
    assert first.messages == second.messages
