"""
schema-engine — unit tests for diagnostic reports

File: tests/unit/core/test_report.py
Last updated: 2026-10-19

Purpose
- Ordered accumulation, log thresholds, injection, ignored-path suppression and the
  schema-fault post-pass.
"""

from __future__ import annotations

import json

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from schema_engine.report import (
    Diagnostic,
    ListReport,
    LogLevel,
    SyntaxReport,
    collect_schema_faults,
)
from schema_engine.tree.pointer import JsonPointer, SchemaLocation


def _diag(message: str, level: LogLevel = LogLevel.ERROR, path: str = "") -> Diagnostic:
    return Diagnostic(level=level, message=message, path=JsonPointer.parse(path))


def test_add_message_is_unconditional_and_log_honours_threshold() -> None:
    report = ListReport(log_level="warning")
    report.add_message(_diag("debug", LogLevel.DEBUG))
    report.log(_diag("info", LogLevel.INFO))
    report.log(_diag("error"))

    assert [item.message for item in report] == ["debug", "error"]
    assert len(report) == 2
    assert not report.is_success


def test_is_success_ignores_sub_error_levels() -> None:
    report = ListReport(log_level=LogLevel.DEBUG)
    report.log(_diag("note", LogLevel.WARNING))
    assert report.is_success


def test_add_message_rejects_non_diagnostics() -> None:
    with pytest.raises(TypeError):
        ListReport().add_message("oops")  # type: ignore[arg-type]


def test_inject_into_preserves_order_and_target_threshold() -> None:
    source = ListReport(log_level=LogLevel.DEBUG)
    for text, level in (("a", LogLevel.ERROR), ("b", LogLevel.DEBUG), ("c", LogLevel.WARNING)):
        source.log(_diag(text, level))
    target = ListReport(log_level=LogLevel.INFO)
    target.log(_diag("existing"))

    source.inject_into(target)

    assert [item.message for item in target] == ["existing", "a", "c"]
    assert len(source) == 3


def test_diagnostic_export_is_json_safe_and_stable() -> None:
    diagnostic = Diagnostic(
        level=LogLevel.ERROR,
        message="too small",
        path=JsonPointer.of("items", 1),
        keyword="minimum",
        schema=SchemaLocation("", JsonPointer.of("items")),
        details={"limit": 5, "found": 3},
    )
    exported = diagnostic.to_dict()
    assert exported == {
        "level": "error",
        "domain": "validation",
        "path": "/items/1",
        "keyword": "minimum",
        "schema": "#/items",
        "message": "too small",
        "details": {"found": 3, "limit": 5},
    }
    assert json.loads(diagnostic.to_json()) == exported
    assert str(diagnostic) == "/items/1: too small"
    assert str(_diag("root")) == "<root>: root"


def test_log_level_parse() -> None:
    assert LogLevel.parse("fatal") is LogLevel.FATAL
    assert LogLevel.parse(LogLevel.INFO) is LogLevel.INFO
    with pytest.raises(ValueError, match="invalid log level"):
        LogLevel.parse("verbose")


def test_ignored_paths_suppress_descendants_only() -> None:
    report = SyntaxReport()
    report.mark_ignored(JsonPointer.parse("/a/b"))

    assert report.is_ignored(JsonPointer.parse("/a/b"))
    assert report.is_ignored(JsonPointer.parse("/a/b/c"))
    assert not report.is_ignored(JsonPointer.parse("/a/x"))
    assert not report.is_ignored(JsonPointer.parse("/a"))
    assert report.log_level is LogLevel.DEBUG


def test_mark_ignored_requires_ancestor_capable_paths() -> None:
    with pytest.raises(TypeError):
        SyntaxReport().mark_ignored("/a/b")  # type: ignore[arg-type]


def _fault(path: str, *schema_tokens: str | int) -> Diagnostic:
    return Diagnostic(
        level=LogLevel.ERROR,
        message="cannot instantiate validator for keyword minimum: KeywordConstructionError",
        path=JsonPointer.parse(path),
        keyword="minimum",
        schema=SchemaLocation().append(*schema_tokens),
        domain="construction",
    )


def test_collect_schema_faults_keeps_every_fault_by_default() -> None:
    source = [_fault("/0", "items"), _diag("plain", path="/0"), _fault("/1", "items")]
    target = ListReport()

    faults = collect_schema_faults(source, target)

    assert list(target) == source
    assert [str(item.path) for item in faults] == ["/0", "/1"]
    assert faults.is_ignored(SchemaLocation().append("items", "minimum"))


def test_collect_schema_faults_can_collapse_repeats_under_a_failed_location() -> None:
    source = [
        _fault("/0", "items"),
        _fault("/1", "items"),
        _fault("/1/0", "items", "items"),
        _diag("plain", path="/2"),
        _fault("/a", "properties", "a"),
    ]
    target = ListReport(log_level=LogLevel.DEBUG)

    faults = collect_schema_faults(source, target, collapse_repeats=True)

    assert [str(item.path) for item in target] == ["/0", "/2", "/a"]
    assert [str(item.path) for item in faults] == ["/0", "/a"]


def test_collect_schema_faults_honours_the_target_threshold() -> None:
    target = ListReport(log_level=LogLevel.ERROR)
    faults = collect_schema_faults([_diag("note", LogLevel.INFO), _fault("", "x")], target)
    assert [item.domain for item in target] == ["construction"]
    assert len(faults) == 1


_TOKENS = st.lists(st.sampled_from(["a", "b", "c"]), max_size=4)


@given(marked=st.lists(_TOKENS, max_size=4), target=_TOKENS, extra=_TOKENS)
@settings(max_examples=200, deadline=None)
def test_suppression_is_transitive_and_monotonic(
    marked: list[list[str]], target: list[str], extra: list[str]
) -> None:
    report = SyntaxReport()
    for tokens in marked:
        report.mark_ignored(JsonPointer(tuple(tokens)))
    pointer = JsonPointer(tuple(target))

    expected = any(tuple(target[: len(tokens)]) == tuple(tokens) for tokens in marked)
    assert report.is_ignored(pointer) is expected
    if expected:
        assert report.is_ignored(pointer.append(*extra))
        report.mark_ignored(JsonPointer(tuple(extra)))
        assert report.is_ignored(pointer)
