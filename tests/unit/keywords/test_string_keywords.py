"""
schema-engine — unit tests for string keywords

File: tests/unit/keywords/test_string_keywords.py
Last updated: 2026-10-19
"""

from __future__ import annotations

import pytest

from . import messages, run


@pytest.mark.parametrize(
    ("schema", "instance", "valid"),
    [
        ({"minLength": 2}, "ab", True),
        ({"minLength": 2}, "a", False),
        ({"maxLength": 3}, "abc", True),
        ({"maxLength": 3}, "abcd", False),
        ({"minLength": 1.0}, "x", True),
        ({"minLength": 2}, "éè", True),
        ({"pattern": "^[a-z]+$"}, "abc", True),
        ({"pattern": "^[a-z]+$"}, "abc1", False),
        ({"pattern": "b"}, "abc", True),
    ],
)
def test_string_constraints(schema: dict, instance: str, valid: bool) -> None:
    assert run(schema, instance)[0] is valid


def test_length_message_reports_found_length() -> None:
    assert messages({"minLength": 3}, "ab") == [
        "string is shorter than the minimum length 3 (found 2)"
    ]
    assert messages({"maxLength": 1}, "ab") == [
        "string is longer than the maximum length 1 (found 2)"
    ]


def test_pattern_message_and_details() -> None:
    valid, diagnostics = run({"pattern": "^x"}, "y")
    assert valid is False
    (diagnostic,) = diagnostics
    assert diagnostic.message == "string does not match pattern '^x'"
    assert diagnostic.details["pattern"] == "^x"


def test_string_keywords_ignore_other_kinds() -> None:
    assert run({"minLength": 5, "pattern": "^z"}, 12) == (True, [])


@pytest.mark.parametrize(
    "schema",
    [{"minLength": -1}, {"maxLength": "3"}, {"minLength": 1.5}, {"pattern": "("}, {"pattern": 3}],
)
def test_malformed_string_constraints_fail_construction(schema: dict) -> None:
    valid, diagnostics = run(schema, "abc")
    assert valid is False
    assert [item.domain for item in diagnostics] == ["construction"]
