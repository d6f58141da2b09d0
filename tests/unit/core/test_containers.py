"""
schema-engine — unit tests for container recursion

File: tests/unit/core/test_containers.py
Last updated: 2026-10-19

Purpose
- Child-schema derivation for arrays and objects, and serial/parallel child validation.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

import pytest

from schema_engine.checkers import evaluate
from schema_engine.containers import array_child_schemas, iter_children, object_child_schemas
from schema_engine.dispatch import get_validator
from schema_engine.options import EngineOptions

from . import make_context


@pytest.mark.parametrize(
    ("schema", "index", "expected"),
    [
        ({"items": {"type": "string"}}, 4, ((("items",), {"type": "string"}),)),
        ({"items": [{"a": 1}, {"b": 2}]}, 1, ((("items", 1), {"b": 2}),)),
        (
            {"items": [{"a": 1}], "additionalItems": {"c": 3}},
            2,
            ((("additionalItems",), {"c": 3}),),
        ),
        ({"items": [{"a": 1}], "additionalItems": False}, 2, ()),
        ({"items": [{"a": 1}]}, 1, ()),
        ({"additionalItems": {"c": 3}}, 0, ()),
        ({}, 0, ()),
    ],
)
def test_array_child_schemas(schema: dict, index: int, expected: tuple) -> None:
    assert array_child_schemas(schema, index) == expected


def test_object_child_schemas_collect_properties_and_patterns() -> None:
    schema = {
        "properties": {"id": {"type": "integer"}},
        "patternProperties": {"^i": {"minimum": 0}, "d$": {"maximum": 9}, "^x": {}},
        "additionalProperties": {"type": "string"},
    }

    assert object_child_schemas(schema, "id") == (
        (("properties", "id"), {"type": "integer"}),
        (("patternProperties", "^i"), {"minimum": 0}),
        (("patternProperties", "d$"), {"maximum": 9}),
    )
    assert object_child_schemas(schema, "name") == (
        (("additionalProperties",), {"type": "string"}),
    )


def test_object_child_without_matching_schema_is_skipped() -> None:
    assert object_child_schemas({"properties": {"a": {}}}, "b") == ()
    assert object_child_schemas({"additionalProperties": False}, "b") == ()


def test_iter_children_orders_elements_and_members() -> None:
    assert list(iter_children(["a", "b"])) == [(0, "a"), (1, "b")]
    assert list(iter_children({"y": 1, "x": 2})) == [("y", 1), ("x", 2)]
    assert list(iter_children("text")) == []


def test_empty_containers_pass_with_no_child_checks() -> None:
    for instance in ([], {}):
        context = make_context({"items": {"type": "string"}, "properties": {}}, instance)
        assert evaluate(get_validator(context), context.report) is True
        assert len(context.report) == 0


def test_child_paths_and_schema_locations_are_tracked() -> None:
    schema = {"properties": {"tags": {"items": {"type": "string"}}}}
    context = make_context(schema, {"tags": ["a", 1, "c", None]})

    assert evaluate(get_validator(context), context.report) is False
    assert [(str(item.path), str(item.schema)) for item in context.report] == [
        ("/tags/1", "#/properties/tags/items"),
        ("/tags/3", "#/properties/tags/items"),
    ]


def test_every_child_schema_applies_to_a_member() -> None:
    schema = {
        "properties": {"count": {"type": "integer"}},
        "patternProperties": {"^c": {"minimum": 10}},
    }
    context = make_context(schema, {"count": 2.5})

    assert evaluate(get_validator(context), context.report) is False
    assert [item.keyword for item in context.report] == ["type", "minimum"]


def _fan_out_schema() -> dict:
    return {
        "items": {
            "properties": {
                "n": {"type": "integer", "minimum": 0},
                "broken": {"minLength": -1},
            },
            "additionalProperties": False,
        }
    }


def _fan_out_instance() -> list:
    return [
        {"n": index - 3, "broken": "x", **({"extra": True} if index % 4 == 0 else {})}
        for index in range(12)
    ]


def test_parallel_fan_out_matches_serial_output() -> None:
    serial = make_context(_fan_out_schema(), _fan_out_instance())
    serial_verdict = evaluate(get_validator(serial), serial.report)

    options = EngineOptions(max_workers=4, parallel_min_children=2)
    with ThreadPoolExecutor(max_workers=4) as executor:
        parallel = replace(
            make_context(_fan_out_schema(), _fan_out_instance(), options=options),
            executor=executor,
        )
        parallel_verdict = evaluate(get_validator(parallel), parallel.report)

    assert parallel_verdict is serial_verdict is False
    assert parallel.report.to_dicts() == serial.report.to_dicts()
    construction = [str(item.path) for item in parallel.report if item.domain == "construction"]
    assert construction == [f"/{index}/broken" for index in range(12)]


def test_below_threshold_children_run_serially() -> None:
    options = EngineOptions(max_workers=2, parallel_min_children=50)

    class ExplodingExecutor(ThreadPoolExecutor):
        def submit(self, *args: object, **kwargs: object):  # type: ignore[override]
            raise AssertionError("executor should not be used")

    with ExplodingExecutor(max_workers=1) as executor:
        base = make_context({"items": {}}, [1, 2, 3], options=options)
        context = replace(base, executor=executor)
        assert evaluate(get_validator(context), context.report) is True
