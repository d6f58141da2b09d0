"""
schema-engine — unit tests for tree paths

File: tests/unit/tree/test_pointer.py
Last updated: 2026-10-19

Purpose
- JSON pointer parsing/escaping, ancestor tests and document resolution.
"""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from schema_engine.errors import PointerResolutionError, RefResolutionError
from schema_engine.tree.pointer import JsonPointer, SchemaLocation, TreePath


def test_parse_and_render_with_escapes() -> None:
    pointer = JsonPointer.parse("/a~1b/c~0d/0")
    assert pointer.tokens == ("a/b", "c~d", "0")
    assert str(pointer) == "/a~1b/c~0d/0"
    assert JsonPointer.parse("") is JsonPointer.ROOT
    assert str(JsonPointer.ROOT) == ""


@pytest.mark.parametrize("text", ["a/b", "/a~2", "/trailing~"])
def test_parse_rejects_malformed_pointers(text: str) -> None:
    with pytest.raises(ValueError):
        JsonPointer.parse(text)


def test_append_accepts_ints_and_division_operator() -> None:
    pointer = JsonPointer.ROOT.append("items", 3)
    assert pointer == JsonPointer.of("items", "3")
    assert pointer / "x" == JsonPointer(("items", "3", "x"))
    assert pointer.parent == JsonPointer.of("items")
    assert JsonPointer.ROOT.parent is JsonPointer.ROOT


def test_ancestor_test_is_non_strict_prefix() -> None:
    marked = JsonPointer.parse("/a/b")
    assert marked.is_parent_of(JsonPointer.parse("/a/b"))
    assert marked.is_parent_of(JsonPointer.parse("/a/b/c"))
    assert not marked.is_parent_of(JsonPointer.parse("/a/x"))
    assert not marked.is_parent_of(JsonPointer.parse("/a"))
    assert not marked.is_parent_of(JsonPointer.parse("/a/bc"))
    assert not marked.is_parent_of("/a/b/c")
    assert JsonPointer.ROOT.is_parent_of(marked)


def test_resolve_walks_objects_and_arrays() -> None:
    document = {"a": [{"b": 1}, {"b": 2}], "x/y": True}
    assert JsonPointer.parse("/a/1/b").resolve(document) == 2
    assert JsonPointer.parse("/x~1y").resolve(document) is True
    assert JsonPointer.ROOT.resolve(document) is document


@pytest.mark.parametrize("text", ["/missing", "/a/5", "/a/01", "/a/-", "/a/0/b/c"])
def test_resolve_failures_raise_pointer_resolution_error(text: str) -> None:
    document = {"a": [{"b": 1}]}
    with pytest.raises(PointerResolutionError) as excinfo:
        JsonPointer.parse(text).resolve(document)
    assert isinstance(excinfo.value, RefResolutionError)


def test_schema_location_requires_same_document() -> None:
    base = SchemaLocation("a.json", JsonPointer.parse("/properties"))
    assert base.is_parent_of(base.append("x", "type"))
    assert not base.is_parent_of(SchemaLocation("b.json", JsonPointer.parse("/properties/x")))
    assert str(base) == "a.json#/properties"
    assert isinstance(base, TreePath)


def test_pointers_sort_deterministically() -> None:
    pointers = [JsonPointer.parse(text) for text in ["/b", "/a/c", "", "/a"]]
    assert [str(item) for item in sorted(pointers)] == ["", "/a", "/a/c", "/b"]


@given(tokens=st.lists(st.text(max_size=6), max_size=5))
@settings(max_examples=100, deadline=None)
def test_rendered_pointer_parses_back(tokens: list[str]) -> None:
    pointer = JsonPointer(tuple(tokens))
    assert JsonPointer.parse(str(pointer)) == pointer
