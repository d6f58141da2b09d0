"""
schema-engine — built-in keyword vocabulary

File: src/schema_engine/keywords/__init__.py
Last updated: 2026-10-19

Purpose
- Draft-03 keyword builders and the table that registers them in canonical order.

What should be included in this file
- ``BUILTIN_KEYWORDS``: (name, applicable types, builder) in registration order.
- ``register_builtin_keywords`` to populate any mutable registry.

Functional requirements
- Builders check constraint values eagerly and raise on malformed ones.
- Keyword logic is a pure function of (context, report).
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Final

from schema_engine.keywords.arrays import (
    build_additional_items,
    build_items,
    build_max_items,
    build_min_items,
    build_unique_items,
)
from schema_engine.keywords.formats import FORMATS, build_format
from schema_engine.keywords.generic import (
    build_dependencies,
    build_disallow,
    build_enum,
    build_extends,
    build_ref,
    build_type,
)
from schema_engine.keywords.numeric import build_divisible_by, build_maximum, build_minimum
from schema_engine.keywords.objects import (
    build_additional_properties,
    build_pattern_properties,
    build_properties,
)
from schema_engine.keywords.strings import build_max_length, build_min_length, build_pattern
from schema_engine.registry import KeywordBuilder, KeywordRegistry
from schema_engine.tree.node_type import ALL_TYPES, NUMERIC_TYPES, NodeType

_ARRAY: Final[frozenset[NodeType]] = frozenset({NodeType.ARRAY})
_OBJECT: Final[frozenset[NodeType]] = frozenset({NodeType.OBJECT})
_STRING: Final[frozenset[NodeType]] = frozenset({NodeType.STRING})

BUILTIN_KEYWORDS: Final[tuple[tuple[str, frozenset[NodeType], KeywordBuilder], ...]] = (
    ("additionalItems", _ARRAY, build_additional_items),
    ("additionalProperties", _OBJECT, build_additional_properties),
    ("dependencies", ALL_TYPES, build_dependencies),
    ("disallow", ALL_TYPES, build_disallow),
    ("divisibleBy", NUMERIC_TYPES, build_divisible_by),
    ("enum", ALL_TYPES, build_enum),
    ("extends", ALL_TYPES, build_extends),
    ("format", ALL_TYPES, build_format),
    ("items", _ARRAY, build_items),
    ("maximum", NUMERIC_TYPES, build_maximum),
    ("maxItems", _ARRAY, build_max_items),
    ("maxLength", _STRING, build_max_length),
    ("minimum", NUMERIC_TYPES, build_minimum),
    ("minItems", _ARRAY, build_min_items),
    ("minLength", _STRING, build_min_length),
    ("pattern", _STRING, build_pattern),
    ("patternProperties", _OBJECT, build_pattern_properties),
    ("properties", _OBJECT, build_properties),
    ("type", ALL_TYPES, build_type),
    ("uniqueItems", _ARRAY, build_unique_items),
    ("$ref", ALL_TYPES, build_ref),
)


def register_builtin_keywords(
    registry: KeywordRegistry,
    *,
    only: Iterable[str] | None = None,
) -> KeywordRegistry:
    """Register the built-in vocabulary (or the ``only`` subset) in canonical order."""

    selected = None if only is None else frozenset(only)
    for name, types, builder in BUILTIN_KEYWORDS:
        if selected is None or name in selected:
            registry.register(name, types, builder)
    return registry


__all__ = ["BUILTIN_KEYWORDS", "FORMATS", "register_builtin_keywords"]
