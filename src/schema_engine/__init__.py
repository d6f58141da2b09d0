"""
schema-engine — package root

File: src/schema_engine/__init__.py
Last updated: 2026-10-19

Purpose
- Validator dispatch and composition engine for JSON-like documents and draft-03 style
  schemas. Defines the public entry points and package metadata.

Functional requirements
- Must not have side effects at import time (no config loading, no logging init, the default
  keyword registry stays open until first use).

Key interfaces / contracts
- ``validate(schema, instance) -> (bool, report)``
- ``register_keyword(name, applicable_types, builder)``
"""

from schema_engine.checkers import KeywordLogic
from schema_engine.engine import ValidationResult, Validator, validate
from schema_engine.errors import (
    KeywordConstructionError,
    RefResolutionError,
    RegistryFrozenError,
    SchemaEngineError,
)
from schema_engine.options import EngineOptions
from schema_engine.registry import KeywordRegistry, default_registry, keyword, register_keyword
from schema_engine.report import Diagnostic, ListReport, LogLevel, SyntaxReport
from schema_engine.tree import JsonPointer, NodeType, SchemaLocation

__version__ = "0.1.0"

__all__ = [
    "Diagnostic",
    "EngineOptions",
    "JsonPointer",
    "KeywordConstructionError",
    "KeywordLogic",
    "KeywordRegistry",
    "ListReport",
    "LogLevel",
    "NodeType",
    "RefResolutionError",
    "RegistryFrozenError",
    "SchemaEngineError",
    "SchemaLocation",
    "SyntaxReport",
    "ValidationResult",
    "Validator",
    "__version__",
    "default_registry",
    "keyword",
    "register_keyword",
    "validate",
]
