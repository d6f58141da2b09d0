"""Shared helpers for keyword tests."""

from __future__ import annotations

from schema_engine import validate
from schema_engine.report import Diagnostic
from schema_engine.tree.node_type import JSONValue


def run(schema: JSONValue, instance: JSONValue) -> tuple[bool, list[Diagnostic]]:
    valid, report = validate(schema, instance)
    return valid, list(report)


def messages(schema: JSONValue, instance: JSONValue) -> list[str]:
    return [item.message for item in run(schema, instance)[1]]


__all__ = ["messages", "run"]
