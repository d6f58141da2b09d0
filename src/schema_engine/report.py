"""
schema-engine — diagnostic reports

File: src/schema_engine/report.py
Last updated: 2026-10-19

Purpose
- Ordered, severity-tagged diagnostic log produced by one validation pass.
- Syntax-checking variant that remembers flagged paths and answers ancestor queries.
- Post-pass that gathers construction failures from a finished report.

What should be included in this file
- ``Diagnostic`` value type with a stable JSON-safe export.
- ``ListReport``: append-only sink with a log-level threshold and in-order injection.
- ``SyntaxReport``: ``mark_ignored`` / ``is_ignored`` over any path with ``is_parent_of``.
- ``collect_schema_faults``: copy a report forward, optionally collapsing repeated schema
  faults.

Functional requirements
- ``add_message`` appends unconditionally; ``log`` honours the report threshold.
- The ignored-path set only grows during a pass.

Non-functional requirements
- Deterministic ordering; no global state.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Literal

from schema_engine.tree.node_type import JSONValue
from schema_engine.tree.pointer import JsonPointer, SchemaLocation, TreePath

DiagnosticDomain = Literal["validation", "construction", "ref"]


class LogLevel(IntEnum):
    """Diagnostic severities; values line up with stdlib ``logging`` levels."""

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    FATAL = 50

    @classmethod
    def parse(cls, value: object) -> LogLevel:
        if isinstance(value, LogLevel):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        allowed = ", ".join(item.name for item in cls)
        raise ValueError(f"invalid log level {value!r}; expected one of: {allowed}")


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One message about one instance location."""

    level: LogLevel
    message: str
    path: JsonPointer = JsonPointer.ROOT
    keyword: str | None = None
    schema: SchemaLocation | None = None
    domain: DiagnosticDomain = "validation"
    details: Mapping[str, JSONValue] = field(default_factory=dict)

    def to_dict(self) -> dict[str, JSONValue]:
        """Stable-key JSON-safe export."""

        return {
            "level": self.level.name.lower(),
            "domain": self.domain,
            "path": str(self.path),
            "keyword": self.keyword,
            "schema": str(self.schema) if self.schema is not None else None,
            "message": self.message,
            "details": {key: self.details[key] for key in sorted(self.details)},
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"), ensure_ascii=False)

    def __str__(self) -> str:
        location = str(self.path) or "<root>"
        return f"{location}: {self.message}"


class ListReport:
    """Ordered, append-only diagnostic sink."""

    __slots__ = ("_log_level", "_messages")

    def __init__(self, *, log_level: LogLevel | str = LogLevel.INFO) -> None:
        self._log_level = LogLevel.parse(log_level)
        self._messages: list[Diagnostic] = []

    @property
    def log_level(self) -> LogLevel:
        return self._log_level

    @property
    def messages(self) -> tuple[Diagnostic, ...]:
        return tuple(self._messages)

    @property
    def is_success(self) -> bool:
        return all(message.level < LogLevel.ERROR for message in self._messages)

    def add_message(self, message: Diagnostic) -> None:
        if not isinstance(message, Diagnostic):
            raise TypeError(f"expected Diagnostic, got {type(message).__name__}")
        self._messages.append(message)

    def log(self, message: Diagnostic) -> None:
        """Append ``message`` when its level reaches this report's threshold."""

        if message.level >= self._log_level:
            self.add_message(message)

    def inject_into(self, other: ListReport) -> None:
        """Fold every accumulated message into ``other``, in original order."""

        for message in self._messages:
            other.log(message)

    def to_dicts(self) -> list[dict[str, JSONValue]]:
        return [message.to_dict() for message in self._messages]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(tuple(self._messages))

    def __len__(self) -> int:
        return len(self._messages)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(log_level={self._log_level.name}, messages={len(self)})"


class SyntaxReport(ListReport):
    """Report that also tracks regions already known to be broken."""

    __slots__ = ("_ignored",)

    def __init__(self) -> None:
        super().__init__(log_level=LogLevel.DEBUG)
        self._ignored: dict[TreePath, None] = {}

    @property
    def ignored_paths(self) -> tuple[TreePath, ...]:
        return tuple(self._ignored)

    def mark_ignored(self, path: TreePath) -> None:
        if not isinstance(path, TreePath):
            raise TypeError(f"{type(path).__name__} does not support ancestor comparison")
        self._ignored.setdefault(path, None)

    def is_ignored(self, target: object) -> bool:
        return any(path.is_parent_of(target) for path in self._ignored)


def collect_schema_faults(
    source: Iterable[Diagnostic],
    target: ListReport,
    *,
    collapse_repeats: bool = False,
) -> SyntaxReport:
    """Copy ``source`` into ``target`` in order and return its construction failures.

    With ``collapse_repeats``, a construction failure at or under a schema location that
    already failed earlier in ``source`` is left out of both ``target`` and the result.
    """

    faults = SyntaxReport()
    for message in source:
        location = message.schema
        if message.domain == "construction" and location is not None:
            if collapse_repeats and faults.is_ignored(location):
                continue
            faults.mark_ignored(location)
            faults.add_message(message)
        target.log(message)
    return faults


__all__ = [
    "Diagnostic",
    "DiagnosticDomain",
    "ListReport",
    "LogLevel",
    "SyntaxReport",
    "collect_schema_faults",
]
