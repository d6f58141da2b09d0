"""
schema-engine — configuration schema and validation

File: src/schema_engine/config/schema.py
Last updated: 2026-10-19

Purpose
- Authoritative configuration defaults, the schema describing them, and validation that
  reports structured issues.

What should be included in this file
- Schema versioning and migration guidance.
- ``CONFIG_SCHEMA`` (draft-03 style) checked by the engine itself.
- Deterministic deep-merge helpers.

Functional requirements
- Validate config payloads and return structured errors (field path + message).
- Unknown sections and keys are rejected.

Non-functional requirements
- Keep rules deterministic and easy to audit.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Final, Literal, TypedDict

from schema_engine.constants import (
    CONFIG_SCHEMA_VERSION,
    DEFAULT_MAX_WORKERS,
    DEFAULT_PARALLEL_MIN_CHILDREN,
    MAX_WORKERS_LIMIT,
)
from schema_engine.engine import validate
from schema_engine.errors import SchemaEngineError
from schema_engine.registry import FrozenKeywordRegistry, builtin_registry
from schema_engine.report import LogLevel

ConfigSchemaVersion: Final[int] = CONFIG_SCHEMA_VERSION


class MetaConfig(TypedDict):
    schema_version: int


class EngineConfig(TypedDict):
    max_workers: int
    parallel_min_children: int
    suppress_repeated_schema_faults: bool
    report_log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "FATAL"]


class ObservabilityConfig(TypedDict):
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    log_format: Literal["json", "text"]
    log_file: str
    log_to_stderr: bool


class SchemaEngineConfig(TypedDict):
    meta: MetaConfig
    engine: EngineConfig
    observability: ObservabilityConfig


DEFAULT_CONFIG: Final[SchemaEngineConfig] = {
    "meta": {
        "schema_version": ConfigSchemaVersion,
    },
    "engine": {
        "max_workers": DEFAULT_MAX_WORKERS,
        "parallel_min_children": DEFAULT_PARALLEL_MIN_CHILDREN,
        "suppress_repeated_schema_faults": False,
        "report_log_level": "INFO",
    },
    "observability": {
        "log_level": "WARNING",
        "log_format": "json",
        "log_file": "",
        "log_to_stderr": True,
    },
}

CONFIG_SCHEMA: Final[Mapping[str, object]] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "meta": {
            "type": "object",
            "required": True,
            "additionalProperties": False,
            "properties": {
                "schema_version": {"type": "integer", "required": True, "minimum": 1},
            },
        },
        "engine": {
            "type": "object",
            "required": True,
            "additionalProperties": False,
            "properties": {
                "max_workers": {
                    "type": "integer",
                    "required": True,
                    "minimum": 1,
                    "maximum": MAX_WORKERS_LIMIT,
                },
                "parallel_min_children": {"type": "integer", "required": True, "minimum": 1},
                "suppress_repeated_schema_faults": {"type": "boolean", "required": True},
                "report_log_level": {
                    "type": "string",
                    "required": True,
                    "enum": [level.name for level in LogLevel],
                },
            },
        },
        "observability": {
            "type": "object",
            "required": True,
            "additionalProperties": False,
            "properties": {
                "log_level": {
                    "type": "string",
                    "required": True,
                    "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                },
                "log_format": {"type": "string", "required": True, "enum": ["json", "text"]},
                "log_file": {"type": "string", "required": True},
                "log_to_stderr": {"type": "boolean", "required": True},
            },
        },
    },
}


@dataclass(frozen=True, slots=True)
class ConfigValidationIssue:
    """Single structured validation failure."""

    path: str
    message: str


@dataclass(frozen=True, slots=True)
class ConfigValidationResult:
    """Validation result with normalized config when no issues were found."""

    config: dict[str, Any] | None
    issues: tuple[ConfigValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.config is not None and not self.issues


class ConfigValidationError(SchemaEngineError, ValueError):
    """Raised when strict config validation fails."""

    def __init__(self, issues: Sequence[ConfigValidationIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"invalid config:\n{rendered}")


def default_config() -> SchemaEngineConfig:
    """Return a deep copy of the built-in defaults."""

    return copy.deepcopy(DEFAULT_CONFIG)


def migration_guidance(found_version: int) -> str:
    if found_version < ConfigSchemaVersion:
        return (
            f"schema version {found_version} is older than supported {ConfigSchemaVersion}; "
            "upgrade schema_engine.toml to the current schema"
        )
    if found_version > ConfigSchemaVersion:
        return (
            f"schema version {found_version} is newer than supported {ConfigSchemaVersion}; "
            "upgrade the schema-engine runtime"
        )
    return "schema version is current"


def merge_config(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """Deterministically deep-merge ``overlay`` onto ``base``."""

    merged = _deep_copy_mapping(base)
    _merge_into(merged, overlay)
    return merged


def validate_config(config: Mapping[str, object] | object) -> ConfigValidationResult:
    """Validate ``config`` against ``CONFIG_SCHEMA`` and return issues in report order."""

    if not isinstance(config, Mapping):
        issue = ConfigValidationIssue("<root>", f"expected object, got {type(config).__name__}")
        return ConfigValidationResult(config=None, issues=(issue,))

    valid, report = validate(CONFIG_SCHEMA, config, registry=_config_registry())
    issues = [
        ConfigValidationIssue(path=_dotted(message.path.tokens), message=message.message)
        for message in report
        if message.level >= LogLevel.ERROR
    ]

    if valid:
        meta = config.get("meta")
        version = meta.get("schema_version") if isinstance(meta, Mapping) else None
        if isinstance(version, int) and version != ConfigSchemaVersion:
            issues.append(ConfigValidationIssue("meta.schema_version", migration_guidance(version)))

    if issues or not valid:
        return ConfigValidationResult(config=None, issues=tuple(issues))
    return ConfigValidationResult(config=_deep_copy_mapping(config), issues=())


def assert_valid_config(config: Mapping[str, object] | object) -> dict[str, Any]:
    """Validate config and raise ``ConfigValidationError`` on failure."""

    result = validate_config(config)
    if result.config is None:
        raise ConfigValidationError(result.issues)
    return result.config


@lru_cache(maxsize=1)
def _config_registry() -> FrozenKeywordRegistry:
    return builtin_registry().freeze()


def _dotted(tokens: tuple[str, ...]) -> str:
    return ".".join(tokens) if tokens else "<root>"


def _merge_into(target: dict[str, Any], overlay: Mapping[str, object]) -> None:
    for key in sorted(overlay):
        value = overlay[key]
        if isinstance(value, Mapping):
            existing = target.get(key)
            nested = existing if isinstance(existing, dict) else {}
            _merge_into(nested, value)
            target[key] = nested
        else:
            target[key] = copy.deepcopy(value)


def _deep_copy_mapping(value: Mapping[str, object]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key in sorted(value):
        item = value[key]
        out[key] = _deep_copy_mapping(item) if isinstance(item, Mapping) else copy.deepcopy(item)
    return out


__all__ = [
    "CONFIG_SCHEMA",
    "ConfigSchemaVersion",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "DEFAULT_CONFIG",
    "EngineConfig",
    "MetaConfig",
    "ObservabilityConfig",
    "SchemaEngineConfig",
    "assert_valid_config",
    "default_config",
    "merge_config",
    "migration_guidance",
    "validate_config",
]
