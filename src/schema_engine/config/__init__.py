"""
schema-engine config package public API.

File: src/schema_engine/config/__init__.py
Last updated: 2026-10-19

Purpose
- Export config loading/validation entrypoints and public error types.

Functional requirements
- Support loading from ``schema_engine.toml`` + ``SCHEMA_ENGINE_`` env overrides.
- Fail fast with clear structured validation/load errors.
"""

from schema_engine.config.loader import (
    ConfigLoadError,
    dump_effective_config,
    env_name_for_path,
    load_config,
)
from schema_engine.config.schema import (
    CONFIG_SCHEMA,
    DEFAULT_CONFIG,
    ConfigSchemaVersion,
    ConfigValidationError,
    ConfigValidationIssue,
    ConfigValidationResult,
    SchemaEngineConfig,
    assert_valid_config,
    default_config,
    merge_config,
    migration_guidance,
    validate_config,
)

__all__ = [
    "CONFIG_SCHEMA",
    "ConfigLoadError",
    "ConfigSchemaVersion",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "DEFAULT_CONFIG",
    "SchemaEngineConfig",
    "assert_valid_config",
    "default_config",
    "dump_effective_config",
    "env_name_for_path",
    "load_config",
    "merge_config",
    "migration_guidance",
    "validate_config",
]
