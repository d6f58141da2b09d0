"""Stable constants shared across schema-engine modules."""

from __future__ import annotations

from typing import Final

# Schema version of the persisted engine configuration.
CONFIG_SCHEMA_VERSION: Final[int] = 1

# Configuration file and environment override conventions.
DEFAULT_CONFIG_FILE: Final[str] = "schema_engine.toml"
ENV_PREFIX: Final[str] = "SCHEMA_ENGINE_"

# Root logger for the package; modules log through ``logging.getLogger(__name__)``.
ROOT_LOGGER_NAME: Final[str] = "schema_engine"

# Engine defaults.
DEFAULT_MAX_WORKERS: Final[int] = 1
DEFAULT_PARALLEL_MIN_CHILDREN: Final[int] = 8
MAX_WORKERS_LIMIT: Final[int] = 256

__all__ = [
    "CONFIG_SCHEMA_VERSION",
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_MAX_WORKERS",
    "DEFAULT_PARALLEL_MIN_CHILDREN",
    "ENV_PREFIX",
    "MAX_WORKERS_LIMIT",
    "ROOT_LOGGER_NAME",
]
