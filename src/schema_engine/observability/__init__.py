"""Public observability primitives: opt-in structured logging and correlation fields."""

from schema_engine.observability.logging import (
    LoggingConfig,
    LoggingHandle,
    correlation_scope,
    flush_logging,
    get_active_logging_handle,
    get_correlation_context,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    "LoggingConfig",
    "LoggingHandle",
    "correlation_scope",
    "flush_logging",
    "get_active_logging_handle",
    "get_correlation_context",
    "setup_logging",
    "shutdown_logging",
]
