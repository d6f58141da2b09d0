"""
schema-engine — structured logging

File: src/schema_engine/observability/logging.py
Last updated: 2026-10-19

Purpose
- Opt-in, queue-backed logging for the ``schema_engine`` logger with JSON-lines or plain-text
  output and contextvar-scoped correlation fields.

Functional requirements
- Library modules only call ``logging.getLogger(__name__)``; nothing here runs at import time.
- ``setup_logging`` replaces any earlier setup; ``shutdown_logging`` drains and closes sinks.
- Records emitted inside ``correlation_scope`` carry its fields (e.g. ``validation_id``).

Non-functional requirements
- Emitting a record never blocks validation; a full queue drops and counts the record.
"""

from __future__ import annotations

import atexit
import contextvars
import json
import logging
import logging.handlers
import math
import queue
import sys
import threading
import time
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Final, Literal, NoReturn, cast

from schema_engine.constants import ROOT_LOGGER_NAME
from schema_engine.tree.node_type import JSONValue

LogFormat = Literal["json", "text"]

_DEFAULT_QUEUE_SIZE: Final[int] = 4096
_TEXT_FORMAT: Final[str] = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LOG_FORMATS: Final[frozenset[str]] = frozenset({"json", "text"})

_STANDARD_LOG_RECORD_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "thread",
        "threadName",
        "taskName",
    }
)

_CorrelationState = tuple[tuple[str, str], ...]
_CORRELATION_CONTEXT: contextvars.ContextVar[_CorrelationState] = contextvars.ContextVar(
    "schema_engine_correlation", default=()
)

_ACTIVE_HANDLE_LOCK = threading.Lock()
_ACTIVE_HANDLE: LoggingHandle | None = None
_ATEXIT_REGISTERED = False


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Where and how ``schema_engine`` log records are written."""

    level: int | str = "WARNING"
    log_format: LogFormat = "json"
    log_file: Path | str | None = None
    log_to_stderr: bool = True
    logger_name: str = ROOT_LOGGER_NAME
    queue_size: int = _DEFAULT_QUEUE_SIZE

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> LoggingConfig:
        """Build from the ``[observability]`` section of a validated config."""

        section = config.get("observability", {})
        if not isinstance(section, Mapping):
            _fail("observability", "expected object")
        defaults = cls()
        raw_file = section.get("log_file")
        log_file = raw_file if isinstance(raw_file, (str, Path)) and str(raw_file) else None
        return cls(
            level=cast("int | str", section.get("log_level", defaults.level)),
            log_format=cast("LogFormat", section.get("log_format", defaults.log_format)),
            log_file=log_file,
            log_to_stderr=bool(section.get("log_to_stderr", defaults.log_to_stderr)),
        )


class _DropCounter:
    """Thread-safe counter for dropped queue records."""

    __slots__ = ("_lock", "_value")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    def increment(self) -> None:
        with self._lock:
            self._value += 1

    def value(self) -> int:
        with self._lock:
            return self._value


class _NonBlockingQueueHandler(logging.handlers.QueueHandler):
    """Captures correlation fields on the emitting thread, then enqueues without blocking."""

    def __init__(self, log_queue: queue.Queue[object], drop_counter: _DropCounter) -> None:
        super().__init__(log_queue)
        self._drop_counter = drop_counter

    def prepare(self, record: logging.LogRecord) -> logging.LogRecord:
        context = get_correlation_context()
        if context:
            record.correlation = context
        return cast("logging.LogRecord", super().prepare(record))

    def enqueue(self, record: logging.LogRecord) -> None:
        try:
            self.queue.put_nowait(record)
        except queue.Full:
            self._drop_counter.increment()


class _JsonLineFormatter(logging.Formatter):
    """One canonical JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, JSONValue] = {
            "timestamp": _iso8601z_from_epoch(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation = getattr(record, "correlation", None)
        if isinstance(correlation, Mapping):
            for key, value in sorted(correlation.items()):
                event[str(key)] = str(value)

        extras = _extract_extra_fields(record)
        if extras:
            event["fields"] = extras

        if record.exc_info is not None:
            event["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            event["stack"] = str(record.stack_info)

        return json.dumps(event, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


class _TextFormatter(logging.Formatter):
    """Plain text lines with correlation and extra fields appended as ``key=value``."""

    def __init__(self) -> None:
        super().__init__(_TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        pairs: dict[str, object] = {}
        correlation = getattr(record, "correlation", None)
        if isinstance(correlation, Mapping):
            pairs.update(correlation)
        pairs.update(_extract_extra_fields(record))
        if not pairs:
            return line
        suffix = " ".join(f"{key}={pairs[key]}" for key in sorted(pairs))
        return f"{line} [{suffix}]"


class LoggingHandle:
    """Runtime handle for an active logging setup."""

    def __init__(
        self,
        *,
        logger: logging.Logger,
        log_path: Path | None,
        log_queue: queue.Queue[object],
        queue_handler: _NonBlockingQueueHandler,
        sink_handlers: tuple[logging.Handler, ...],
        listener: logging.handlers.QueueListener,
        drop_counter: _DropCounter,
    ) -> None:
        self.logger = logger
        self.log_path = log_path
        self._queue = log_queue
        self._queue_handler = queue_handler
        self._sink_handlers = sink_handlers
        self._listener = listener
        self._drop_counter = drop_counter
        self._shutdown_lock = threading.Lock()
        self._is_shutdown = False

    @property
    def dropped_records(self) -> int:
        return self._drop_counter.value()

    @property
    def is_shutdown(self) -> bool:
        return self._is_shutdown

    def flush(self, *, timeout_seconds: float = 2.0) -> None:
        deadline = time.monotonic() + max(timeout_seconds, 0.0)
        while self._queue.unfinished_tasks > 0 and time.monotonic() < deadline:
            time.sleep(0.01)
        for handler in self._sink_handlers:
            handler.flush()

    def shutdown(self, *, timeout_seconds: float = 2.0) -> None:
        with self._shutdown_lock:
            if self._is_shutdown:
                return

            self.flush(timeout_seconds=timeout_seconds)
            self._listener.stop()

            self.logger.removeHandler(self._queue_handler)
            self._queue_handler.close()

            for handler in self._sink_handlers:
                handler.flush()
                handler.close()

            self._is_shutdown = True


def setup_logging(config: LoggingConfig | None = None) -> LoggingHandle:
    """Install queue-backed sinks on the package logger, replacing any earlier setup."""

    config = config or LoggingConfig()
    _shutdown_previous_active_handle()

    level = _parse_log_level(config.level)
    if config.log_format not in _LOG_FORMATS:
        _fail("log_format", f"expected one of {sorted(_LOG_FORMATS)}, got {config.log_format!r}")
    if isinstance(config.queue_size, bool) or not isinstance(config.queue_size, int):
        _fail("queue_size", "expected integer")
    if config.queue_size <= 0:
        _fail("queue_size", "must be > 0")

    formatter: logging.Formatter
    formatter = _JsonLineFormatter() if config.log_format == "json" else _TextFormatter()

    sink_handlers: list[logging.Handler] = []
    log_path: Path | None = None
    if config.log_file is not None:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        sink_handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    if config.log_to_stderr:
        sink_handlers.append(logging.StreamHandler(sys.stderr))
    if not sink_handlers:
        sink_handlers.append(logging.NullHandler())
    for handler in sink_handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logger = logging.getLogger(config.logger_name)
    logger.setLevel(level)
    logger.propagate = False
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    log_queue: queue.Queue[object] = queue.Queue(maxsize=config.queue_size)
    drop_counter = _DropCounter()
    queue_handler = _NonBlockingQueueHandler(log_queue, drop_counter)
    queue_handler.setLevel(level)

    listener = logging.handlers.QueueListener(log_queue, *sink_handlers, respect_handler_level=True)
    listener.start()
    logger.addHandler(queue_handler)

    handle = LoggingHandle(
        logger=logger,
        log_path=log_path,
        log_queue=log_queue,
        queue_handler=queue_handler,
        sink_handlers=tuple(sink_handlers),
        listener=listener,
        drop_counter=drop_counter,
    )

    global _ACTIVE_HANDLE
    with _ACTIVE_HANDLE_LOCK:
        _ACTIVE_HANDLE = handle

    _register_atexit_shutdown()
    return handle


def flush_logging(handle: LoggingHandle | None = None, *, timeout_seconds: float = 2.0) -> None:
    resolved = handle or get_active_logging_handle()
    if resolved is not None:
        resolved.flush(timeout_seconds=timeout_seconds)


def shutdown_logging(handle: LoggingHandle | None = None, *, timeout_seconds: float = 2.0) -> None:
    """Drain the queue and close all sinks of ``handle`` (default: the active setup)."""

    global _ACTIVE_HANDLE
    resolved = handle or get_active_logging_handle()
    if resolved is None:
        return
    resolved.shutdown(timeout_seconds=timeout_seconds)
    with _ACTIVE_HANDLE_LOCK:
        if _ACTIVE_HANDLE is resolved:
            _ACTIVE_HANDLE = None


def get_active_logging_handle() -> LoggingHandle | None:
    with _ACTIVE_HANDLE_LOCK:
        return _ACTIVE_HANDLE


def get_correlation_context() -> dict[str, str]:
    return dict(_CORRELATION_CONTEXT.get())


@contextmanager
def correlation_scope(**fields: str | None) -> Iterator[None]:
    """Bind correlation fields for log records emitted in scope; ``None`` unbinds a field."""

    state = get_correlation_context()
    for key, value in fields.items():
        name = key.strip()
        if not name:
            _fail("correlation", "field name must not be empty")
        if value is None:
            state.pop(name, None)
            continue
        if not isinstance(value, str) or not value.strip():
            _fail(f"correlation.{name}", "value must be a non-empty string")
        state[name] = value.strip()
    token = _CORRELATION_CONTEXT.set(tuple(state.items()))
    try:
        yield
    finally:
        _CORRELATION_CONTEXT.reset(token)


def _shutdown_previous_active_handle() -> None:
    global _ACTIVE_HANDLE
    existing = get_active_logging_handle()
    if existing is not None:
        existing.shutdown()
    with _ACTIVE_HANDLE_LOCK:
        _ACTIVE_HANDLE = None


def _register_atexit_shutdown() -> None:
    global _ATEXIT_REGISTERED
    if _ATEXIT_REGISTERED:
        return
    atexit.register(shutdown_logging)
    _ATEXIT_REGISTERED = True


def _parse_log_level(value: int | str) -> int:
    if isinstance(value, bool):
        _fail("level", "expected int or str")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        _fail("level", f"expected int or str, got {type(value).__name__}")
    parsed = logging.getLevelName(value.strip().upper())
    if isinstance(parsed, int):
        return parsed
    _fail("level", f"unsupported logging level {value!r}")


def _iso8601z_from_epoch(epoch_seconds: float) -> str:
    timestamp = datetime.fromtimestamp(epoch_seconds, tz=UTC)
    return timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _extract_extra_fields(record: logging.LogRecord) -> dict[str, JSONValue]:
    fields: dict[str, JSONValue] = {}
    for key, value in record.__dict__.items():
        if key in _STANDARD_LOG_RECORD_FIELDS or key == "correlation" or key.startswith("_"):
            continue
        fields[key] = _normalize_json_value(value)
    return fields


def _normalize_json_value(value: object) -> JSONValue:
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else repr(value)
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Mapping):
        return {str(key): _normalize_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize_json_value(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return sorted((_normalize_json_value(item) for item in value), key=repr)
    return str(value)


def _fail(path: str, message: str) -> NoReturn:
    raise ValueError(f"{path}: {message}")


__all__ = [
    "LogFormat",
    "LoggingConfig",
    "LoggingHandle",
    "correlation_scope",
    "flush_logging",
    "get_active_logging_handle",
    "get_correlation_context",
    "setup_logging",
    "shutdown_logging",
]
