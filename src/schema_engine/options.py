"""Per-engine tuning knobs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import NoReturn

from schema_engine.constants import (
    DEFAULT_MAX_WORKERS,
    DEFAULT_PARALLEL_MIN_CHILDREN,
    MAX_WORKERS_LIMIT,
)
from schema_engine.report import LogLevel


@dataclass(frozen=True, slots=True)
class EngineOptions:
    """Immutable options threaded through every validation context."""

    max_workers: int = DEFAULT_MAX_WORKERS
    parallel_min_children: int = DEFAULT_PARALLEL_MIN_CHILDREN
    suppress_repeated_schema_faults: bool = False
    report_log_level: LogLevel = LogLevel.INFO

    def __post_init__(self) -> None:
        _as_int(self.max_workers, "EngineOptions.max_workers", minimum=1, maximum=MAX_WORKERS_LIMIT)
        _as_int(self.parallel_min_children, "EngineOptions.parallel_min_children", minimum=1)
        if not isinstance(self.suppress_repeated_schema_faults, bool):
            _fail("EngineOptions.suppress_repeated_schema_faults", "expected boolean")
        object.__setattr__(self, "report_log_level", LogLevel.parse(self.report_log_level))

    @property
    def parallel(self) -> bool:
        return self.max_workers > 1

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> EngineOptions:
        """Build options from the ``[engine]`` section of a validated config."""

        section = config.get("engine", {})
        if not isinstance(section, Mapping):
            _fail("engine", "expected object")
        defaults = cls()
        return cls(
            max_workers=section.get("max_workers", defaults.max_workers),  # type: ignore[arg-type]
            parallel_min_children=section.get(  # type: ignore[arg-type]
                "parallel_min_children", defaults.parallel_min_children
            ),
            suppress_repeated_schema_faults=section.get(  # type: ignore[arg-type]
                "suppress_repeated_schema_faults", defaults.suppress_repeated_schema_faults
            ),
            report_log_level=LogLevel.parse(
                section.get("report_log_level", defaults.report_log_level)
            ),
        )


def _as_int(value: object, path: str, *, minimum: int, maximum: int | None = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        _fail(path, f"expected integer, got {type(value).__name__}")
    if value < minimum:
        _fail(path, f"must be >= {minimum}")
    if maximum is not None and value > maximum:
        _fail(path, f"must be <= {maximum}")
    return value


def _fail(path: str, message: str) -> NoReturn:
    raise ValueError(f"{path}: {message}")


__all__ = ["EngineOptions"]
