"""Exception hierarchy shared by every schema-engine layer."""

from __future__ import annotations


class SchemaEngineError(Exception):
    """Base class for all errors raised by schema-engine."""


class KeywordConstructionError(SchemaEngineError, ValueError):
    """Raised by a keyword builder when its constraint value is malformed."""

    def __init__(self, keyword: str, message: str) -> None:
        self.keyword = keyword
        super().__init__(f"{keyword}: {message}")


class SchemaTypeError(SchemaEngineError, TypeError):
    """Raised when a schema node is not a keyword mapping."""


class RegistryFrozenError(SchemaEngineError, RuntimeError):
    """Raised when a frozen keyword registry is asked to register a keyword."""


class RefResolutionError(SchemaEngineError, LookupError):
    """Raised when a ``$ref`` target cannot be located."""


class PointerResolutionError(RefResolutionError):
    """Raised when a JSON pointer does not address a node of a document."""


__all__ = [
    "KeywordConstructionError",
    "PointerResolutionError",
    "RefResolutionError",
    "RegistryFrozenError",
    "SchemaEngineError",
    "SchemaTypeError",
]
