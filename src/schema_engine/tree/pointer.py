"""JSON pointer (RFC 6901) and schema location value types."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import ClassVar, NoReturn, Protocol, runtime_checkable

from schema_engine.errors import PointerResolutionError
from schema_engine.tree.node_type import JSONValue

Token = str | int


@runtime_checkable
class TreePath(Protocol):
    """Anything that can answer an ancestor test; used by path suppression."""

    def is_parent_of(self, other: object) -> bool: ...


@dataclass(frozen=True, slots=True, order=True)
class JsonPointer:
    """Immutable sequence of reference tokens addressing a node in a tree."""

    tokens: tuple[str, ...] = ()

    ROOT: ClassVar[JsonPointer]

    def __post_init__(self) -> None:
        if not isinstance(self.tokens, tuple):
            object.__setattr__(self, "tokens", tuple(self.tokens))
        for token in self.tokens:
            if not isinstance(token, str):
                raise TypeError(f"pointer tokens must be strings, got {type(token).__name__}")

    @classmethod
    def parse(cls, text: str) -> JsonPointer:
        if text == "":
            return cls.ROOT
        if not text.startswith("/"):
            raise ValueError(f"invalid JSON pointer {text!r}: must be empty or start with '/'")
        return cls(tuple(_unescape(part) for part in text[1:].split("/")))

    @classmethod
    def of(cls, *tokens: Token) -> JsonPointer:
        return cls(tuple(str(token) for token in tokens))

    def append(self, *tokens: Token) -> JsonPointer:
        if not tokens:
            return self
        return JsonPointer((*self.tokens, *(str(token) for token in tokens)))

    @property
    def parent(self) -> JsonPointer:
        if not self.tokens:
            return self
        return JsonPointer(self.tokens[:-1])

    @property
    def is_root(self) -> bool:
        return not self.tokens

    def is_parent_of(self, other: object) -> bool:
        """Non-strict ancestor test: a pointer is a parent of itself."""

        if not isinstance(other, JsonPointer):
            return False
        depth = len(self.tokens)
        return len(other.tokens) >= depth and other.tokens[:depth] == self.tokens

    def resolve(self, document: JSONValue) -> JSONValue:
        """Walk ``document`` along this pointer."""

        cursor: JSONValue = document
        for depth, token in enumerate(self.tokens):
            if isinstance(cursor, Mapping):
                if token not in cursor:
                    self._missing(depth, f"member {token!r} not found")
                cursor = cursor[token]
                continue
            if isinstance(cursor, Sequence) and not isinstance(cursor, str):
                index = _array_index(token)
                if index is None or index >= len(cursor):
                    self._missing(depth, f"index {token!r} out of range")
                cursor = cursor[index]
                continue
            self._missing(depth, "cannot descend into a scalar")
        return cursor

    def _missing(self, depth: int, message: str) -> NoReturn:
        prefix = JsonPointer(self.tokens[: depth + 1])
        raise PointerResolutionError(f"{self}: {message} at {prefix}")

    def __str__(self) -> str:
        return "".join(f"/{_escape(token)}" for token in self.tokens)

    def __truediv__(self, token: Token) -> JsonPointer:
        return self.append(token)


JsonPointer.ROOT = JsonPointer()


@dataclass(frozen=True, slots=True, order=True)
class SchemaLocation:
    """Position of a schema node: document uri plus pointer inside that document."""

    uri: str = ""
    pointer: JsonPointer = JsonPointer.ROOT

    def append(self, *tokens: Token) -> SchemaLocation:
        return SchemaLocation(self.uri, self.pointer.append(*tokens))

    def is_parent_of(self, other: object) -> bool:
        if not isinstance(other, SchemaLocation):
            return False
        return self.uri == other.uri and self.pointer.is_parent_of(other.pointer)

    def __str__(self) -> str:
        return f"{self.uri}#{self.pointer}"


def _escape(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def _unescape(token: str) -> str:
    if "~" in token:
        index = token.find("~")
        while index != -1:
            if index + 1 >= len(token) or token[index + 1] not in "01":
                raise ValueError(f"invalid escape sequence in pointer token {token!r}")
            index = token.find("~", index + 2)
    return token.replace("~1", "/").replace("~0", "~")


def _array_index(token: str) -> int | None:
    if not token.isdigit() or not token.isascii():
        return None
    if len(token) > 1 and token.startswith("0"):
        return None
    return int(token)


__all__ = [
    "JsonPointer",
    "SchemaLocation",
    "Token",
    "TreePath",
]
