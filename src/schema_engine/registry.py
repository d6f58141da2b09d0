"""
schema-engine — keyword registry

File: src/schema_engine/registry.py
Last updated: 2026-10-19

Purpose
- Map keyword names to the instance kinds they apply to and to the builder that produces
  their checker.

What should be included in this file
- ``KeywordRegistry`` (mutable, configuration time) and ``FrozenKeywordRegistry``
  (read-only, validation time).
- Canonical ordering: keywords are always reported in registration order.
- Process-wide default registry, built once and frozen on first use.

Functional requirements
- ``register`` adds or overwrites atomically; an overwrite keeps its canonical position.
- ``applicable_keywords`` filters schema keys to registered, type-applicable names.
- Registering on a frozen registry fails loudly.

Non-functional requirements
- Lookups never observe a partially built registration.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, NoReturn, TypeAlias

from schema_engine.errors import RegistryFrozenError
from schema_engine.tree.node_type import JSONValue, NodeType

if TYPE_CHECKING:
    from schema_engine.checkers import Checker, KeywordLogic
    from schema_engine.context import ValidationContext

KeywordBuilder: TypeAlias = Callable[["ValidationContext", JSONValue], "Checker | KeywordLogic"]
TypeSpec: TypeAlias = NodeType | str


@dataclass(frozen=True, slots=True)
class KeywordRegistration:
    """One registry entry."""

    name: str
    applicable: frozenset[NodeType]
    builder: KeywordBuilder
    order: int

    def applies_to(self, instance_type: NodeType) -> bool:
        return instance_type in self.applicable


class _RegistryView:
    """Read operations shared by the mutable and frozen registries."""

    __slots__ = ()

    def _entries(self) -> Mapping[str, KeywordRegistration]:
        raise NotImplementedError

    def _ordered(self) -> tuple[KeywordRegistration, ...]:
        raise NotImplementedError

    def lookup(self, name: str) -> KeywordRegistration | None:
        return self._entries().get(name)

    def applicable_keywords(
        self,
        schema_keys: Iterable[str],
        instance_type: NodeType,
    ) -> tuple[str, ...]:
        """Registered keywords among ``schema_keys`` that apply to ``instance_type``."""

        keys = frozenset(schema_keys)
        return tuple(
            entry.name
            for entry in self._ordered()
            if entry.name in keys and instance_type in entry.applicable
        )

    def names(self) -> tuple[str, ...]:
        return tuple(entry.name for entry in self._ordered())

    def registrations(self) -> tuple[KeywordRegistration, ...]:
        return self._ordered()

    def __contains__(self, name: object) -> bool:
        return name in self._entries()

    def __len__(self) -> int:
        return len(self._entries())

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())


class KeywordRegistry(_RegistryView):
    """Configuration-time registry; call ``freeze`` before validating with it."""

    __slots__ = ("_lock", "_registrations", "_sequence")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._registrations: dict[str, KeywordRegistration] = {}
        self._sequence = 0

    def register(
        self,
        name: str,
        applicable_types: Iterable[TypeSpec],
        builder: KeywordBuilder,
    ) -> KeywordRegistration:
        normalized = _as_keyword_name(name)
        types = _as_type_set(applicable_types, normalized)
        if not callable(builder):
            _fail(f"keyword {normalized!r}", "builder must be callable")

        with self._lock:
            existing = self._registrations.get(normalized)
            if existing is not None:
                order = existing.order
            else:
                order = self._sequence
                self._sequence += 1
            registration = KeywordRegistration(
                name=normalized,
                applicable=types,
                builder=builder,
                order=order,
            )
            self._registrations[normalized] = registration
        return registration

    def freeze(self) -> FrozenKeywordRegistry:
        with self._lock:
            return FrozenKeywordRegistry(self._registrations.values())

    def _entries(self) -> Mapping[str, KeywordRegistration]:
        return self._registrations

    def _ordered(self) -> tuple[KeywordRegistration, ...]:
        with self._lock:
            entries = tuple(self._registrations.values())
        return tuple(sorted(entries, key=lambda entry: entry.order))


class FrozenKeywordRegistry(_RegistryView):
    """Read-only registry used by the dispatch engine."""

    __slots__ = ("_by_name", "_in_order")

    def __init__(self, registrations: Iterable[KeywordRegistration]) -> None:
        ordered = tuple(sorted(registrations, key=lambda entry: entry.order))
        self._in_order = ordered
        self._by_name: Mapping[str, KeywordRegistration] = MappingProxyType(
            {entry.name: entry for entry in ordered}
        )

    def register(self, *args: object, **kwargs: object) -> NoReturn:
        raise RegistryFrozenError("keyword registry is frozen; register keywords before freezing")

    def to_builder(self) -> KeywordRegistry:
        """Mutable copy, keeping canonical order, for extending a frozen vocabulary."""

        builder = KeywordRegistry()
        for entry in self._in_order:
            builder.register(entry.name, entry.applicable, entry.builder)
        return builder

    def _entries(self) -> Mapping[str, KeywordRegistration]:
        return self._by_name

    def _ordered(self) -> tuple[KeywordRegistration, ...]:
        return self._in_order


RegistryView: TypeAlias = KeywordRegistry | FrozenKeywordRegistry

_DEFAULT_LOCK = threading.Lock()
_DEFAULT_BUILDER: KeywordRegistry | None = None
_DEFAULT_FROZEN: FrozenKeywordRegistry | None = None


def register_keyword(
    name: str,
    applicable_types: Iterable[TypeSpec],
    builder: KeywordBuilder,
    *,
    registry: KeywordRegistry | None = None,
) -> KeywordRegistration:
    """Register a keyword on ``registry`` or, by default, on the process-wide vocabulary.

    The default vocabulary only accepts registrations until ``default_registry`` has been
    called for the first time.
    """

    if registry is not None:
        return registry.register(name, applicable_types, builder)

    with _DEFAULT_LOCK:
        if _DEFAULT_FROZEN is not None:
            raise RegistryFrozenError(
                "default keyword registry is already in use; register keywords during setup"
            )
        return _default_builder_locked().register(name, applicable_types, builder)


def keyword(
    name: str,
    *types: TypeSpec,
    registry: KeywordRegistry | None = None,
) -> Callable[[KeywordBuilder], KeywordBuilder]:
    """Decorator form of ``register_keyword``."""

    def decorator(builder: KeywordBuilder) -> KeywordBuilder:
        register_keyword(name, types, builder, registry=registry)
        return builder

    return decorator


def default_registry() -> FrozenKeywordRegistry:
    """Return the process-wide frozen vocabulary, building it on first use."""

    global _DEFAULT_FROZEN
    with _DEFAULT_LOCK:
        if _DEFAULT_FROZEN is None:
            _DEFAULT_FROZEN = _default_builder_locked().freeze()
        return _DEFAULT_FROZEN


def builtin_registry() -> KeywordRegistry:
    """Fresh mutable registry pre-populated with the built-in vocabulary."""

    from schema_engine.keywords import register_builtin_keywords

    registry = KeywordRegistry()
    register_builtin_keywords(registry)
    return registry


def _default_builder_locked() -> KeywordRegistry:
    global _DEFAULT_BUILDER
    if _DEFAULT_BUILDER is None:
        _DEFAULT_BUILDER = builtin_registry()
    return _DEFAULT_BUILDER


def _as_keyword_name(name: object) -> str:
    if not isinstance(name, str):
        _fail("keyword", f"name must be a string, got {type(name).__name__}")
    if not name:
        _fail("keyword", "name must not be empty")
    return name


def _as_type_set(types: Iterable[TypeSpec], keyword_name: str) -> frozenset[NodeType]:
    if isinstance(types, (str, NodeType)):
        types = (types,)
    parsed = frozenset(NodeType.parse(item) for item in types)
    if not parsed:
        _fail(f"keyword {keyword_name!r}", "applicable type set must not be empty")
    return parsed


def _fail(path: str, message: str) -> NoReturn:
    raise ValueError(f"{path}: {message}")


__all__ = [
    "FrozenKeywordRegistry",
    "KeywordBuilder",
    "KeywordRegistration",
    "KeywordRegistry",
    "RegistryView",
    "TypeSpec",
    "builtin_registry",
    "default_registry",
    "keyword",
    "register_keyword",
]
