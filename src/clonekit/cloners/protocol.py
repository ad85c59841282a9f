"""Clone factory protocol for swappable backends.

Every backend exposes the same four strategies:
- ReflectionCloner: walks the member catalog on every call
- CompilingCloner: compiles one routine per type and strategy, then reuses it
- SerializationCloner: round-trips through an in-memory pickle (deep only)

Usage:
    def snapshot(cloner: CloneFactory, state: T) -> T:
        return cloner.deep_field_clone(state)
"""

from __future__ import annotations

from typing import Protocol, TypeVar, runtime_checkable

from clonekit.core.types import Clone

T = TypeVar("T")


@runtime_checkable
class CloneFactory(Protocol):
    """Abstract cloner interface. None in, None out for every strategy."""

    def shallow_field_clone(self, original: T) -> Clone[T]:
        """New top-level instance, declared fields copied by reference."""
        ...

    def deep_field_clone(self, original: T) -> Clone[T]:
        """Declared fields copied recursively."""
        ...

    def shallow_property_clone(self, original: T) -> Clone[T]:
        """Default-constructed instance, read/write properties copied by reference."""
        ...

    def deep_property_clone(self, original: T) -> Clone[T]:
        """Default-constructed instance, read/write properties copied recursively."""
        ...
