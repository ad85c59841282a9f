"""Compiling cloner: one generated routine per (type, strategy), reused forever.

The first clone of a type under a strategy pays for cataloging and code
generation; every later clone of that type calls the cached routine directly.
Nested values are resolved at clone time by their runtime type, so a base-typed
member holding a derived instance is cloned with the derived type's routine.

Usage:
    cloner = CompilingCloner()
    copy = cloner.deep_field_clone(original)

    # Or with an explicit registry (e.g. isolated per test)
    cloner = CompilingCloner(registry=ClonerRegistry())
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from clonekit.cloners.codegen import generate_routine
from clonekit.cloners.registry import (
    ClonerRegistry,
    CloneKey,
    Routine,
    clone_key,
    get_registry,
    key_shape,
    key_type,
)
from clonekit.config import get_settings
from clonekit.core.shape import ShapeKind, classify_value
from clonekit.core.types import Clone, CloneStrategy

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CompilingCloner:
    """Clones objects with routines compiled from their member catalog.

    Args:
        registry: Store for compiled routines. Defaults to the process-wide
            registry shared by every CompilingCloner.
    """

    def __init__(self, registry: ClonerRegistry | None = None):
        """Initialize compiling cloner.

        Args:
            registry: Store for compiled routines (default: process-wide registry).
        """
        self._registry = registry if registry is not None else get_registry()
        self._dispatchers: dict[CloneStrategy, Callable[[Any], Any]] = {
            strategy: self._make_dispatcher(strategy) for strategy in CloneStrategy
        }

    @property
    def registry(self) -> ClonerRegistry:
        """Registry holding this cloner's compiled routines."""
        return self._registry

    def shallow_field_clone(self, original: T) -> Clone[T]:
        """Create a shallow clone, reusing every referenced object."""
        return self._clone(original, CloneStrategy.SHALLOW_FIELD)

    def deep_field_clone(self, original: T) -> Clone[T]:
        """Create a deep clone through declared fields."""
        return self._clone(original, CloneStrategy.DEEP_FIELD)

    def shallow_property_clone(self, original: T) -> Clone[T]:
        """Create a shallow clone through read/write properties."""
        return self._clone(original, CloneStrategy.SHALLOW_PROPERTY)

    def deep_property_clone(self, original: T) -> Clone[T]:
        """Create a deep clone through read/write properties."""
        return self._clone(original, CloneStrategy.DEEP_PROPERTY)

    def routine_for(self, value: Any, strategy: CloneStrategy) -> Routine:
        """Get the compiled routine for a value's runtime type, compiling it on first use.

        Args:
            value: Non-None object about to be cloned.
            strategy: Copy strategy.

        Returns:
            Routine cloning values of that runtime type.
        """
        key = clone_key(value)
        routine = self._registry.get(key, strategy)
        if routine is None:
            routine = self._registry.insert_if_absent(key, strategy, self._compile(key, strategy))
        return routine

    def _clone(self, original: Any, strategy: CloneStrategy) -> Any:
        if original is None:
            return None
        return self.routine_for(original, strategy)(original)

    def _compile(self, key: CloneKey, strategy: CloneStrategy) -> Routine:
        cls = key_type(key)
        routine = generate_routine(
            cls,
            key_shape(key),
            strategy,
            dispatch=self._dispatchers[strategy],
            promote=self._promote,
        )
        logger.debug("Compiled %s routine for %s", strategy.value, key)
        if get_settings().log_generated_source:
            logger.debug("Generated source:\n%s", routine.__clone_source__)  # type: ignore[attr-defined]
        return routine

    def _make_dispatcher(self, strategy: CloneStrategy) -> Callable[[Any], Any]:
        routine_for = self.routine_for

        def dispatch(value: Any) -> Any:
            if value is None:
                return None
            return routine_for(value, strategy)(value)

        return dispatch

    def _promote(self, value: Any) -> Any:
        if value is not None and classify_value(value).kind is ShapeKind.VALUE_AGGREGATE:
            return self._dispatchers[CloneStrategy.SHALLOW_PROPERTY](value)
        return value
