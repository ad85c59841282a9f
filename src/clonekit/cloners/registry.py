"""Cloner registry: compiled routines keyed by (clone key, strategy).

ClonerRegistry is the only shared mutable state of the compiled backend.
Entries are inserted if absent, never replaced once observed and never evicted.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Hashable, Iterator
from typing import Any, NamedTuple

import numpy as np

from clonekit.core.shape import TypeShape, array_shape, classify
from clonekit.core.types import CloneStrategy

logger = logging.getLogger(__name__)

type Routine = Callable[[Any], Any]


class ArrayKey(NamedTuple):
    """Clone key of an ndarray: rank and element storage make it a distinct type."""

    array_type: type
    rank: int
    object_elements: bool


type CloneKey = type | ArrayKey


def clone_key(value: Any) -> CloneKey:
    """Registry key for a value: its runtime type, refined for ndarrays.

    Args:
        value: Non-None object about to be cloned.

    Returns:
        The concrete type, or an ArrayKey for ndarrays.
    """
    if isinstance(value, np.ndarray):
        return ArrayKey(type(value), value.ndim, value.dtype.hasobject)
    return type(value)


def key_type(key: CloneKey) -> type:
    """Concrete class behind a clone key."""
    if isinstance(key, ArrayKey):
        return key.array_type
    return key


def key_shape(key: CloneKey) -> TypeShape:
    """Shape of the values a clone key stands for."""
    if isinstance(key, ArrayKey):
        return array_shape(key.rank, key.object_elements)
    return classify(key)


class ClonerRegistry:
    """Thread-safe store of compiled clone routines.

    Concurrent first use of a key may compile the same routine several times;
    the first routine stored wins and later duplicates are dropped. Compiled
    routines depend only on the type, so dropping a duplicate is always safe.
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._routines: dict[tuple[Hashable, CloneStrategy], Routine] = {}
        self._lock = threading.Lock()

    def get(self, key: CloneKey, strategy: CloneStrategy) -> Routine | None:
        """Look up a compiled routine.

        Args:
            key: Clone key of the value.
            strategy: Copy strategy.

        Returns:
            Routine if one was stored, None otherwise.
        """
        return self._routines.get((key, strategy))

    def insert_if_absent(self, key: CloneKey, strategy: CloneStrategy, routine: Routine) -> Routine:
        """Store a routine unless another caller stored one first.

        Args:
            key: Clone key of the value.
            strategy: Copy strategy.
            routine: Freshly compiled routine.

        Returns:
            The routine held by the registry, which is `routine` only if no entry
            existed yet.
        """
        with self._lock:
            stored = self._routines.setdefault((key, strategy), routine)
        if stored is not routine:
            logger.debug("Discarded duplicate %s routine for %s", strategy.value, key)
        return stored

    def __contains__(self, entry: object) -> bool:
        return entry in self._routines

    def __len__(self) -> int:
        return len(self._routines)

    def __iter__(self) -> Iterator[tuple[Hashable, CloneStrategy]]:
        return iter(list(self._routines))


_registry: ClonerRegistry | None = None
_registry_lock = threading.Lock()


def get_registry() -> ClonerRegistry:
    """Access the process-wide cloner registry, creating it on first use.

    Returns:
        The shared ClonerRegistry instance.
    """
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = ClonerRegistry()
    return _registry
