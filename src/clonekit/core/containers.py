"""Pure functions rebuilding builtin containers from already-copied contents.

Every backend produces container copies through these helpers so that
subclasses, `maxlen`, `default_factory` and dtypes survive identically whichever
backend did the copying. Each helper allocates a fresh container of the
original's runtime type; callers decide what goes into it.
"""

from __future__ import annotations

import array
import collections
from collections.abc import Iterable
from typing import Any

import numpy as np

from clonekit.core.errors import ConstructionError


def allocate(cls: type) -> Any:
    """Create an instance without running `__init__`.

    Args:
        cls: Type to allocate.

    Returns:
        Uninitialized instance.

    Raises:
        ConstructionError: If the type's `__new__` requires arguments.
    """
    try:
        return cls.__new__(cls)
    except TypeError as e:
        raise ConstructionError(
            f"Cannot allocate {cls.__qualname__} without running its constructor"
        ) from e


def construct(cls: type) -> Any:
    """Create an instance through its default construction path, `cls()`.

    Args:
        cls: Type to construct.

    Returns:
        Default-constructed instance.

    Raises:
        ConstructionError: If `cls()` cannot be called without arguments.
    """
    try:
        return cls()
    except TypeError as e:
        raise ConstructionError(
            f"{cls.__qualname__} has no default construction path: {e}"
        ) from e


def is_builtin_container(value: Any) -> bool:
    """Check if a value's type is exactly one of the builtin containers."""
    return type(value) in BUILTIN_CONTAINERS


def rebuild_tuple(original: tuple[Any, ...], items: Iterable[Any]) -> tuple[Any, ...]:
    """Rebuild a tuple, named tuple or tuple subclass from new items."""
    cls = type(original)
    if cls is tuple:
        return tuple(items)
    make = getattr(cls, "_make", None)
    try:
        if make is not None:
            return make(items)
        return tuple.__new__(cls, items)
    except TypeError as e:
        raise ConstructionError(f"Cannot rebuild {cls.__qualname__} from items") from e


def rebuild_frozenset(original: frozenset[Any], items: Iterable[Any]) -> frozenset[Any]:
    """Rebuild a frozenset or frozenset subclass from new items."""
    cls = type(original)
    if cls is frozenset:
        return frozenset(items)
    return cls.__new__(cls, items)


def rebuild_list(original: list[Any], items: Iterable[Any]) -> list[Any]:
    """Rebuild a list or list subclass from new items."""
    cls = type(original)
    if cls is list:
        return list(items)
    clone = allocate(cls)
    list.extend(clone, items)
    return clone


def rebuild_bytes(original: bytearray | array.array[Any]) -> Any:
    """Duplicate the storage of a bytearray or array.array in bulk."""
    if isinstance(original, array.array):
        return type(original)(original.typecode, original)
    cls = type(original)
    if cls is bytearray:
        return bytearray(original)
    clone = allocate(cls)
    bytearray.extend(clone, original)
    return clone


def rebuild_deque(original: collections.deque[Any], items: Iterable[Any]) -> Any:
    """Rebuild a deque (keeping `maxlen`) from new items."""
    cls = type(original)
    if cls is collections.deque:
        return collections.deque(items, original.maxlen)
    clone = allocate(cls)
    collections.deque.__init__(clone, items, original.maxlen)
    return clone


def rebuild_set(original: set[Any], items: Iterable[Any]) -> set[Any]:
    """Rebuild a set or set subclass from new items."""
    cls = type(original)
    if cls is set:
        return set(items)
    clone = allocate(cls)
    set.update(clone, items)
    return clone


def rebuild_dict(original: dict[Any, Any], pairs: Iterable[tuple[Any, Any]]) -> dict[Any, Any]:
    """Rebuild a dict or dict subclass (OrderedDict, defaultdict, Counter) from new pairs."""
    cls = type(original)
    if cls is dict:
        return dict(pairs)
    clone = allocate(cls)
    if isinstance(original, collections.defaultdict):
        clone.default_factory = original.default_factory
    for key, value in pairs:
        clone[key] = value
    return clone


def rebuild_collection(original: Any, convert: Any) -> Any:
    """Rebuild any collection-shaped value, passing every entry through `convert`.

    Args:
        original: dict, set or deque (or subclass).
        convert: Function applied to every key, value and item.

    Returns:
        New container of the same runtime type.
    """
    if isinstance(original, dict):
        return rebuild_dict(original, [(convert(k), convert(v)) for k, v in original.items()])
    if isinstance(original, set):
        return rebuild_set(original, [convert(item) for item in original])
    return rebuild_deque(original, [convert(item) for item in original])


def rebuild_value_aggregate(original: Any, convert: Any) -> Any:
    """Rebuild a tuple or frozenset, passing every item through `convert`."""
    if isinstance(original, tuple):
        return rebuild_tuple(original, [convert(item) for item in original])
    return rebuild_frozenset(original, [convert(item) for item in original])


def duplicate_array(original: Any) -> Any:
    """One-level duplicate of an array: new storage, same element references."""
    if isinstance(original, np.ndarray):
        return original.copy()
    if isinstance(original, list):
        return rebuild_list(original, original)
    return rebuild_bytes(original)


def empty_object_array(original: np.ndarray) -> np.ndarray:
    """Object array shaped like `original`, every cell None."""
    return np.empty_like(original)


BUILTIN_CONTAINERS = frozenset(
    {tuple, frozenset, list, bytearray, set, dict, collections.deque, np.ndarray}
)
