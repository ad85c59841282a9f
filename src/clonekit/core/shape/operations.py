"""Type shape classification.

Decision order matters: primitives and text first, then arrays (with their
element shape), then value aggregates, then collections, and everything else is
a reference aggregate. Arrays of primitives and arrays of aggregates take
different copy paths, so they are told apart before any member walk.

Usage:
    classify(int)                    # TypeShape(PRIMITIVE)
    classify(list[int])              # TypeShape(ARRAY, rank=1, element=PRIMITIVE)
    classify_value(np.empty((2, 3), dtype=object))
                                     # TypeShape(ARRAY, rank=2, element=None)
"""

from __future__ import annotations

import array
import collections
import datetime
import decimal
import fractions
import functools
import io
import pathlib
import re
import threading
import types
import uuid
import weakref
from enum import Enum
from typing import Annotated, Any, get_args, get_origin

import numpy as np

from clonekit.core.shape.models import (
    COLLECTION,
    PRIMITIVE,
    REFERENCE_AGGREGATE,
    VALUE_AGGREGATE,
    ShapeKind,
    TypeShape,
)

_ATOMIC_TYPES: tuple[type, ...] = (
    type(None),
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    range,
    slice,
    type(Ellipsis),
    type(NotImplemented),
    decimal.Decimal,
    fractions.Fraction,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    datetime.tzinfo,
    uuid.UUID,
    pathlib.PurePath,
    Enum,
    np.generic,
    np.dtype,
)
"""Immutable values: sharing them is indistinguishable from copying them."""

_OPAQUE_TYPES: tuple[type, ...] = (
    type,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.MethodWrapperType,
    types.WrapperDescriptorType,
    types.ModuleType,
    types.CodeType,
    types.GeneratorType,
    types.CoroutineType,
    types.AsyncGeneratorType,
    functools.partial,
    property,
    memoryview,
    re.Pattern,
    weakref.ref,
    io.IOBase,
    type(threading.Lock()),
    type(threading.RLock()),
)
"""Handles and code objects: copied as dumb values, never walked."""

_ARRAY_OF_PRIMITIVES = TypeShape(ShapeKind.ARRAY, rank=1, element=PRIMITIVE)


def is_atomic_type(tp: type) -> bool:
    """Check if instances of a type are copied by value without inspection.

    Args:
        tp: Class to check.

    Returns:
        True for immutable scalars, text, and opaque handles.
    """
    return issubclass(tp, _ATOMIC_TYPES) or issubclass(tp, _OPAQUE_TYPES)


def is_opaque_type(tp: type) -> bool:
    """Check if a type is a handle or code object rather than plain data.

    Args:
        tp: Class to check.

    Returns:
        True if instances can only be passed along by reference.
    """
    return issubclass(tp, _OPAQUE_TYPES)


@functools.cache
def classify(tp: Any) -> TypeShape:
    """Classify a type into the shape that drives cloning.

    Accepts plain classes and parametrized aliases (`list[int]`, `dict[str, Foo]`,
    `Annotated[int, ...]`).

    Args:
        tp: Class or generic alias to classify.

    Returns:
        Shape of the type.

    Raises:
        TypeError: If `tp` is neither a class nor a classifiable alias
            (`Any`, unions, type variables, forward-reference strings).
    """
    origin = get_origin(tp)
    if origin is Annotated:
        return classify(get_args(tp)[0])
    if origin is not None:
        if origin is types.UnionType or not isinstance(origin, type):
            raise TypeError(f"Cannot classify {tp!r}: not a concrete type")
        if issubclass(origin, list):
            args = get_args(tp)
            element = _try_classify(args[0]) if args else None
            return TypeShape(ShapeKind.ARRAY, rank=1, element=element)
        return classify(origin)

    if tp is Any or not isinstance(tp, type):
        raise TypeError(f"Cannot classify {tp!r}: not a type")

    if is_atomic_type(tp):
        return PRIMITIVE
    if issubclass(tp, (bytearray, array.array)):
        return _ARRAY_OF_PRIMITIVES
    if issubclass(tp, list):
        return TypeShape(ShapeKind.ARRAY, rank=1)
    if issubclass(tp, np.ndarray):
        return TypeShape(ShapeKind.ARRAY)
    if issubclass(tp, (tuple, frozenset)):
        return VALUE_AGGREGATE
    if issubclass(tp, (dict, set, collections.deque)):
        return COLLECTION
    return REFERENCE_AGGREGATE


def classify_value(value: Any) -> TypeShape:
    """Classify the runtime type of a value, refining array shapes from the instance.

    Args:
        value: Any object.

    Returns:
        Shape of `type(value)`; for ndarrays the rank and element shape come from
        `ndim` and `dtype`.
    """
    if isinstance(value, np.ndarray):
        return array_shape(value.ndim, value.dtype.hasobject)
    return classify(type(value))


def array_shape(rank: int, object_elements: bool) -> TypeShape:
    """Shape of an ndarray with the given rank and element storage.

    Args:
        rank: Number of dimensions.
        object_elements: True if the array stores Python object references.

    Returns:
        Array shape; object arrays resolve their elements at clone time.
    """
    return TypeShape(
        ShapeKind.ARRAY,
        rank=rank,
        element=None if object_elements else PRIMITIVE,
    )


def _try_classify(tp: Any) -> TypeShape | None:
    try:
        return classify(tp)
    except TypeError:
        return None


def declared_shape(annotation: Any) -> TypeShape | None:
    """Shape declared by an annotation, or None if it names no concrete type.

    Args:
        annotation: Resolved annotation object.

    Returns:
        Shape, or None for `Any`, unions, type variables and unresolved strings.
    """
    if annotation is None or isinstance(annotation, str):
        return None
    return _try_classify(annotation)
