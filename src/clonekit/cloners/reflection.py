"""Reflective cloner: interprets the member catalog on every call.

No set-up cost and no caching: each clone classifies the value, builds the
member catalog of its runtime type and walks it. This is the baseline backend,
always correct and the slowest; the compiled backend must agree with it.

Usage:
    cloner = ReflectionCloner()
    copy = cloner.deep_field_clone(original)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import numpy as np

from clonekit.core import containers
from clonekit.core.catalog import (
    MemberDescriptor,
    dynamic_attributes,
    field_members,
    property_members,
    storage_names,
)
from clonekit.core.shape import ShapeKind, classify_value
from clonekit.core.types import Clone

T = TypeVar("T")


class ReflectionCloner:
    """Clones objects by walking their member catalog at call time.

    Field-based strategies allocate clones without running `__init__`;
    property-based strategies construct them with `cls()` and therefore need a
    default construction path.
    """

    def shallow_field_clone(self, original: T) -> Clone[T]:
        """Create a shallow clone, reusing every referenced object.

        Args:
            original: Object to clone.

        Returns:
            New top-level instance whose fields reference the original's values.
            Arrays and collections get a one-level duplicate; primitives and
            value aggregates are returned as-is.
        """
        if original is None:
            return None  # type: ignore[return-value]
        return _shallow_field(original)

    def deep_field_clone(self, original: T) -> Clone[T]:
        """Create a deep clone through declared fields.

        Args:
            original: Object to clone.

        Returns:
            Clone sharing no aggregate, array or collection with the original.
        """
        if original is None:
            return None  # type: ignore[return-value]
        return _deep_field(original)

    def shallow_property_clone(self, original: T) -> Clone[T]:
        """Create a shallow clone through read/write properties.

        Value aggregates held by properties are rebuilt one level; arrays,
        collections and reference aggregates are shared.

        Args:
            original: Object to clone.

        Returns:
            Default-constructed instance with the original's property values.

        Raises:
            ConstructionError: If the type cannot be constructed with `cls()`.
        """
        if original is None:
            return None  # type: ignore[return-value]
        return _shallow_property(original)

    def deep_property_clone(self, original: T) -> Clone[T]:
        """Create a deep clone through read/write properties.

        Args:
            original: Object to clone.

        Returns:
            Default-constructed instance with recursively cloned property values.

        Raises:
            ConstructionError: If a type in the graph cannot be constructed with `cls()`.
        """
        if original is None:
            return None  # type: ignore[return-value]
        return _deep_property(original)


def _shallow_field(original: Any) -> Any:
    shape = classify_value(original)
    match shape.kind:
        case ShapeKind.PRIMITIVE | ShapeKind.VALUE_AGGREGATE:
            return original
        case ShapeKind.ARRAY:
            clone = containers.duplicate_array(original)
        case ShapeKind.COLLECTION:
            clone = containers.rebuild_collection(original, _same)
        case _:
            clone = containers.allocate(type(original))
    _transfer_fields(original, clone, _same)
    return clone


def _deep_field(original: Any) -> Any:
    if original is None:
        return None
    shape = classify_value(original)
    match shape.kind:
        case ShapeKind.PRIMITIVE:
            return original
        case ShapeKind.VALUE_AGGREGATE:
            return containers.rebuild_value_aggregate(original, _deep_field)
        case ShapeKind.ARRAY:
            clone = _deep_array(original, shape.has_primitive_elements, _deep_field)
        case ShapeKind.COLLECTION:
            clone = containers.rebuild_collection(original, _deep_field)
        case _:
            clone = containers.allocate(type(original))
    _transfer_fields(original, clone, _deep_field)
    return clone


def _shallow_property(original: Any) -> Any:
    shape = classify_value(original)
    match shape.kind:
        case ShapeKind.PRIMITIVE:
            return original
        case ShapeKind.VALUE_AGGREGATE:
            return containers.rebuild_value_aggregate(original, _promote_value_aggregate)
        case ShapeKind.ARRAY:
            return containers.duplicate_array(original)
        case ShapeKind.COLLECTION:
            return containers.rebuild_collection(original, _same)
    clone = containers.construct(type(original))
    _transfer_properties(original, clone, _promote_value_aggregate)
    return clone


def _deep_property(original: Any) -> Any:
    if original is None:
        return None
    shape = classify_value(original)
    match shape.kind:
        case ShapeKind.PRIMITIVE:
            return original
        case ShapeKind.VALUE_AGGREGATE:
            return containers.rebuild_value_aggregate(original, _deep_property)
        case ShapeKind.ARRAY:
            return _deep_array(original, shape.has_primitive_elements, _deep_property)
        case ShapeKind.COLLECTION:
            return containers.rebuild_collection(original, _deep_property)
    clone = containers.construct(type(original))
    _transfer_properties(original, clone, _deep_property)
    return clone


def _same(value: Any) -> Any:
    return value


def _promote_value_aggregate(value: Any) -> Any:
    if value is not None and classify_value(value).kind is ShapeKind.VALUE_AGGREGATE:
        return _shallow_property(value)
    return value


def _deep_array(original: Any, primitive_elements: bool, clone_element: Callable[[Any], Any]) -> Any:
    if primitive_elements:
        return containers.duplicate_array(original)
    if isinstance(original, np.ndarray):
        return _deep_object_array(original, clone_element)
    return containers.rebuild_list(original, [clone_element(item) for item in original])


def _deep_object_array(original: np.ndarray, clone_element: Callable[[Any], Any]) -> np.ndarray:
    """Clone an object ndarray cell by cell across all dimensions.

    The flat index is decomposed into per-dimension indices with a mixed-radix
    counter, least-significant (last) dimension first, which yields row-major
    traversal order.
    """
    clone = containers.empty_object_array(original)
    lengths = original.shape
    dimension_count = original.ndim
    total_element_count = original.size

    if dimension_count == 1:
        for idx in range(total_element_count):
            element = original[idx]
            if element is not None:
                clone[idx] = clone_element(element)
        return clone

    indices = [0] * dimension_count
    for idx in range(total_element_count):
        element_index = idx
        for dimension in range(dimension_count - 1, -1, -1):
            indices[dimension] = element_index % lengths[dimension]
            element_index //= lengths[dimension]
        position = tuple(indices)
        element = original[position]
        if element is not None:
            clone[position] = clone_element(element)
    return clone


def _transfer_fields(original: Any, clone: Any, convert: Callable[[Any], Any]) -> None:
    """Copy declared fields and undeclared instance attributes onto `clone`.

    Exact builtin containers carry no fields; tuple subclasses are immutable and
    already rebuilt, so neither is walked.
    """
    if containers.is_builtin_container(original) or isinstance(original, (tuple, frozenset)):
        return
    catalog = field_members(type(original))
    _transfer(original, clone, catalog, convert)
    for name, value in dynamic_attributes(original, storage_names(catalog)):
        object.__setattr__(clone, name, convert(value))


def _transfer_properties(original: Any, clone: Any, convert: Callable[[Any], Any]) -> None:
    _transfer(original, clone, property_members(type(original)), convert)


def _transfer(
    original: Any,
    clone: Any,
    catalog: tuple[MemberDescriptor, ...],
    convert: Callable[[Any], Any],
) -> None:
    for member in catalog:
        try:
            value = member.get(original)
        except AttributeError:
            continue
        member.set(clone, convert(value))
