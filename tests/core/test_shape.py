"""Tests for type shape classification."""

import collections
import datetime
import enum
from collections import OrderedDict, defaultdict, deque, namedtuple
from dataclasses import dataclass
from decimal import Decimal
from typing import Annotated, Any, Optional

import numpy as np
import pytest

from clonekit import ShapeKind, TypeShape, classify, classify_value
from clonekit.core.shape import declared_shape, is_opaque_type


class Color(enum.Enum):
    RED = 1


@dataclass
class Point:
    x: int = 0
    y: int = 0


Pair = namedtuple("Pair", ["left", "right"])


class TestPrimitives:
    """Atomic values and handles are classified as primitives."""

    @pytest.mark.parametrize(
        "tp",
        [
            int,
            bool,
            float,
            complex,
            str,
            bytes,
            type(None),
            Decimal,
            datetime.datetime,
            datetime.timedelta,
            Color,
            np.float64,
            np.dtype,
        ],
    )
    def test_atomic_types(self, tp: type) -> None:
        assert classify(tp).kind is ShapeKind.PRIMITIVE

    @pytest.mark.parametrize("tp", [type, type(len), type(lambda: None)])
    def test_opaque_types_are_primitive(self, tp: type) -> None:
        """Classes and callables are passed by reference."""
        assert is_opaque_type(tp)
        assert classify(tp).kind is ShapeKind.PRIMITIVE

    def test_enum_member_value(self) -> None:
        assert classify_value(Color.RED).kind is ShapeKind.PRIMITIVE


class TestAggregates:
    """Tuples are value aggregates; everything unrecognized is a reference aggregate."""

    @pytest.mark.parametrize("tp", [tuple, frozenset, Pair])
    def test_value_aggregates(self, tp: type) -> None:
        assert classify(tp).kind is ShapeKind.VALUE_AGGREGATE

    def test_user_class_is_reference_aggregate(self) -> None:
        assert classify(Point).kind is ShapeKind.REFERENCE_AGGREGATE

    def test_plain_object_is_reference_aggregate(self) -> None:
        class Plain:
            pass

        assert classify(Plain).kind is ShapeKind.REFERENCE_AGGREGATE


class TestArrays:
    """Arrays carry rank and element shape."""

    def test_list_has_dynamic_elements(self) -> None:
        shape = classify(list)
        assert shape == TypeShape(ShapeKind.ARRAY, rank=1)
        assert not shape.has_primitive_elements

    def test_parametrized_list_of_primitives(self) -> None:
        shape = classify(list[int])
        assert shape.rank == 1
        assert shape.has_primitive_elements

    def test_parametrized_list_of_aggregates(self) -> None:
        shape = classify(list[Point])
        assert shape.element is not None
        assert shape.element.kind is ShapeKind.REFERENCE_AGGREGATE
        assert not shape.has_primitive_elements

    def test_bytearray_holds_primitives(self) -> None:
        assert classify(bytearray).has_primitive_elements

    def test_numeric_ndarray(self) -> None:
        shape = classify_value(np.zeros((2, 3)))
        assert shape.kind is ShapeKind.ARRAY
        assert shape.rank == 2
        assert shape.has_primitive_elements

    def test_object_ndarray(self) -> None:
        shape = classify_value(np.empty((2, 2, 2), dtype=object))
        assert shape.rank == 3
        assert shape.element is None


class TestCollections:
    @pytest.mark.parametrize("tp", [dict, set, deque, OrderedDict, defaultdict, collections.Counter])
    def test_keyed_and_unordered_containers(self, tp: type) -> None:
        assert classify(tp).kind is ShapeKind.COLLECTION

    def test_parametrized_dict(self) -> None:
        assert classify(dict[str, Point]).kind is ShapeKind.COLLECTION


class TestAnnotations:
    def test_annotated_unwraps(self) -> None:
        assert classify(Annotated[int, "meta"]).kind is ShapeKind.PRIMITIVE

    @pytest.mark.parametrize("annotation", [Any, int | None, Optional[Point], "Point"])
    def test_unclassifiable_annotations_raise(self, annotation: Any) -> None:
        with pytest.raises(TypeError):
            classify(annotation)

    def test_declared_shape_of_concrete_type(self) -> None:
        assert declared_shape(int) == TypeShape(ShapeKind.PRIMITIVE)

    @pytest.mark.parametrize("annotation", [None, "int", Any, int | None])
    def test_declared_shape_without_concrete_type(self, annotation: Any) -> None:
        assert declared_shape(annotation) is None
