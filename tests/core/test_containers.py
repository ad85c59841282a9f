"""Tests for container rebuilding helpers."""

import array
from collections import OrderedDict, defaultdict, deque, namedtuple

import numpy as np
import pytest

from clonekit import ConstructionError
from clonekit.core import containers

Pair = namedtuple("Pair", ["left", "right"])


class NeedsArgs:
    def __init__(self, value: int) -> None:
        self.value = value


class NewNeedsArgs:
    def __new__(cls, value: int) -> "NewNeedsArgs":
        return super().__new__(cls)


class TaggedList(list):
    pass


class TestConstruction:
    def test_allocate_skips_init(self) -> None:
        instance = containers.allocate(NeedsArgs)
        assert isinstance(instance, NeedsArgs)
        assert not hasattr(instance, "value")

    def test_allocate_requiring_new_args_raises(self) -> None:
        with pytest.raises(ConstructionError):
            containers.allocate(NewNeedsArgs)

    def test_construct_requires_default_path(self) -> None:
        with pytest.raises(ConstructionError) as exc_info:
            containers.construct(NeedsArgs)
        assert isinstance(exc_info.value, TypeError)


class TestRebuild:
    def test_named_tuple_keeps_type(self) -> None:
        rebuilt = containers.rebuild_tuple(Pair(1, 2), [3, 4])
        assert rebuilt == Pair(3, 4)
        assert type(rebuilt) is Pair

    def test_list_subclass_keeps_type(self) -> None:
        rebuilt = containers.rebuild_list(TaggedList([1]), [1, 2])
        assert type(rebuilt) is TaggedList
        assert rebuilt == [1, 2]

    def test_defaultdict_keeps_factory(self) -> None:
        original = defaultdict(list, {"a": [1]})
        rebuilt = containers.rebuild_dict(original, original.items())
        assert rebuilt.default_factory is list
        assert rebuilt == original

    def test_ordered_dict_keeps_order(self) -> None:
        original = OrderedDict([("b", 1), ("a", 2)])
        rebuilt = containers.rebuild_collection(original, lambda value: value)
        assert type(rebuilt) is OrderedDict
        assert list(rebuilt) == ["b", "a"]

    def test_deque_keeps_maxlen(self) -> None:
        rebuilt = containers.rebuild_deque(deque([1, 2], maxlen=3), [1, 2])
        assert rebuilt.maxlen == 3

    def test_value_aggregate_converts_items(self) -> None:
        rebuilt = containers.rebuild_value_aggregate(frozenset({1, 2}), lambda value: value * 10)
        assert rebuilt == frozenset({10, 20})


class TestArrays:
    def test_duplicate_ndarray(self) -> None:
        original = np.arange(6).reshape(2, 3)
        copy = containers.duplicate_array(original)
        assert copy is not original
        assert np.array_equal(copy, original)
        assert not np.shares_memory(copy, original)

    def test_duplicate_array_module_array(self) -> None:
        original = array.array("i", [1, 2, 3])
        copy = containers.duplicate_array(original)
        assert copy is not original
        assert copy == original

    def test_duplicate_list_shares_elements(self) -> None:
        inner = [1]
        copy = containers.duplicate_array([inner])
        assert copy[0] is inner

    def test_empty_object_array(self) -> None:
        original = np.empty((2, 2), dtype=object)
        original[0, 0] = "x"
        empty = containers.empty_object_array(original)
        assert empty.shape == (2, 2)
        assert empty.dtype == object
        assert all(cell is None for cell in empty.flat)
