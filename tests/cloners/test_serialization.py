"""Tests for the serialization cloner."""

import threading
from dataclasses import dataclass, field
from typing import Any

import pytest

from clonekit import (
    CloneFactory,
    ConstructionError,
    SerializationCloner,
    ShallowCloneNotSupportedError,
    reset_settings,
)


@dataclass
class Document:
    title: str = ""
    pages: list[str] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)


class Guarded:
    """Holds members pickle cannot serialize on its own."""

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.transform = lambda value: value * 2
        self.values = [1, 2, 3]


class Pinned:
    def __init__(self, key: str) -> None:
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    @key.setter
    def key(self, value: str) -> None:
        self._key = value


class Refuses:
    """Custom reduction must not be consulted."""

    def __init__(self) -> None:
        self.data = [1]

    def __reduce__(self):
        raise AssertionError("reduce must not be called")


class TestShallowUnsupported:
    def test_shallow_field_raises(self, serialization_cloner) -> None:
        with pytest.raises(ShallowCloneNotSupportedError):
            serialization_cloner.shallow_field_clone(Document())

    def test_shallow_property_raises(self, serialization_cloner) -> None:
        with pytest.raises(NotImplementedError):
            serialization_cloner.shallow_property_clone(Document())


class TestDeepClones:
    def test_deep_field(self, serialization_cloner) -> None:
        original = Document("t", ["p1", "p2"], {"author": ["ada"]})
        clone = serialization_cloner.deep_field_clone(original)

        assert clone == original
        assert clone.pages is not original.pages
        assert clone.meta["author"] is not original.meta["author"]

    def test_none(self, serialization_cloner) -> None:
        assert serialization_cloner.deep_field_clone(None) is None
        assert serialization_cloner.deep_property_clone(None) is None

    def test_unpicklable_handles_pass_through(self, serialization_cloner) -> None:
        original = Guarded()
        clone = serialization_cloner.deep_field_clone(original)

        assert clone.lock is original.lock
        assert clone.transform is original.transform
        assert clone.values == [1, 2, 3]
        assert clone.values is not original.values

    def test_locally_defined_types(self, serialization_cloner) -> None:
        @dataclass
        class Local:
            items: list[int] = field(default_factory=list)

        original = Local([1, 2])
        clone = serialization_cloner.deep_field_clone(original)
        assert type(clone) is Local
        assert clone == original
        assert clone.items is not original.items

    def test_custom_reduce_is_bypassed(self, serialization_cloner) -> None:
        clone = serialization_cloner.deep_field_clone(Refuses())
        assert clone.data == [1]

    def test_shared_references_stay_shared(self, serialization_cloner) -> None:
        """Aliasing inside the graph survives the round trip."""
        shared = ["x"]
        original = Document(pages=shared, meta={"same": shared})
        clone = serialization_cloner.deep_field_clone(original)
        assert clone.meta["same"] is clone.pages
        assert clone.pages is not shared

    def test_deep_property(self, serialization_cloner) -> None:
        original = [Document("t")]
        clone = serialization_cloner.deep_property_clone(original)
        assert clone == [Document()]

    def test_deep_property_requires_default_construction(self, serialization_cloner) -> None:
        with pytest.raises(ConstructionError):
            serialization_cloner.deep_property_clone(Pinned("k"))

    def test_explicit_protocol(self) -> None:
        cloner = SerializationCloner(protocol=2)
        assert cloner.deep_field_clone(Document("t")) == Document("t")

    def test_protocol_follows_settings(self, serialization_cloner, monkeypatch) -> None:
        """Without an explicit protocol the current settings are read on every clone."""
        monkeypatch.setenv("CLONEKIT_PICKLE_PROTOCOL", "3")
        reset_settings()
        assert serialization_cloner.protocol == 3

        monkeypatch.setenv("CLONEKIT_PICKLE_PROTOCOL", "4")
        reset_settings()
        assert serialization_cloner.protocol == 4
        assert serialization_cloner.deep_field_clone(Document("t")) == Document("t")

    def test_explicit_protocol_ignores_settings(self, monkeypatch) -> None:
        monkeypatch.setenv("CLONEKIT_PICKLE_PROTOCOL", "3")
        reset_settings()
        assert SerializationCloner(protocol=2).protocol == 2

    def test_satisfies_clone_factory_protocol(self, serialization_cloner) -> None:
        assert isinstance(serialization_cloner, CloneFactory)
