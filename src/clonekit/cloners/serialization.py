"""Serialization cloner: deep clones through a pickle round trip.

The pickler substitutes a surrogate for every reference aggregate, so types do
not need to be picklable themselves: the surrogate writes each catalog member
under its name on the way out and assigns the same names back on the way in.
Classes, functions, modules and other opaque handles never enter the byte
stream; they are passed by reference through `persistent_id`, which also lets
locally defined classes round-trip.

A structural round trip cannot share references with the original, so the
shallow strategies are not supported.

Usage:
    cloner = SerializationCloner()
    copy = cloner.deep_field_clone(original)
"""

from __future__ import annotations

import io
import pickle  # nosec B403 - only data produced in-process by _SurrogatePickler is loaded
from typing import Any, TypeVar

from clonekit.config import get_settings
from clonekit.core import containers
from clonekit.core.catalog import MemberKind, dynamic_attributes, members, storage_names
from clonekit.core.errors import ShallowCloneNotSupportedError
from clonekit.core.shape import ShapeKind, classify_value
from clonekit.core.types import Clone

T = TypeVar("T")

_PICKLE_NATIVE = frozenset({type(None), bool, int, float, complex, str, bytes})


class _SurrogatePickler(pickle.Pickler):
    """Pickler that reduces reference aggregates through their member catalog."""

    def __init__(self, file: io.BytesIO, protocol: int, kind: MemberKind, handles: list[Any]):
        super().__init__(file, protocol)
        self._kind = kind
        self._handles = handles

    def persistent_id(self, obj: Any) -> int | None:
        if type(obj) in _PICKLE_NATIVE:
            return None
        if classify_value(obj).kind is not ShapeKind.PRIMITIVE:
            return None
        self._handles.append(obj)
        return len(self._handles) - 1

    def reducer_override(self, obj: Any) -> Any:
        if classify_value(obj).kind is not ShapeKind.REFERENCE_AGGREGATE:
            return NotImplemented
        cls = type(obj)
        catalog = members(cls, self._kind)
        state: dict[str, Any] = {}
        for member in catalog:
            try:
                state[member.storage_name] = member.get(obj)
            except AttributeError:
                continue
        if self._kind is MemberKind.FIELD:
            state.update(dynamic_attributes(obj, storage_names(catalog)))
            return (containers.allocate, (cls,), state, None, None, _restore_fields)
        return (containers.construct, (cls,), state, None, None, _restore_properties)


class _HandleUnpickler(pickle.Unpickler):
    """Unpickler resolving pass-through handles written by _SurrogatePickler."""

    def __init__(self, file: io.BytesIO, handles: list[Any]):
        super().__init__(file)
        self._handles = handles

    def persistent_load(self, pid: Any) -> Any:
        return self._handles[pid]


def _restore_fields(obj: Any, state: dict[str, Any]) -> None:
    catalog = members(type(obj), MemberKind.FIELD)
    for member in catalog:
        if member.storage_name in state:
            member.set(obj, state[member.storage_name])
    declared = storage_names(catalog)
    for name, value in state.items():
        if name not in declared:
            object.__setattr__(obj, name, value)


def _restore_properties(obj: Any, state: dict[str, Any]) -> None:
    for member in members(type(obj), MemberKind.PROPERTY):
        if member.storage_name in state:
            member.set(obj, state[member.storage_name])


class SerializationCloner:
    """Clones objects by serializing and deserializing them in memory.

    Markedly slower than the other backends, but independent of them: useful as
    a cross-check and for graphs that other backends cannot walk.

    Args:
        protocol: Pickle protocol (default: `CloningSettings.pickle_protocol`).
    """

    def __init__(self, protocol: int | None = None):
        """Initialize serialization cloner.

        Args:
            protocol: Pickle protocol (default: read from settings at each clone).
        """
        self._protocol = protocol

    @property
    def protocol(self) -> int:
        """Pickle protocol of the next round trip.

        Without an explicit protocol the current settings are consulted on every
        clone, so `reset_settings()` takes effect on shared instances.
        """
        if self._protocol is not None:
            return self._protocol
        return get_settings().pickle_protocol

    def shallow_field_clone(self, original: T) -> Clone[T]:
        """Not supported: a serialization round trip always yields a deep clone.

        Raises:
            ShallowCloneNotSupportedError: Always.
        """
        raise ShallowCloneNotSupportedError("The serialization cloner cannot create shallow clones")

    def shallow_property_clone(self, original: T) -> Clone[T]:
        """Not supported: a serialization round trip always yields a deep clone.

        Raises:
            ShallowCloneNotSupportedError: Always.
        """
        raise ShallowCloneNotSupportedError("The serialization cloner cannot create shallow clones")

    def deep_field_clone(self, original: T) -> Clone[T]:
        """Create a deep clone by round-tripping declared fields.

        Args:
            original: Object to clone.

        Returns:
            Deep clone; None for None.
        """
        if original is None:
            return None  # type: ignore[return-value]
        return self._round_trip(original, MemberKind.FIELD)

    def deep_property_clone(self, original: T) -> Clone[T]:
        """Create a deep clone by round-tripping read/write properties.

        Args:
            original: Object to clone.

        Returns:
            Deep clone; None for None.

        Raises:
            ConstructionError: If a type in the graph cannot be constructed with `cls()`.
        """
        if original is None:
            return None  # type: ignore[return-value]
        return self._round_trip(original, MemberKind.PROPERTY)

    def _round_trip(self, original: Any, kind: MemberKind) -> Any:
        handles: list[Any] = []
        with io.BytesIO() as buffer:
            _SurrogatePickler(buffer, self.protocol, kind, handles).dump(original)
            buffer.seek(0)
            return _HandleUnpickler(buffer, handles).load()
