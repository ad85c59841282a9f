"""Source generation for compiled clone routines.

For one (type, strategy) pair the generator writes a plain Python function that
performs exactly what the reflective cloner would do for that type, with the
member walk unrolled and every accessor bound as a constant. The source is
compiled once; the resulting function is stored in the ClonerRegistry.

Example output for `deep_field` of `Point(x: int, tags: list)`:

    def deep_field_Point(original):
        clone = _allocate(_cls)
        try:
            value = _getattribute(original, 'x')
        except AttributeError:
            pass
        else:
            _setattr(clone, 'x', value if value.__class__ is _type_0 else _dispatch(value))
        try:
            value = _getattribute(original, 'tags')
        except AttributeError:
            pass
        else:
            _setattr(clone, 'tags', _dispatch(value))
        for name, value in _dynamic_attributes(original, _declared):
            _setattr(clone, name, _dispatch(value))
        return clone
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import numpy as np

from clonekit.core import containers
from clonekit.core.catalog import (
    MemberDescriptor,
    MemberKind,
    dynamic_attributes,
    members,
    resolve_annotation,
    storage_names,
)
from clonekit.core.shape import ShapeKind, TypeShape
from clonekit.core.types import CloneStrategy

_NON_IDENTIFIER_RE = re.compile(r"\W")


class RoutineWriter:
    """Accumulates the body of one generated function and its global namespace."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._lines: list[str] = []
        self._depth = 1
        self._counter = 0
        self.namespace: dict[str, Any] = {}

    def line(self, text: str) -> None:
        """Append one statement at the current indentation."""
        self._lines.append("    " * self._depth + text)

    @contextmanager
    def block(self, header: str) -> Iterator[None]:
        """Append a compound statement header and indent its body."""
        self.line(header)
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    def bind(self, name: str, value: Any) -> str:
        """Expose a fixed object to the generated code under a fixed name."""
        self.namespace[name] = value
        return name

    def constant(self, prefix: str, value: Any) -> str:
        """Expose an object under a fresh numbered name."""
        name = f"_{prefix}_{self._counter}"
        self._counter += 1
        return self.bind(name, value)

    @property
    def source(self) -> str:
        """Complete source of the function."""
        return f"def {self._name}(original):\n" + "\n".join(self._lines) + "\n"

    def compile(self) -> Callable[[Any], Any]:
        """Compile the accumulated source and return the function object.

        The source is kept on the function as `__clone_source__`.
        """
        source = self.source
        code = compile(source, f"<clonekit {self._name}>", "exec")
        exec(code, self.namespace)  # nosec B102 - source is generated from type metadata only
        routine = self.namespace[self._name]
        routine.__clone_source__ = source
        return routine


def generate_routine(
    cls: type,
    shape: TypeShape,
    strategy: CloneStrategy,
    dispatch: Callable[[Any], Any],
    promote: Callable[[Any], Any],
) -> Callable[[Any], Any]:
    """Generate and compile the clone routine for one type and strategy.

    Args:
        cls: Concrete type the routine clones.
        shape: Shape of `cls` (for ndarrays, refined with rank and element storage).
        strategy: Copy strategy.
        dispatch: Clones a nested value by looking up the routine for its runtime
            type under the same strategy; returns None for None.
        promote: Shallow-property conversion of a member value (rebuilds value
            aggregates one level, passes everything else through).

    Returns:
        Compiled routine taking the original and returning the clone.
    """
    writer = RoutineWriter(_routine_name(cls, strategy))
    writer.bind("_cls", cls)
    writer.bind("_dispatch", dispatch)
    writer.bind("_promote", promote)

    match shape.kind:
        case ShapeKind.PRIMITIVE:
            writer.line("return original")
            return writer.compile()
        case ShapeKind.VALUE_AGGREGATE:
            _write_value_aggregate(writer, strategy)
            return writer.compile()
        case ShapeKind.ARRAY:
            _write_array(writer, cls, shape, strategy)
        case ShapeKind.COLLECTION:
            _write_collection(writer, cls, strategy)
        case _:
            _write_reference_aggregate(writer, cls, strategy)
            writer.line("return clone")
            return writer.compile()

    if strategy.member_kind is MemberKind.FIELD and _carries_fields(cls):
        _write_field_transfer(writer, cls, strategy)
    writer.line("return clone")
    return writer.compile()


def _write_value_aggregate(writer: RoutineWriter, strategy: CloneStrategy) -> None:
    if strategy is CloneStrategy.SHALLOW_FIELD:
        writer.line("return original")
        return
    writer.bind("_rebuild", containers.rebuild_value_aggregate)
    convert = "_promote" if strategy is CloneStrategy.SHALLOW_PROPERTY else "_dispatch"
    writer.line(f"return _rebuild(original, {convert})")


def _write_array(
    writer: RoutineWriter, cls: type, shape: TypeShape, strategy: CloneStrategy
) -> None:
    if not strategy.deep or shape.has_primitive_elements:
        writer.bind("_duplicate_array", containers.duplicate_array)
        writer.line("clone = _duplicate_array(original)")
        return
    if not issubclass(cls, np.ndarray):
        writer.bind("_rebuild_list", containers.rebuild_list)
        writer.line("clone = _rebuild_list(original, [_dispatch(item) for item in original])")
        return
    _write_object_array(writer, shape.rank or 0)


def _write_object_array(writer: RoutineWriter, rank: int) -> None:
    """Nested loops, one per dimension, outermost first.

    Each inner index is reset to zero whenever its enclosing dimension advances,
    giving the same row-major order as the reflective mixed-radix walk.
    """
    writer.bind("_empty_object_array", containers.empty_object_array)
    writer.line("clone = _empty_object_array(original)")
    if rank == 0:
        _write_object_cell(writer, "()")
        return

    lengths = [f"length_{dimension}" for dimension in range(rank)]
    indexes = [f"index_{dimension}" for dimension in range(rank)]
    writer.line(f"({', '.join(lengths)},) = original.shape")
    writer.line(f"{indexes[0]} = 0")
    _write_dimension(writer, 0, rank, lengths, indexes)


def _write_dimension(
    writer: RoutineWriter,
    dimension: int,
    rank: int,
    lengths: list[str],
    indexes: list[str],
) -> None:
    with writer.block(f"while {indexes[dimension]} < {lengths[dimension]}:"):
        if dimension + 1 < rank:
            writer.line(f"{indexes[dimension + 1]} = 0")
            _write_dimension(writer, dimension + 1, rank, lengths, indexes)
        else:
            _write_object_cell(writer, ", ".join(indexes))
        writer.line(f"{indexes[dimension]} += 1")


def _write_object_cell(writer: RoutineWriter, position: str) -> None:
    writer.line(f"element = original[{position}]")
    with writer.block("if element is not None:"):
        writer.line(f"clone[{position}] = _dispatch(element)")


def _write_collection(writer: RoutineWriter, cls: type, strategy: CloneStrategy) -> None:
    convert = "_dispatch" if strategy.deep else ""
    if issubclass(cls, dict):
        writer.bind("_rebuild_dict", containers.rebuild_dict)
        pairs = f"[({convert}(key), {convert}(value)) for key, value in original.items()]"
        writer.line(f"clone = _rebuild_dict(original, {pairs})")
    elif issubclass(cls, set):
        writer.bind("_rebuild_set", containers.rebuild_set)
        writer.line(f"clone = _rebuild_set(original, [{convert}(item) for item in original])")
    else:
        writer.bind("_rebuild_deque", containers.rebuild_deque)
        writer.line(f"clone = _rebuild_deque(original, [{convert}(item) for item in original])")


def _write_reference_aggregate(writer: RoutineWriter, cls: type, strategy: CloneStrategy) -> None:
    if strategy.member_kind is MemberKind.FIELD:
        writer.bind("_allocate", containers.allocate)
        writer.line("clone = _allocate(_cls)")
        _write_field_transfer(writer, cls, strategy)
        return
    writer.bind("_construct", containers.construct)
    writer.line("clone = _construct(_cls)")
    for member in members(cls, MemberKind.PROPERTY):
        _write_member(writer, member, strategy)


def _write_field_transfer(writer: RoutineWriter, cls: type, strategy: CloneStrategy) -> None:
    catalog = members(cls, MemberKind.FIELD)
    for member in catalog:
        _write_member(writer, member, strategy)
    writer.bind("_dynamic_attributes", dynamic_attributes)
    writer.bind("_declared", storage_names(catalog))
    writer.bind("_setattr", object.__setattr__)
    with writer.block("for name, value in _dynamic_attributes(original, _declared):"):
        writer.line(f"_setattr(clone, name, {_convert_expression(writer, None, strategy)})")


def _write_member(writer: RoutineWriter, member: MemberDescriptor, strategy: CloneStrategy) -> None:
    if member.kind is MemberKind.FIELD:
        writer.bind("_getattribute", object.__getattribute__)
        writer.bind("_setattr", object.__setattr__)
        read = f"_getattribute(original, {member.storage_name!r})"
        write = f"_setattr(clone, {member.storage_name!r}, {{}})"
    else:
        getter = writer.constant("fget", member.accessor.fget)  # type: ignore[union-attr]
        setter = writer.constant("fset", member.accessor.fset)  # type: ignore[union-attr]
        read = f"{getter}(original)"
        write = f"{setter}(clone, {{}})"

    with writer.block("try:"):
        writer.line(f"value = {read}")
    with writer.block("except AttributeError:"):
        writer.line("pass")
    with writer.block("else:"):
        writer.line(write.format(_convert_expression(writer, member, strategy)))


def _convert_expression(
    writer: RoutineWriter,
    member: MemberDescriptor | None,
    strategy: CloneStrategy,
) -> str:
    if strategy is CloneStrategy.SHALLOW_FIELD:
        return "value"
    if strategy is CloneStrategy.SHALLOW_PROPERTY:
        return "_promote(value)"
    declared = _declared_atomic_type(member) if member is not None else None
    if declared is None:
        return "_dispatch(value)"
    name = writer.constant("type", declared)
    return f"value if value.__class__ is {name} else _dispatch(value)"


def _declared_atomic_type(member: MemberDescriptor) -> type | None:
    """Concrete class of a member declared with a primitive annotation, if any."""
    shape = member.declared_shape()
    if shape is None or shape.kind is not ShapeKind.PRIMITIVE:
        return None
    annotation = resolve_annotation(member)
    return annotation if isinstance(annotation, type) else None


def _carries_fields(cls: type) -> bool:
    return cls not in containers.BUILTIN_CONTAINERS and not issubclass(cls, (tuple, frozenset))


def _routine_name(cls: type, strategy: CloneStrategy) -> str:
    return f"{strategy.value}_{_NON_IDENTIFIER_RE.sub('_', cls.__qualname__)}"
