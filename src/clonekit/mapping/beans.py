"""Structural correlator: copies identically named members between two types.

The correlation table is computed once per (source, destination) pair and cached
for the life of the process. Transfer is plain assignment: values are neither
cloned nor classified, so both objects share whatever the member holds.

Usage:
    @dataclass
    class Person:
        name: str = ""
        age: int = 0

    @dataclass
    class PersonRecord:
        name: str = ""
        age: int = 0
        archived: bool = False

    beans = BeansCopy(Person, PersonRecord)
    record = beans.to_b(Person(name="x", age=5))  # PersonRecord("x", 5, False)
    person = beans.to_a(record)                   # Person("x", 5)
"""

from __future__ import annotations

import logging
import threading
import warnings
from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from pydantic import ConfigDict, PydanticUserError, TypeAdapter, ValidationError

from clonekit.config import get_settings
from clonekit.core import containers
from clonekit.core.catalog import (
    MemberDescriptor,
    MemberKind,
    dynamic_attributes,
    public_members,
    resolve_annotation,
    storage_names,
)
from clonekit.core.errors import ConstructionError, MemberAssignmentError
from clonekit.mapping.models import CorrelationEntry, CorrelationTable

logger = logging.getLogger(__name__)

A = TypeVar("A")
B = TypeVar("B")

_STRICT = ConfigDict(strict=True, arbitrary_types_allowed=True)

_tables: dict[tuple[type, type], CorrelationTable] = {}
_tables_lock = threading.Lock()


def correlation_table(source_type: type, destination_type: type) -> CorrelationTable:
    """Get the correlation table for a type pair, building it on first use.

    Args:
        source_type: Type A.
        destination_type: Type B.

    Returns:
        Cached CorrelationTable.
    """
    key = (source_type, destination_type)
    table = _tables.get(key)
    if table is None:
        with _tables_lock:
            table = _tables.get(key)
            if table is None:
                table = _build_table(source_type, destination_type)
                _tables[key] = table
    return table


def clear_tables() -> None:
    """Drop every cached correlation table."""
    with _tables_lock:
        _tables.clear()


def _build_table(source_type: type, destination_type: type) -> CorrelationTable:
    destination_members = {m.name: m for m in _correlatable_members(destination_type)}
    entries: list[CorrelationEntry] = []
    for source in _correlatable_members(source_type):
        destination = destination_members.get(source.name)
        if destination is None:
            continue
        entries.append(
            CorrelationEntry(
                name=source.name,
                source=source,
                destination=destination,
                source_adapter=_strict_adapter(source),
                destination_adapter=_strict_adapter(destination),
            )
        )

    if not entries:
        warnings.warn(
            f"{source_type.__qualname__} and {destination_type.__qualname__} have no "
            "public member in common; correlated copies will be default instances",
            UserWarning,
            stacklevel=4,
        )
    logger.debug(
        "Correlated %s -> %s on %d members",
        source_type.__qualname__,
        destination_type.__qualname__,
        len(entries),
    )
    return CorrelationTable(source_type, destination_type, tuple(entries))


def _correlatable_members(cls: type) -> tuple[MemberDescriptor, ...]:
    """Public members of a type plus public attributes its default instance sets.

    Attributes assigned in `__init__` without a class-level declaration only
    show up on an instance, so one is built with `cls()`. Types that cannot be
    default-constructed contribute their declared members only.
    """
    declared = public_members(cls)
    try:
        instance = containers.construct(cls)
    except ConstructionError:
        logger.debug("No default instance of %s; correlating declared members only", cls)
        return declared
    assigned = tuple(
        MemberDescriptor(
            name=name,
            storage_name=name,
            kind=MemberKind.FIELD,
            declaring_type=cls,
        )
        for name, _ in dynamic_attributes(instance, storage_names(declared))
        if not name.startswith("_")
    )
    return (*declared, *assigned)


def _strict_adapter(member: MemberDescriptor) -> TypeAdapter[Any] | None:
    annotation = resolve_annotation(member)
    if annotation is None or isinstance(annotation, str):
        return None
    try:
        return TypeAdapter(annotation, config=_STRICT)
    except (PydanticUserError, NameError, TypeError):
        return None


class BeansCopy(Generic[A, B]):
    """Bidirectional name-based copier between two unrelated types.

    Both types must be constructible with no arguments. Public fields, public
    readable properties and public attributes set by `cls()` are correlated by
    exact name; assigning to a read-only
    property or a value the member's annotation rejects raises
    MemberAssignmentError.

    Args:
        source_type: Type A.
        destination_type: Type B.
    """

    def __init__(self, source_type: type[A], destination_type: type[B]):
        """Initialize correlator, building the shared table if needed.

        Args:
            source_type: Type A.
            destination_type: Type B.
        """
        self._source_type = source_type
        self._destination_type = destination_type
        self._table = correlation_table(source_type, destination_type)

    @property
    def table(self) -> CorrelationTable:
        """Correlation table shared by every correlator of this type pair."""
        return self._table

    def to_a(self, b: B) -> A:
        """Build a new A from the correlated members of `b`.

        Args:
            b: Destination-type instance to read from.

        Returns:
            Default-constructed A with correlated members assigned.

        Raises:
            ConstructionError: If A cannot be constructed with `A()`.
            MemberAssignmentError: If a correlated value cannot be assigned.
        """
        a = containers.construct(self._source_type)
        for entry in self._table.entries:
            _transfer(b, entry.destination, a, entry.source, entry.source_adapter)
        return a

    def to_b(self, a: A) -> B:
        """Build a new B from the correlated members of `a`.

        Args:
            a: Source-type instance to read from.

        Returns:
            Default-constructed B with correlated members assigned; B members
            without a counterpart keep their defaults.

        Raises:
            ConstructionError: If B cannot be constructed with `B()`.
            MemberAssignmentError: If a correlated value cannot be assigned.
        """
        b = containers.construct(self._destination_type)
        for entry in self._table.entries:
            _transfer(a, entry.source, b, entry.destination, entry.destination_adapter)
        return b

    def to_a_list(self, bs: Iterable[B]) -> list[A]:
        """Map every B in order to a new A."""
        return [self.to_a(b) for b in bs]

    def to_b_list(self, as_: Iterable[A]) -> list[B]:
        """Map every A in order to a new B."""
        return [self.to_b(a) for a in as_]

    def __repr__(self) -> str:
        return (
            f"BeansCopy({self._source_type.__qualname__}, {self._destination_type.__qualname__})"
        )


def _transfer(
    source: Any,
    source_member: MemberDescriptor,
    instance: Any,
    member: MemberDescriptor,
    adapter: TypeAdapter[Any] | None,
) -> None:
    try:
        value = source_member.get(source)
    except AttributeError:
        return
    owner = type(instance).__qualname__
    if adapter is not None and get_settings().check_assignment_types:
        try:
            adapter.validate_python(value)
        except ValidationError as e:
            raise MemberAssignmentError(
                f"Cannot assign {type(value).__qualname__} to {owner}.{member.name}: "
                f"{e.errors()[0]['msg']}"
            ) from e
    try:
        member.set(instance, value)
    except AttributeError as e:
        raise MemberAssignmentError(f"{owner}.{member.name} cannot be assigned: {e}") from e
