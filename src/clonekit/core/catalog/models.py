"""Catalog models: member kinds and member descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

from clonekit.core.errors import UnsupportedMemberKindError

if TYPE_CHECKING:
    from clonekit.core.shape import TypeShape


class MemberKind(Enum):
    """Which members of a type drive a copy."""

    FIELD = auto()  # Declared instance storage: annotations and __slots__
    PROPERTY = auto()  # property objects with both getter and setter


@dataclass(frozen=True, slots=True)
class MemberDescriptor:
    """One copyable member of a type.

    Attributes:
        name: Name as written in the class body.
        storage_name: Attribute name on the instance (private names are mangled).
        kind: Field or property.
        declaring_type: Class whose body declares the member.
        annotation: Raw annotation (may be a string under postponed evaluation).
        accessor: The property object for property members, None for fields.
    """

    name: str
    storage_name: str
    kind: MemberKind
    declaring_type: type
    annotation: Any = None
    accessor: property | None = None

    def get(self, instance: Any) -> Any:
        """Read the member from an instance.

        Fields are read with `object.__getattribute__`, bypassing any
        `__getattr__`/`__getattribute__` override on the instance.

        Args:
            instance: Object to read from.

        Returns:
            Current member value.

        Raises:
            AttributeError: If the field is unset on this instance.
            UnsupportedMemberKindError: If the descriptor kind is unknown.
        """
        if self.kind is MemberKind.FIELD:
            return object.__getattribute__(instance, self.storage_name)
        if self.kind is MemberKind.PROPERTY and self.accessor is not None:
            return self.accessor.__get__(instance, type(instance))
        raise UnsupportedMemberKindError(
            f"Member {self.name!r} of {self.declaring_type.__qualname__} has unsupported kind "
            f"{self.kind!r}"
        )

    def set(self, instance: Any, value: Any) -> None:
        """Write the member on an instance.

        Fields are written with `object.__setattr__`, so frozen dataclasses and
        validating `__setattr__` hooks are bypassed.

        Args:
            instance: Object to write to.
            value: New member value.

        Raises:
            AttributeError: If a property has no setter.
            UnsupportedMemberKindError: If the descriptor kind is unknown.
        """
        if self.kind is MemberKind.FIELD:
            object.__setattr__(instance, self.storage_name, value)
            return
        if self.kind is MemberKind.PROPERTY and self.accessor is not None:
            self.accessor.__set__(instance, value)
            return
        raise UnsupportedMemberKindError(
            f"Member {self.name!r} of {self.declaring_type.__qualname__} has unsupported kind "
            f"{self.kind!r}"
        )

    def declared_shape(self) -> TypeShape | None:
        """Shape declared by the member's annotation, if it names a concrete type."""
        # Late import to avoid circular dependency
        from clonekit.core.catalog.core import resolve_annotation
        from clonekit.core.shape import declared_shape

        return declared_shape(resolve_annotation(self))
