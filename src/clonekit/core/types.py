"""Core type definitions for clonekit."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clonekit.core.catalog.models import MemberKind

type Clone[T] = T
"""Type alias indicating a value is an independent copy of its input.

When you see `Clone[T]` in a return type, the returned value has the same runtime
type as the argument. How much of the object graph it shares with the original
depends on the strategy that produced it.
"""


class CloneStrategy(Enum):
    """Copy semantics selected by the caller: depth times member catalog."""

    SHALLOW_FIELD = "shallow_field"
    """New top-level instance, declared fields copied by reference."""

    DEEP_FIELD = "deep_field"
    """Declared fields copied recursively, nothing reference-shared."""

    SHALLOW_PROPERTY = "shallow_property"
    """Default-constructed instance, read/write properties copied by reference."""

    DEEP_PROPERTY = "deep_property"
    """Default-constructed instance, read/write properties copied recursively."""

    @property
    def deep(self) -> bool:
        """Whether nested values are cloned rather than shared."""
        return self in (CloneStrategy.DEEP_FIELD, CloneStrategy.DEEP_PROPERTY)

    @property
    def member_kind(self) -> MemberKind:
        """Member catalog driving this strategy."""
        # Late import to avoid circular dependency
        from clonekit.core.catalog.models import MemberKind

        if self in (CloneStrategy.SHALLOW_FIELD, CloneStrategy.DEEP_FIELD):
            return MemberKind.FIELD
        return MemberKind.PROPERTY

    @classmethod
    def select(cls, *, deep: bool, member_kind: MemberKind) -> CloneStrategy:
        """Pick the strategy for a depth and member catalog combination.

        Args:
            deep: True for a deep clone, False for a shallow one.
            member_kind: Catalog that drives the copy.

        Returns:
            Matching strategy.
        """
        from clonekit.core.catalog.models import MemberKind

        if member_kind is MemberKind.FIELD:
            return cls.DEEP_FIELD if deep else cls.SHALLOW_FIELD
        return cls.DEEP_PROPERTY if deep else cls.SHALLOW_PROPERTY
