"""Shape models: the coarse classification every backend branches on."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class ShapeKind(Enum):
    """Copy category of a runtime type."""

    PRIMITIVE = auto()
    """Atomic values and text: copied by value (shared, since they are immutable)."""

    VALUE_AGGREGATE = auto()
    """Immutable aggregates (tuple, frozenset): rebuilt item by item, never null."""

    ARRAY = auto()
    """Indexed storage with a rank (list, bytearray, array.array, numpy.ndarray)."""

    COLLECTION = auto()
    """Keyed or unordered containers (dict, set, deque): rebuilt entry by entry."""

    REFERENCE_AGGREGATE = auto()
    """Everything else: identity-bearing objects copied through their member catalog."""


@dataclass(frozen=True, slots=True)
class TypeShape:
    """Tagged classification of a type.

    `rank` and `element` are only meaningful for arrays. An `element` of None means
    the element shape is resolved per element at clone time (lists, object arrays).
    A `rank` of None means the rank is only known from an instance (ndarray types).
    """

    kind: ShapeKind
    rank: int | None = None
    element: TypeShape | None = None

    @property
    def has_primitive_elements(self) -> bool:
        """Array whose elements can be duplicated in bulk."""
        return (
            self.kind is ShapeKind.ARRAY
            and self.element is not None
            and self.element.kind is ShapeKind.PRIMITIVE
        )


PRIMITIVE = TypeShape(ShapeKind.PRIMITIVE)
VALUE_AGGREGATE = TypeShape(ShapeKind.VALUE_AGGREGATE)
COLLECTION = TypeShape(ShapeKind.COLLECTION)
REFERENCE_AGGREGATE = TypeShape(ShapeKind.REFERENCE_AGGREGATE)
