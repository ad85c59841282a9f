"""Core functionalities: stateless introspection primitives.

Architecture Note:
    core/ contains pure, stateless building blocks: the type shape classifier
    and the member catalog, plus the shared strategy and error types.
    The cloning backends in cloners/ and the correlator in mapping/ are built
    on top of them.
"""

from clonekit.core.catalog import (
    MemberDescriptor,
    MemberKind,
    dynamic_attributes,
    field_members,
    members,
    property_members,
    public_members,
)
from clonekit.core.errors import (
    CloningError,
    ConstructionError,
    MemberAssignmentError,
    ShallowCloneNotSupportedError,
    UnsupportedMemberKindError,
)
from clonekit.core.shape import ShapeKind, TypeShape, classify, classify_value
from clonekit.core.types import Clone, CloneStrategy

__all__ = [
    # Types
    "Clone",
    "CloneStrategy",
    # Errors
    "CloningError",
    "UnsupportedMemberKindError",
    "ConstructionError",
    "ShallowCloneNotSupportedError",
    "MemberAssignmentError",
    # Shape
    "ShapeKind",
    "TypeShape",
    "classify",
    "classify_value",
    # Catalog
    "MemberKind",
    "MemberDescriptor",
    "members",
    "field_members",
    "property_members",
    "public_members",
    "dynamic_attributes",
]
