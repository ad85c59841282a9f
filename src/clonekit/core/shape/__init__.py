"""Shape functionality: models and the type shape classifier."""

from clonekit.core.shape.models import (
    COLLECTION,
    PRIMITIVE,
    REFERENCE_AGGREGATE,
    VALUE_AGGREGATE,
    ShapeKind,
    TypeShape,
)
from clonekit.core.shape.operations import (
    array_shape,
    classify,
    classify_value,
    declared_shape,
    is_atomic_type,
    is_opaque_type,
)

__all__ = [
    # Models
    "ShapeKind",
    "TypeShape",
    "PRIMITIVE",
    "VALUE_AGGREGATE",
    "COLLECTION",
    "REFERENCE_AGGREGATE",
    # Operations
    "classify",
    "classify_value",
    "array_shape",
    "declared_shape",
    "is_atomic_type",
    "is_opaque_type",
]
