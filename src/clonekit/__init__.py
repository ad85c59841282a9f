"""clonekit: generic object-graph cloning with interchangeable backends.

Usage:
    from dataclasses import dataclass, field
    from clonekit import clone, BeansCopy

    @dataclass
    class Node:
        name: str = ""
        children: list["Node"] = field(default_factory=list)

    tree = Node("root", [Node("leaf")])
    copy = clone(tree)                          # deep, field-based, compiled backend
    assert copy.children[0] is not tree.children[0]

    @dataclass
    class NodeSummary:
        name: str = ""

    summary = BeansCopy(Node, NodeSummary).to_b(tree)
"""

__version__ = "0.1.0"

# Backends
from clonekit.cloners import (
    ArrayKey,
    CloneFactory,
    ClonerRegistry,
    CompilingCloner,
    ReflectionCloner,
    SerializationCloner,
    get_registry,
)

# Configuration
from clonekit.config import CloningSettings, get_settings, reset_settings

# Core primitives
from clonekit.core import (
    Clone,
    CloneStrategy,
    CloningError,
    ConstructionError,
    MemberAssignmentError,
    MemberDescriptor,
    MemberKind,
    ShallowCloneNotSupportedError,
    ShapeKind,
    TypeShape,
    UnsupportedMemberKindError,
    classify,
    classify_value,
    members,
    public_members,
)

# Facade
from clonekit.facade import clone, get_cloner

# Structural correlation
from clonekit.mapping import BeansCopy, CorrelationTable

__all__ = [
    # Version
    "__version__",
    # Facade
    "clone",
    "get_cloner",
    # Core
    "Clone",
    "CloneStrategy",
    "ShapeKind",
    "TypeShape",
    "classify",
    "classify_value",
    "MemberKind",
    "MemberDescriptor",
    "members",
    "public_members",
    # Errors
    "CloningError",
    "UnsupportedMemberKindError",
    "ConstructionError",
    "ShallowCloneNotSupportedError",
    "MemberAssignmentError",
    # Backends
    "CloneFactory",
    "ReflectionCloner",
    "CompilingCloner",
    "SerializationCloner",
    "ClonerRegistry",
    "ArrayKey",
    "get_registry",
    # Mapping
    "BeansCopy",
    "CorrelationTable",
    # Configuration
    "CloningSettings",
    "get_settings",
    "reset_settings",
]
