"""Cloning backends sharing the CloneFactory protocol.

Usage:
    from clonekit.cloners import CompilingCloner, ReflectionCloner

    copy = CompilingCloner().deep_field_clone(original)
"""

from clonekit.cloners.compiled import CompilingCloner
from clonekit.cloners.protocol import CloneFactory
from clonekit.cloners.reflection import ReflectionCloner
from clonekit.cloners.registry import ArrayKey, ClonerRegistry, clone_key, get_registry
from clonekit.cloners.serialization import SerializationCloner

__all__ = [
    # Protocol
    "CloneFactory",
    # Backends
    "ReflectionCloner",
    "CompilingCloner",
    "SerializationCloner",
    # Registry
    "ClonerRegistry",
    "ArrayKey",
    "clone_key",
    "get_registry",
]
