"""Member catalog: which members of an arbitrary type take part in a copy.

The catalog only looks at the type, never at instance state, so any cache keyed
by type may hold on to it forever. Constructibility is not checked here; a type
without a usable constructor is still cataloged and fails at clone time.

Usage:
    @dataclass
    class Point:
        x: int
        y: int

    members(Point, MemberKind.FIELD)     # (x, y) field descriptors
    members(Point, MemberKind.PROPERTY)  # () - no read/write properties
"""

from __future__ import annotations

import functools
import inspect
import re
import types
import typing
from collections.abc import Collection
from dataclasses import InitVar
from typing import Any, ClassVar

from clonekit.core.catalog.models import MemberDescriptor, MemberKind
from clonekit.core.errors import UnsupportedMemberKindError

_CLASS_LEVEL_RE = re.compile(r"^\s*(?:[\w.]+\.)?(?:ClassVar|InitVar)\b")
_SLOT_DESCRIPTORS = (types.MemberDescriptorType, types.GetSetDescriptorType)


def members(cls: type, kind: MemberKind) -> tuple[MemberDescriptor, ...]:
    """List the copyable members of a type.

    Args:
        cls: Type to inspect.
        kind: Field or property catalog.

    Returns:
        Ordered member descriptors, most-derived declarations first.

    Raises:
        UnsupportedMemberKindError: If `kind` is not a known member kind.
    """
    if kind is MemberKind.FIELD:
        return field_members(cls)
    if kind is MemberKind.PROPERTY:
        return property_members(cls)
    raise UnsupportedMemberKindError(f"Unsupported member kind {kind!r}")


def field_members(cls: type) -> tuple[MemberDescriptor, ...]:
    """Collect instance fields declared on a type and all its bases.

    Walks the MRO up to, but excluding, `object`. Every class contributes its own
    `__slots__` entries and its own instance annotations (ClassVar, InitVar and
    dunder names excluded). Members are keyed by storage name: private names are
    mangled with the declaring class, so a shadowed `__secret` on a base and a
    subclass yields two members, while a public name redeclared by a subclass is
    one attribute and is recorded once.

    Annotations backed by a class-level descriptor other than a slot (a property,
    a named tuple accessor) are not storage and are skipped.

    Args:
        cls: Type to inspect.

    Returns:
        Field descriptors in MRO order.
    """
    found: list[MemberDescriptor] = []
    seen: set[str] = set()

    for base in cls.__mro__:
        if base is object:
            continue
        annotations = _own_annotations(base)
        declared = [*_own_slots(base)]
        declared.extend(
            name
            for name, annotation in annotations.items()
            if not _is_dunder(name) and not _is_class_level(annotation)
        )
        for name in declared:
            storage_name = _mangle(base, name)
            if storage_name in seen:
                continue
            if _is_descriptor_backed(cls, storage_name):
                continue
            seen.add(storage_name)
            found.append(
                MemberDescriptor(
                    name=name,
                    storage_name=storage_name,
                    kind=MemberKind.FIELD,
                    declaring_type=base,
                    annotation=annotations.get(name),
                )
            )
    return tuple(found)


def property_members(cls: type) -> tuple[MemberDescriptor, ...]:
    """Collect read/write properties, public and private, across the hierarchy.

    The most-derived definition of a name wins; if it is read-only or
    write-only the member is silently skipped.

    Args:
        cls: Type to inspect.

    Returns:
        Property descriptors in MRO order.
    """
    return tuple(p for p in _properties(cls) if p.accessor.fset is not None)  # type: ignore[union-attr]


def public_members(cls: type) -> tuple[MemberDescriptor, ...]:
    """Collect public fields followed by public readable properties.

    Used for name correlation between unrelated types, where read-only
    destination properties are expected to fail at assignment time. Properties
    that Pydantic's own base classes declare (`model_extra`, ...) are model
    plumbing, not data, and are left out.

    Args:
        cls: Type to inspect.

    Returns:
        Public field descriptors, then public property descriptors.
    """
    fields = [f for f in field_members(cls) if not f.name.startswith("_")]
    props = [
        p
        for p in _properties(cls)
        if not p.name.startswith("_") and not p.declaring_type.__module__.startswith("pydantic")
    ]
    return (*fields, *props)


def storage_names(catalog: Collection[MemberDescriptor]) -> frozenset[str]:
    """Storage names covered by a catalog."""
    return frozenset(member.storage_name for member in catalog)


def dynamic_attributes(instance: Any, declared: frozenset[str]) -> list[tuple[str, Any]]:
    """Attributes present in an instance `__dict__` but not declared on its type.

    Args:
        instance: Object to inspect.
        declared: Storage names already handled through the catalog.

    Returns:
        (name, value) pairs in insertion order; empty for objects without `__dict__`.
    """
    try:
        namespace = object.__getattribute__(instance, "__dict__")
    except AttributeError:
        return []
    return [(name, value) for name, value in namespace.items() if name not in declared]


def resolve_annotation(member: MemberDescriptor) -> Any:
    """Evaluate a member's annotation if it was stored as a string.

    Args:
        member: Descriptor to resolve.

    Returns:
        Annotation object, or the raw value if it cannot be evaluated.
    """
    if not isinstance(member.annotation, str):
        return member.annotation
    if member.kind is MemberKind.PROPERTY and member.accessor is not None:
        hints = _type_hints(member.accessor.fget)
        return hints.get("return", member.annotation)
    return _type_hints(member.declaring_type).get(member.name, member.annotation)


@functools.cache
def _type_hints(owner: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(owner)
    except (NameError, TypeError, AttributeError, SyntaxError):
        return {}


def _properties(cls: type) -> list[MemberDescriptor]:
    found: list[MemberDescriptor] = []
    seen: set[str] = set()
    for base in cls.__mro__:
        if base is object:
            continue
        for name, attr in base.__dict__.items():
            if name in seen:
                continue
            seen.add(name)
            if not isinstance(attr, property) or attr.fget is None:
                continue
            found.append(
                MemberDescriptor(
                    name=name,
                    storage_name=name,
                    kind=MemberKind.PROPERTY,
                    declaring_type=base,
                    annotation=_return_annotation(attr.fget),
                    accessor=attr,
                )
            )
    return found


def _own_annotations(cls: type) -> dict[str, Any]:
    try:
        return inspect.get_annotations(cls)
    except (NameError, TypeError):
        return {}


def _return_annotation(getter: Any) -> Any:
    try:
        return inspect.get_annotations(getter).get("return")
    except (NameError, TypeError):
        return None


def _own_slots(cls: type) -> list[str]:
    slots = cls.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    return [name for name in slots if name not in ("__dict__", "__weakref__")]


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _is_class_level(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return _CLASS_LEVEL_RE.match(annotation) is not None
    if annotation is ClassVar or typing.get_origin(annotation) is ClassVar:
        return True
    return annotation is InitVar or isinstance(annotation, InitVar)


def _mangle(cls: type, name: str) -> str:
    if not name.startswith("__") or name.endswith("__"):
        return name
    stripped = cls.__name__.lstrip("_")
    return f"_{stripped}{name}" if stripped else name


def _is_descriptor_backed(cls: type, storage_name: str) -> bool:
    attr = inspect.getattr_static(cls, storage_name, None)
    if attr is None or isinstance(attr, _SLOT_DESCRIPTORS):
        return False
    return hasattr(type(attr), "__set__") or hasattr(type(attr), "__delete__")
