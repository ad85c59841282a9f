"""One-call entry points over the cloning backends.

Usage:
    from clonekit import clone, get_cloner

    copy = clone(original)                                  # deep field clone
    view = clone(original, deep=False, members="property")  # shallow property clone
    copy = clone(original, backend="serialization")

    cloner = get_cloner("reflection")
"""

from __future__ import annotations

import threading
from typing import Literal, TypeVar

from clonekit.cloners import CloneFactory, CompilingCloner, ReflectionCloner, SerializationCloner
from clonekit.config import BackendName, get_settings
from clonekit.core.catalog import MemberKind
from clonekit.core.types import Clone, CloneStrategy

T = TypeVar("T")

_BACKENDS: dict[str, type[CloneFactory]] = {
    "reflection": ReflectionCloner,
    "compiled": CompilingCloner,
    "serialization": SerializationCloner,
}

_cloners: dict[str, CloneFactory] = {}
_cloners_lock = threading.Lock()


def get_cloner(backend: BackendName | None = None) -> CloneFactory:
    """Get the shared cloner for a backend.

    Args:
        backend: "reflection", "compiled" or "serialization"
            (default: `CloningSettings.default_backend`).

    Returns:
        Process-wide cloner instance for that backend.

    Raises:
        ValueError: If the backend name is unknown.
    """
    name = backend if backend is not None else get_settings().default_backend
    if name not in _BACKENDS:
        raise ValueError(f"Unknown cloning backend {name!r}; expected one of {sorted(_BACKENDS)}")
    cloner = _cloners.get(name)
    if cloner is None:
        with _cloners_lock:
            cloner = _cloners.setdefault(name, _BACKENDS[name]())
    return cloner


def clone(
    value: T,
    *,
    deep: bool = True,
    members: Literal["field", "property"] | MemberKind = "field",
    backend: BackendName | None = None,
) -> Clone[T]:
    """Clone a value with the selected strategy and backend.

    Args:
        value: Object to clone (None yields None).
        deep: Deep clone when True, shallow clone otherwise.
        members: Member catalog driving the copy: declared fields or
            read/write properties.
        backend: Backend name (default: from settings).

    Returns:
        The clone.

    Raises:
        ValueError: If `members` or `backend` is not recognized.
        ShallowCloneNotSupportedError: For shallow clones on the serialization backend.
        ConstructionError: If a property clone meets a type without `cls()`.
    """
    member_kind = members if isinstance(members, MemberKind) else _member_kind(members)
    strategy = CloneStrategy.select(deep=deep, member_kind=member_kind)
    cloner = get_cloner(backend)
    match strategy:
        case CloneStrategy.SHALLOW_FIELD:
            return cloner.shallow_field_clone(value)
        case CloneStrategy.DEEP_FIELD:
            return cloner.deep_field_clone(value)
        case CloneStrategy.SHALLOW_PROPERTY:
            return cloner.shallow_property_clone(value)
        case _:
            return cloner.deep_property_clone(value)


def _member_kind(name: str) -> MemberKind:
    try:
        return MemberKind[name.upper()]
    except KeyError:
        raise ValueError(f"Unknown member kind {name!r}; expected 'field' or 'property'") from None
