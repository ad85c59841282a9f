"""Catalog functionality: member descriptors and type introspection."""

from clonekit.core.catalog.core import (
    dynamic_attributes,
    field_members,
    members,
    property_members,
    public_members,
    resolve_annotation,
    storage_names,
)
from clonekit.core.catalog.models import MemberDescriptor, MemberKind

__all__ = [
    # Models
    "MemberKind",
    "MemberDescriptor",
    # Core
    "members",
    "field_members",
    "property_members",
    "public_members",
    "storage_names",
    "dynamic_attributes",
    "resolve_annotation",
]
