"""Exceptions raised by the cloning backends and the structural correlator."""

from __future__ import annotations


class CloningError(Exception):
    """Base class for every clonekit failure."""

    pass


class UnsupportedMemberKindError(CloningError):
    """Raised when a catalog entry is neither a field nor a property.

    This is a defect in whoever built the descriptor; the copy is aborted.
    """

    pass


class ConstructionError(CloningError, TypeError):
    """Raised when a type cannot be allocated or default-constructed at clone time."""

    pass


class ShallowCloneNotSupportedError(CloningError, NotImplementedError):
    """Raised by backends that can only produce deep clones."""

    pass


class MemberAssignmentError(CloningError, TypeError):
    """Raised when a correlated value cannot be assigned to its destination member."""

    pass
