"""Correlation models: name-matched member pairs between two unrelated types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import TypeAdapter

from clonekit.core.catalog import MemberDescriptor


@dataclass(frozen=True, slots=True)
class CorrelationEntry:
    """One member name present on both sides of a correlation.

    Attributes:
        name: Shared member name.
        source: Member on the source type.
        destination: Member on the destination type.
        source_adapter: Strict validator for values assigned to the source member,
            None when its annotation names no checkable type.
        destination_adapter: Same for the destination member.
    """

    name: str
    source: MemberDescriptor
    destination: MemberDescriptor
    source_adapter: TypeAdapter[Any] | None = None
    destination_adapter: TypeAdapter[Any] | None = None


@dataclass(frozen=True, slots=True)
class CorrelationTable:
    """Immutable list of correlated member pairs for one (source, destination) pair.

    Entries follow the source type's public member order. Built once per type
    pair and shared by every correlator for that pair.
    """

    source_type: type
    destination_type: type
    entries: tuple[CorrelationEntry, ...]

    @property
    def names(self) -> tuple[str, ...]:
        """Correlated member names in table order."""
        return tuple(entry.name for entry in self.entries)

    def __len__(self) -> int:
        return len(self.entries)
