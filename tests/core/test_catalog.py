"""Tests for the member catalog."""

from dataclasses import InitVar, dataclass
from typing import ClassVar

import pytest
from pydantic import BaseModel

from clonekit import MemberDescriptor, MemberKind, UnsupportedMemberKindError, members, public_members
from clonekit.core.catalog import dynamic_attributes, field_members, property_members, storage_names


@dataclass
class Point:
    x: int = 0
    y: int = 0


@dataclass
class Point3D(Point):
    z: int = 0


@dataclass
class Counted:
    total: ClassVar[int] = 0
    seed: InitVar[int] = 0
    label: str = ""

    def __post_init__(self, seed: int) -> None:
        pass


class Slotted:
    __slots__ = ("a", "b")


class Secretive:
    __secret: int

    def __init__(self) -> None:
        self.__secret = 1


class MoreSecretive(Secretive):
    __secret: int

    def __init__(self) -> None:
        super().__init__()
        self.__secret = 2


class Redeclared(Point):
    x: int


class Account:
    def __init__(self) -> None:
        self._owner = ""
        self._balance = 0

    @property
    def owner(self) -> str:
        return self._owner

    @owner.setter
    def owner(self, value: str) -> None:
        self._owner = value

    @property
    def balance(self) -> int:
        return self._balance

    @balance.setter
    def balance(self, value: int) -> None:
        self._balance = value

    @property
    def summary(self) -> str:
        return f"{self._owner}: {self._balance}"


class FrozenAccount(Account):
    @property
    def balance(self) -> int:
        return 0


class StringAnnotations:
    count: "ClassVar[int]"
    name: "str"


class Profile(BaseModel):
    name: str = ""
    age: int = 0


class TestFieldMembers:
    """Tests for field discovery."""

    def test_dataclass_fields_in_declaration_order(self) -> None:
        catalog = field_members(Point)
        assert [m.name for m in catalog] == ["x", "y"]
        assert all(m.kind is MemberKind.FIELD for m in catalog)
        assert all(m.declaring_type is Point for m in catalog)

    def test_inherited_fields_follow_mro(self) -> None:
        """Most-derived declarations come first, then base declarations."""
        catalog = field_members(Point3D)
        assert [m.name for m in catalog] == ["z", "x", "y"]
        assert catalog[0].declaring_type is Point3D
        assert catalog[1].declaring_type is Point

    def test_class_level_annotations_excluded(self) -> None:
        assert [m.name for m in field_members(Counted)] == ["label"]

    def test_string_class_var_excluded(self) -> None:
        assert [m.name for m in field_members(StringAnnotations)] == ["name"]

    def test_slots_are_fields(self) -> None:
        assert [m.name for m in field_members(Slotted)] == ["a", "b"]

    def test_shadowed_private_fields_are_distinct(self) -> None:
        """Private names are keyed by their mangled storage name."""
        catalog = field_members(MoreSecretive)
        assert [m.storage_name for m in catalog] == ["_MoreSecretive__secret", "_Secretive__secret"]

    def test_redeclared_public_field_recorded_once(self) -> None:
        catalog = field_members(Redeclared)
        assert [m.name for m in catalog] == ["x", "y"]
        assert catalog[0].declaring_type is Redeclared

    def test_field_get_and_set(self) -> None:
        member = field_members(MoreSecretive)[1]
        instance = MoreSecretive()
        assert member.get(instance) == 1
        member.set(instance, 7)
        assert instance._Secretive__secret == 7  # type: ignore[attr-defined]

    def test_catalog_is_cached_per_type_content(self) -> None:
        assert field_members(Point) == field_members(Point)


class TestPropertyMembers:
    """Tests for read/write property discovery."""

    def test_read_write_properties_only(self) -> None:
        assert {m.name for m in property_members(Account)} == {"owner", "balance"}

    def test_most_derived_definition_wins(self) -> None:
        """A read-only override hides the base read/write property."""
        assert [m.name for m in property_members(FrozenAccount)] == ["owner"]

    def test_property_get_and_set(self) -> None:
        owner = next(m for m in property_members(Account) if m.name == "owner")
        account = Account()
        owner.set(account, "ada")
        assert owner.get(account) == "ada"
        assert owner.annotation is str

    def test_members_dispatches_on_kind(self) -> None:
        assert members(Account, MemberKind.PROPERTY) == property_members(Account)
        assert members(Point, MemberKind.FIELD) == field_members(Point)


class TestPublicMembers:
    def test_fields_then_readable_properties(self) -> None:
        names = [m.name for m in public_members(Account)]
        assert names == ["owner", "balance", "summary"]

    def test_private_fields_excluded(self) -> None:
        assert public_members(Secretive) == ()

    def test_pydantic_plumbing_excluded(self) -> None:
        assert [m.name for m in public_members(Profile)] == ["name", "age"]


class TestUnsupportedKinds:
    def test_unknown_kind_raises(self) -> None:
        with pytest.raises(UnsupportedMemberKindError):
            members(Point, "method")  # type: ignore[arg-type]

    def test_property_descriptor_without_accessor_raises(self) -> None:
        broken = MemberDescriptor(
            name="x", storage_name="x", kind=MemberKind.PROPERTY, declaring_type=Point
        )
        with pytest.raises(UnsupportedMemberKindError):
            broken.get(Point())
        with pytest.raises(UnsupportedMemberKindError):
            broken.set(Point(), 1)


class TestDynamicAttributes:
    def test_undeclared_instance_attributes(self) -> None:
        point = Point(1, 2)
        point.note = "extra"  # type: ignore[attr-defined]
        declared = storage_names(field_members(Point))
        assert dynamic_attributes(point, declared) == [("note", "extra")]

    def test_slotted_instance_has_none(self) -> None:
        assert dynamic_attributes(Slotted(), frozenset()) == []
