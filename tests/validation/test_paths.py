"""Tests for path resolution and the path validation memo."""

import uuid
from dataclasses import dataclass, field
from typing import Annotated

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import BaseModel

from typedpatch.config import PatchSettings
from typedpatch.core.schema import DenyPatch
from typedpatch.validation import (
    PathValidator,
    normalize_path,
    path_segments,
    property_name,
    validate_segments,
)


@dataclass
class Contact:
    email: str | None = None
    phone: str | None = None


@dataclass
class Location:
    city: str | None = None


@dataclass
class Customer:
    name: str | None = None
    location: Location | None = None
    contacts: list[Contact] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    id: Annotated[uuid.UUID, DenyPatch()] = field(default_factory=uuid.uuid4)

    @property
    def label(self) -> str:
        return f"{self.name} ({len(self.contacts)})"


@pytest.mark.parametrize(
    "segments",
    [
        [],
        ["name"],
        ["location"],
        ["location", "city"],
        ["contacts"],
        ["contacts", "0"],
        ["contacts", "12", "email"],
        ["tags", "3"],
        ["LOCATION", "City"],
    ],
)
def test_resolvable_paths(segments):
    assert validate_segments(Customer, segments, requires_read=False, requires_write=True)


@pytest.mark.parametrize(
    "segments",
    [
        ["missing"],
        [""],
        ["name", "first"],
        ["tags", "3", "length"],
        ["contacts", "first"],
        ["contacts", "-1"],
        ["contacts", "0", "fax"],
        ["location", "country"],
        ["contacts", "١"],
    ],
)
def test_unresolvable_paths(segments):
    assert not validate_segments(Customer, segments, requires_read=False, requires_write=True)


def test_denied_property_is_readable_but_not_writable():
    assert validate_segments(Customer, ["id"], requires_read=True, requires_write=False)
    assert not validate_segments(Customer, ["id"], requires_read=False, requires_write=True)


def test_read_only_property():
    assert validate_segments(Customer, ["label"], requires_read=True, requires_write=False)
    assert not validate_segments(Customer, ["label"], requires_read=False, requires_write=True)


def test_requirements_apply_to_every_segment():
    """Each named property along the path must meet the read/write requirement."""

    @dataclass(frozen=True)
    class Snapshot:
        email: str | None = None

    @dataclass
    class Holder:
        snapshot: Snapshot | None = None

    assert validate_segments(Holder, ["snapshot", "email"], requires_read=True, requires_write=False)
    assert not validate_segments(
        Holder, ["snapshot", "email"], requires_read=False, requires_write=True
    )


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/contacts/12/email", "/contacts/0/email"),
        ("/tags/7", "/tags/0"),
        ("/a/1/b/22", "/a/0/b/0"),
        ("/a12/b", "/a12/b"),
        ("/name", "/name"),
    ],
)
def test_normalize_path(path, expected):
    assert normalize_path(path) == expected


def test_path_segments():
    assert path_segments("/location/city") == ["location", "city"]
    assert path_segments("//name") == ["name"]
    assert path_segments("name") == ["name"]
    assert path_segments("/") == [""]


def test_property_name():
    assert property_name("/location/city") == "location"
    assert property_name("") == ""
    assert property_name(None) is None


@pytest.fixture
def validator(settings):
    return PathValidator(Customer, settings)


def test_validator_checks_full_paths(validator):
    assert validator.is_valid("/contacts/3/email", requires_read=False, requires_write=True)
    assert not validator.is_valid("/contacts/email", requires_read=False, requires_write=True)
    assert not validator.is_valid("/id", requires_read=False, requires_write=True)


def test_indices_share_one_memo_entry(validator):
    """CRITICAL: Paths differing only by index hit the same cached result.

    Why: The same collection path recurs with every index in large batches.
    """
    for index in range(50):
        validator.is_valid(f"/contacts/{index}/email", requires_read=False, requires_write=True)

    assert len(validator) == 1


def test_memo_is_keyed_by_requirements(validator):
    validator.is_valid("/id", requires_read=True, requires_write=False)
    validator.is_valid("/id", requires_read=False, requires_write=True)

    assert len(validator) == 2
    assert validator.is_valid("/id", requires_read=True, requires_write=False)
    assert not validator.is_valid("/id", requires_read=False, requires_write=True)


def test_memo_is_bounded():
    validator = PathValidator(Customer, PatchSettings(max_cached_paths=2))

    for path in ("/name", "/tags", "/location", "/contacts"):
        assert validator.is_valid(path, requires_read=False, requires_write=True)

    assert len(validator) == 2


def test_memo_can_be_disabled():
    validator = PathValidator(Customer, PatchSettings(cache_path_validation=False))

    assert validator.is_valid("/name", requires_read=False, requires_write=True)
    assert len(validator) == 0


def test_clear(validator):
    validator.is_valid("/name", requires_read=False, requires_write=True)

    validator.clear()

    assert len(validator) == 0


@given(st.integers(min_value=0, max_value=10**12))
def test_any_index_validates_like_zero(index):
    validator = PathValidator(Customer, PatchSettings(cache_path_validation=False))

    assert validator.is_valid(f"/contacts/{index}/phone", False, True) == validator.is_valid(
        "/contacts/0/phone", False, True
    )


class Region(BaseModel):
    code: str | None = None


class Branch(BaseModel):
    name: str | None = None
    region: Region | None = None
    regions: list[Region] = []


@pytest.mark.parametrize(
    ("segments", "expected"),
    [
        (["region", "code"], True),
        (["Region", "CODE"], True),
        (["region", "0"], False),
        (["region", "missing"], False),
        (["regions", "2", "code"], True),
        (["regions", "code"], False),
    ],
)
def test_nested_pydantic_models_are_walked_by_property_name(segments, expected):
    assert validate_segments(Branch, segments, requires_read=False, requires_write=True) is expected
