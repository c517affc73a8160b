"""Tests for property shape classification."""

import enum
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Annotated, Any, Literal, NewType, Optional

import pytest
from pydantic import BaseModel

from typedpatch.core.types import (
    PropertyShape,
    annotation_metadata,
    classify,
    element_type,
    is_optional,
    is_pydantic_model,
    is_record,
    runtime_class,
    unwrap,
)


@dataclass
class Address:
    city: str


class Mood(enum.Enum):
    HAPPY = 1


class Coordinates(BaseModel):
    lat: float = 0.0
    lon: float = 0.0


@dataclass
class Pair:
    left: int = 0
    right: int = 0

    def __iter__(self):
        return iter((self.left, self.right))


Slug = NewType("Slug", str)

type Tags = list[str]


@pytest.mark.parametrize(
    "tp",
    [int, str, bytes, float, bool, datetime, uuid.UUID, Mood, Any, Literal["a", "b"], int | str, Slug],
)
def test_simple_shapes(tp):
    assert classify(tp) is PropertyShape.SIMPLE


@pytest.mark.parametrize(
    "tp",
    [list[int], tuple[str, ...], set[Address], Sequence[Address], dict[str, int], list, Tags],
)
def test_collection_shapes(tp):
    assert classify(tp) is PropertyShape.COLLECTION


@pytest.mark.parametrize("tp", [Address, Address | None, Optional[Address], Annotated[Address, "x"]])
def test_composite_shapes(tp):
    assert classify(tp) is PropertyShape.COMPOSITE


def test_strings_are_not_collections():
    """Strings are iterable but never take index segments."""
    assert classify(str) is PropertyShape.SIMPLE
    assert classify(str | None) is PropertyShape.SIMPLE


@pytest.mark.parametrize(
    ("tp", "expected"),
    [
        (list[Address], Address),
        (tuple[int, ...], int),
        (tuple[int, int], int),
        (tuple[int, str], Any),
        (dict[str, Address], str),
        (list, Any),
        (list[Address] | None, Address),
    ],
)
def test_element_type(tp, expected):
    assert element_type(tp) == expected


def test_unwrap_strips_wrappers():
    assert unwrap(Annotated[int | None, "meta"]) is int
    assert unwrap(Slug) is str
    assert unwrap(Tags) == list[str]


def test_unwrap_keeps_real_unions():
    assert unwrap(int | str | None) == int | str | None


def test_is_optional():
    assert is_optional(int | None)
    assert is_optional(Optional[Address])
    assert is_optional(Annotated[str | None, "meta"])
    assert not is_optional(int)
    assert not is_optional(int | str)


def test_runtime_class():
    assert runtime_class(list[int]) is list
    assert runtime_class(Address | None) is Address
    assert runtime_class(Any) is None
    assert runtime_class(int | str) is None


def test_annotation_metadata_sees_through_optional():
    marker = object()

    assert annotation_metadata(Annotated[int, marker]) == (marker,)
    assert annotation_metadata(Annotated[int, "a"] | None) == ("a",)
    assert annotation_metadata(int) == ()


@pytest.mark.parametrize("tp", [Coordinates, Coordinates | None, Annotated[Coordinates, "x"], Pair])
def test_iterable_records_are_composites(tp):
    """CRITICAL: Pydantic models and dataclasses stay composites even when iterable.

    Why: BaseModel defines __iter__ over its fields; treating it as a
    collection would reject "/coordinates/lat" and accept "/coordinates/0".
    """
    assert classify(tp) is PropertyShape.COMPOSITE


def test_collection_of_records():
    assert classify(list[Coordinates]) is PropertyShape.COLLECTION
    assert element_type(list[Coordinates]) is Coordinates


def test_record_detection():
    assert is_pydantic_model(Coordinates)
    assert not is_pydantic_model(Address)
    assert is_record(Coordinates)
    assert is_record(Pair)
    assert not is_record(list)
