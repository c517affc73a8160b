"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

import uuid
from dataclasses import dataclass, field
from typing import Annotated

from typedpatch import DenyPatch, PatchDoc, PatchOperation, PatchSettings, deny_patch


@dataclass
class ApplyChangesToMe:
    property1: uuid.UUID
    property2: str | None = None
    property3: str | None = None
    string_array1: list[str] | None = None
    string_array2: list[str] | None = None


@dataclass
class PartiallyDenied:
    property1: str | None = None
    property2: Annotated[str | None, DenyPatch()] = None
    property3: str | None = None


@deny_patch
@dataclass
class DeniedType:
    property1: str | None = None


@dataclass(frozen=True)
class ReadOnlyType:
    property1: str | None = None


@pytest.fixture(autouse=True)
def _fresh_documents():
    """Shared PatchDocs capture settings; start every test without them."""
    PatchDoc.clear_cache()
    yield
    PatchDoc.clear_cache()


@pytest.fixture
def settings():
    """Settings isolated from the environment, nested path warnings off."""
    return PatchSettings(
        cache_path_validation=True,
        max_cached_paths=4096,
        warn_on_nested_paths=False,
    )


@pytest.fixture
def instance():
    """Fully populated ApplyChangesToMe."""
    return ApplyChangesToMe(
        property1=uuid.uuid4(),
        property2="two",
        property3="three",
        string_array1=["a", "b"],
        string_array2=["c"],
    )


@pytest.fixture
def doc(settings):
    return PatchDoc(ApplyChangesToMe, settings=settings)


@pytest.fixture
def apply_cls():
    return ApplyChangesToMe


@pytest.fixture
def partial_cls():
    return PartiallyDenied


@pytest.fixture
def denied_cls():
    return DeniedType


@pytest.fixture
def read_only_cls():
    return ReadOnlyType
