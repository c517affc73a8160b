"""Type shape classification for property declarations.

A property's declared type decides how a path may continue past it:

    SIMPLE      leaf value, no further segments allowed
    COLLECTION  next segment must be a numeric index into the elements
    COMPOSITE   next segment names a property of the declared type

Usage:
    shape = classify(list[Address])        # PropertyShape.COLLECTION
    element_type(list[Address])            # Address
    unwrap(Annotated[int | None, ...])     # int
"""

from __future__ import annotations

import dataclasses
import types
import typing
import uuid
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum, auto
from fractions import Fraction
from typing import Annotated, Any, Literal, TypeVar, Union, get_args, get_origin

SIMPLE_TYPES: tuple[type, ...] = (
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    bytearray,
    Decimal,
    Fraction,
    datetime,
    date,
    time,
    timedelta,
    uuid.UUID,
)
"""Leaf types: values of these types never carry sub-paths."""


class PropertyShape(Enum):
    """How a path may continue past a property."""

    SIMPLE = auto()  # Leaf, no sub-paths
    COLLECTION = auto()  # Index segment, then element type
    COMPOSITE = auto()  # Nested property name


def is_optional(tp: Any) -> bool:
    """Check if a type annotation admits None.

    Args:
        tp: Type annotation to inspect.

    Returns:
        True for `X | None`, `Optional[X]`, `None` itself, and Annotated
        wrappers around those.
    """
    tp = _strip_annotated(tp)
    if tp is None or tp is type(None):
        return True
    if _is_union(tp):
        return any(arg is type(None) for arg in get_args(tp))
    return False


def unwrap(tp: Any) -> Any:
    """Strip Annotated, NewType and Optional wrappers from a type annotation.

    Unions with more than one non-None member are returned unchanged.

    Args:
        tp: Type annotation to unwrap.

    Returns:
        The innermost concrete annotation.
    """
    while True:
        tp = _strip_annotated(tp)
        if isinstance(tp, typing.TypeAliasType):
            tp = tp.__value__
            continue
        supertype = getattr(tp, "__supertype__", None)
        if supertype is not None:
            tp = supertype
            continue
        if _is_union(tp):
            members = [arg for arg in get_args(tp) if arg is not type(None)]
            if len(members) == 1:
                tp = members[0]
                continue
        return tp


def runtime_class(tp: Any) -> type | None:
    """Get the runtime class behind an annotation, if it has one.

    Args:
        tp: Type annotation (already unwrapped or not).

    Returns:
        The class for plain classes and generic aliases (`list[int]` -> list),
        None for Any, unions, Literal and type variables.
    """
    tp = unwrap(tp)
    if tp is Any or _is_union(tp):
        return None
    if isinstance(tp, type):
        return tp
    origin = get_origin(tp)
    if isinstance(origin, type):
        return origin
    return None


def is_simple(tp: Any) -> bool:
    """Check if an annotation denotes a leaf value that cannot carry sub-paths."""
    tp = unwrap(tp)
    if tp is Any or tp is object or isinstance(tp, TypeVar):
        return True
    if _is_union(tp) or get_origin(tp) is Literal:
        return True
    cls = runtime_class(tp)
    if cls is None:
        return True
    return issubclass(cls, SIMPLE_TYPES) or issubclass(cls, Enum)


def is_pydantic_model(cls: type) -> bool:
    """Check if class is a Pydantic model without importing pydantic.

    Args:
        cls: Class to check.

    Returns:
        True if class inherits from pydantic.BaseModel, False otherwise.
    """
    for base in cls.__mro__:
        if base.__module__.startswith("pydantic") and base.__name__ == "BaseModel":
            return True
    return False


def is_record(cls: type) -> bool:
    """Check if a class declares named fields (dataclass or Pydantic model).

    Pydantic models iterate over their fields, so records are checked
    before the Iterable test.
    """
    return dataclasses.is_dataclass(cls) or is_pydantic_model(cls)


def is_collection(tp: Any) -> bool:
    """Check if an annotation denotes a non-string iterable that is not a record."""
    if is_simple(tp):
        return False
    cls = runtime_class(tp)
    return cls is not None and not is_record(cls) and issubclass(cls, Iterable)


def element_type(tp: Any) -> Any:
    """Get the element type of a collection annotation.

    Mappings iterate over their keys, so their element type is the key type.

    Args:
        tp: Collection type annotation.

    Returns:
        Element type, or Any when the annotation is unparameterized or
        heterogeneous.
    """
    tp = unwrap(tp)
    args = get_args(tp)
    if not args:
        return Any
    if get_origin(tp) is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        if all(arg == args[0] for arg in args):
            return args[0]
        return Any
    return args[0]


def classify(tp: Any) -> PropertyShape:
    """Compute the shape of a declared property type.

    Args:
        tp: Declared type annotation.

    Returns:
        PropertyShape tag, computed once per property at schema build.
    """
    if is_simple(tp):
        return PropertyShape.SIMPLE
    if is_collection(tp):
        return PropertyShape.COLLECTION
    return PropertyShape.COMPOSITE


def annotation_metadata(tp: Any) -> tuple[Any, ...]:
    """Collect Annotated metadata, including metadata nested inside Optional."""
    found: list[Any] = []
    while True:
        if get_origin(tp) is Annotated:
            found.extend(tp.__metadata__)
            tp = get_args(tp)[0]
            continue
        if _is_union(tp):
            for arg in get_args(tp):
                if get_origin(arg) is Annotated:
                    found.extend(arg.__metadata__)
        return tuple(found)


def _strip_annotated(tp: Any) -> Any:
    while get_origin(tp) is Annotated:
        tp = get_args(tp)[0]
    return tp


def _is_union(tp: Any) -> bool:
    origin = get_origin(tp)
    return origin is Union or origin is types.UnionType
