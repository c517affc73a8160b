"""Schema models: property descriptors, per-type schemas and deny markers."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from typedpatch.core.registry import EqualityFn
from typedpatch.core.types import PropertyShape

Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], None]

DENY_PATCH_ATTR = "__deny_patch__"
"""Attribute set on classes and accessor functions marked with @deny_patch."""

DENY_PATCH_METADATA_KEY = "deny_patch"
"""Key in dataclass field metadata that removes a field's writability."""


@dataclass(frozen=True, slots=True)
class DenyPatch:
    """Annotated marker that removes a single property's writability.

    Example:
        >>> @dataclass
        ... class User:
        ...     id: Annotated[UUID, DenyPatch()]
        ...     name: str
    """


@dataclass(frozen=True, slots=True)
class PropertyDescriptor:
    """Bound accessors and metadata for one public property of a type.

    A descriptor without a setter is read-only for patching; a descriptor
    without a getter is write-only. Defaults are recorded for writable
    properties, comparers for readable ones.
    """

    name: str
    declared_type: Any
    shape: PropertyShape
    element_type: Any = None
    getter: Getter | None = None
    setter: Setter | None = None
    default_value: Any = None
    equality: EqualityFn | None = None
    denied: bool = False

    @property
    def can_read(self) -> bool:
        """True if the property has a getter."""
        return self.getter is not None

    @property
    def can_write(self) -> bool:
        """True if the property has a setter (writable and not denied)."""
        return self.setter is not None


@dataclass(frozen=True, slots=True)
class TypeSchema:
    """Read-only accessor table for a type, built once per type.

    Property names are matched case-insensitively.

    Attributes:
        type: The class this schema describes.
        properties: Descriptors keyed by case-folded property name.
        patchable: True if the type is not denied and has at least one
            writable, non-denied property.
        denied: True if the type carries the type-level deny marker.
        clone: Shallow-copy factory, present only for patchable types.
    """

    type: type
    properties: Mapping[str, PropertyDescriptor]
    patchable: bool
    denied: bool = False
    clone: Callable[[Any], Any] | None = None

    @property
    def name(self) -> str:
        """Short type name used in messages."""
        return self.type.__name__

    def get(self, name: str) -> PropertyDescriptor | None:
        """Look up a property by name, ignoring case.

        Args:
            name: Property name as written in a path segment.

        Returns:
            Descriptor if the type has such a property, None otherwise.
        """
        return self.properties.get(name.casefold())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.casefold() in self.properties

    def __iter__(self) -> Iterator[PropertyDescriptor]:
        return iter(self.properties.values())

    def __len__(self) -> int:
        return len(self.properties)

    def can_read(self, name: str) -> bool:
        """Check if a property exists and has a getter."""
        prop = self.get(name)
        return prop is not None and prop.can_read

    def can_write(self, name: str) -> bool:
        """Check if a property exists and has a setter."""
        prop = self.get(name)
        return prop is not None and prop.can_write

    def writable(self) -> Iterator[PropertyDescriptor]:
        """Iterate properties that accept patches."""
        return (prop for prop in self.properties.values() if prop.can_write)

    def readable(self) -> Iterator[PropertyDescriptor]:
        """Iterate properties that can be read."""
        return (prop for prop in self.properties.values() if prop.can_read)
