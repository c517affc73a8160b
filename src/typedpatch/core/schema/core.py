"""Schema registry, deny markers, and per-type schema construction.

Usage:
    @dataclass
    class Profile:
        display_name: str
        email: Annotated[str, DenyPatch()]     # readable, never written

        @deny_patch
        @property
        def slug(self) -> str: ...

    @deny_patch
    @dataclass
    class AuditEntry:                          # whole type unpatchable
        message: str

    schema = schema_for(Profile)
    schema.get("DISPLAY_NAME").can_write       # True, lookup ignores case
"""

from __future__ import annotations

import copy
import dataclasses
import inspect
import logging
import sys
import threading
import typing
import warnings
from collections.abc import Iterator
from types import MappingProxyType
from typing import Any, ClassVar, get_origin

from typedpatch.core.registry import get_default, get_equality
from typedpatch.core.schema.models import (
    DENY_PATCH_ATTR,
    DENY_PATCH_METADATA_KEY,
    DenyPatch,
    Getter,
    PropertyDescriptor,
    Setter,
    TypeSchema,
)
from typedpatch.core.types import (
    PropertyShape,
    annotation_metadata,
    classify,
    element_type,
    is_pydantic_model,
    runtime_class,
)

logger = logging.getLogger(__name__)


def deny_patch[T](target: T) -> T:
    """Mark a class or a property as not patchable.

    On a class, the whole type becomes unpatchable. On a `property` (or on
    the function later wrapped by `property`), only that property loses its
    setter; it stays readable for `from` and `test` targets.

    Args:
        target: Class, property, or accessor function to mark.

    Returns:
        The same object, marked.

    Raises:
        TypeError: If target is none of the supported kinds.

    Example:
        >>> @deny_patch
        ... @dataclass
        ... class Locked:
        ...     value: int
    """
    if isinstance(target, type):
        setattr(target, DENY_PATCH_ATTR, True)
    elif isinstance(target, property):
        for accessor in (target.fget, target.fset, target.fdel):
            if accessor is not None:
                setattr(accessor, DENY_PATCH_ATTR, True)
    elif callable(target):
        setattr(target, DENY_PATCH_ATTR, True)
    else:
        raise TypeError(
            f"deny_patch can mark a class, a property or a function, got {type(target).__name__}"
        )
    return target


def deny_patch_field(**kwargs: Any) -> Any:
    """Dataclass `field()` whose value is readable but never patched.

    Args:
        **kwargs: Forwarded to `dataclasses.field`.

    Returns:
        A dataclass field carrying the deny marker in its metadata.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[DENY_PATCH_METADATA_KEY] = True
    return dataclasses.field(metadata=metadata, **kwargs)


def is_type_denied(cls: type) -> bool:
    """Check if a class carries the type-level deny marker."""
    return getattr(cls, DENY_PATCH_ATTR, False) is True


def _has_deny_metadata(annotation: Any, extra: tuple[Any, ...] = ()) -> bool:
    for item in (*annotation_metadata(annotation), *extra):
        if item is DenyPatch or isinstance(item, DenyPatch):
            return True
    return False


def _attribute_getter(name: str) -> Getter:
    def get_value(instance: Any) -> Any:
        return getattr(instance, name)

    get_value.__qualname__ = f"get[{name}]"
    return get_value


def _attribute_setter(name: str) -> Setter:
    def set_value(instance: Any, value: Any) -> None:
        setattr(instance, name, value)

    set_value.__qualname__ = f"set[{name}]"
    return set_value


def _pydantic_clone(instance: Any) -> Any:
    return instance.model_copy()


@dataclasses.dataclass(slots=True)
class _Declared:
    """Intermediate view of one public property before accessors are bound."""

    name: str
    declared_type: Any
    readable: bool
    writable: bool
    denied: bool


def _evaluate_annotation(annotation: str, base: type) -> Any:
    module = sys.modules.get(base.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    localns = dict(vars(base))
    localns.setdefault(base.__name__, base)
    return eval(annotation, globalns, localns)


def _resolve_hints(cls: type) -> dict[str, Any]:
    """Resolve class annotations, one name at a time when the class as a whole fails.

    Args:
        cls: Class whose annotations to resolve.

    Returns:
        Mapping of attribute name to annotation. Only the names that cannot
        be resolved map to Any.
    """
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError, AttributeError):
        return _resolve_each_hint(cls)


def _resolve_each_hint(cls: type) -> dict[str, Any]:
    hints: dict[str, Any] = {}
    unresolved: list[str] = []
    for base in reversed(cls.__mro__):
        try:
            annotations = inspect.get_annotations(base)
        except NameError:
            continue
        for name, annotation in annotations.items():
            if isinstance(annotation, str):
                try:
                    annotation = _evaluate_annotation(annotation, base)
                except (NameError, TypeError, AttributeError, SyntaxError):
                    unresolved.append(name)
                    annotation = Any
            hints[name] = annotation

    if unresolved:
        warnings.warn(
            f"Could not resolve type hints for {cls.__qualname__} ({', '.join(unresolved)}). "
            f"Unresolved annotations are treated as Any.",
            stacklevel=5,
        )
    return hints


def _is_class_var(annotation: Any) -> bool:
    return annotation is ClassVar or get_origin(annotation) is ClassVar


def _pydantic_fields(cls: type) -> Iterator[_Declared]:
    """Read fields from pydantic's resolved field info.

    Pydantic moves Annotated metadata out of the annotation into `info.metadata`.
    """
    frozen_model = bool(cls.model_config.get("frozen", False))  # type: ignore[attr-defined]
    for name, info in cls.model_fields.items():  # type: ignore[attr-defined]
        if name.startswith("_"):
            continue
        annotation = info.annotation
        yield _Declared(
            name=name,
            declared_type=annotation,
            readable=True,
            writable=not (frozen_model or bool(info.frozen)),
            denied=_has_deny_metadata(annotation, tuple(info.metadata)),
        )


def _dataclass_fields(cls: type, hints: dict[str, Any]) -> Iterator[_Declared]:
    frozen = cls.__dataclass_params__.frozen  # type: ignore[attr-defined]
    for f in dataclasses.fields(cls):
        if f.name.startswith("_"):
            continue
        annotation = hints.get(f.name, f.type)
        if isinstance(annotation, str):
            annotation = Any
        yield _Declared(
            name=f.name,
            declared_type=annotation,
            readable=True,
            writable=not frozen,
            denied=bool(f.metadata.get(DENY_PATCH_METADATA_KEY)) or _has_deny_metadata(annotation),
        )


def _annotated_attributes(cls: type, hints: dict[str, Any]) -> Iterator[_Declared]:
    for name, annotation in hints.items():
        if name.startswith("_") or _is_class_var(annotation):
            continue
        static = inspect.getattr_static(cls, name, None)
        if isinstance(static, (property, classmethod, staticmethod)) or inspect.isfunction(static):
            continue
        yield _Declared(
            name=name,
            declared_type=annotation,
            readable=True,
            writable=True,
            denied=_has_deny_metadata(annotation),
        )


def _properties(cls: type) -> Iterator[_Declared]:
    found: dict[str, property] = {}
    for base in reversed(cls.__mro__):
        if base is object or base.__module__.startswith("pydantic"):
            continue
        for name, attr in vars(base).items():
            if isinstance(attr, property) and not name.startswith("_"):
                found[name] = attr
    for name, prop in found.items():
        declared: Any = Any
        if prop.fget is not None:
            try:
                declared = typing.get_type_hints(prop.fget, include_extras=True).get("return", Any)
            except (NameError, TypeError):
                declared = Any
        accessors = (prop.fget, prop.fset)
        yield _Declared(
            name=name,
            declared_type=declared,
            readable=prop.fget is not None,
            writable=prop.fset is not None,
            denied=any(getattr(fn, DENY_PATCH_ATTR, False) for fn in accessors if fn is not None)
            or _has_deny_metadata(declared),
        )


def _declared_properties(cls: type) -> Iterator[_Declared]:
    """Enumerate public instance-level properties of a class.

    Dataclass fields, Pydantic fields, or (for plain classes) annotated class
    attributes come first, then `property` descriptors across the MRO.
    """
    if is_pydantic_model(cls):
        yield from _pydantic_fields(cls)
        yield from _properties(cls)
        return
    hints = _resolve_hints(cls)
    if dataclasses.is_dataclass(cls):
        yield from _dataclass_fields(cls, hints)
    else:
        yield from _annotated_attributes(cls, hints)
    yield from _properties(cls)


def _describe(declared: _Declared) -> PropertyDescriptor:
    shape = classify(declared.declared_type)
    writable = declared.writable and not declared.denied
    return PropertyDescriptor(
        name=declared.name,
        declared_type=declared.declared_type,
        shape=shape,
        element_type=(
            element_type(declared.declared_type) if shape is PropertyShape.COLLECTION else None
        ),
        getter=_attribute_getter(declared.name) if declared.readable else None,
        setter=_attribute_setter(declared.name) if writable else None,
        default_value=get_default(declared.declared_type) if writable else None,
        equality=get_equality(declared.declared_type) if declared.readable else None,
        denied=declared.denied,
    )


def build_schema(cls: type) -> TypeSchema:
    """Introspect a class and build its accessor table.

    Does not consult or populate the registry; use `schema_for` for the
    memoized schema.

    Args:
        cls: Class to introspect.

    Returns:
        Freshly built TypeSchema.
    """
    denied = is_type_denied(cls)
    properties: dict[str, PropertyDescriptor] = {}
    for declared in _declared_properties(cls):
        key = declared.name.casefold()
        if key in properties:
            if properties[key].name != declared.name:
                warnings.warn(
                    f"{cls.__qualname__}.{declared.name} collides with "
                    f"{properties[key].name} when matched case-insensitively; keeping the first.",
                    stacklevel=3,
                )
            continue
        properties[key] = _describe(declared)

    patchable = not denied and any(prop.can_write for prop in properties.values())
    clone = None
    if patchable:
        clone = _pydantic_clone if is_pydantic_model(cls) else copy.copy

    logger.debug(
        "Built schema for %s: %d properties, patchable=%s",
        cls.__qualname__,
        len(properties),
        patchable,
    )
    return TypeSchema(
        type=cls,
        properties=MappingProxyType(properties),
        patchable=patchable,
        denied=denied,
        clone=clone,
    )


class SchemaRegistry:
    """Process-local registry mapping classes to their TypeSchema.

    Each schema is built once on first request under a lock and published
    atomically; later lookups are plain dict reads.
    """

    def __init__(self) -> None:
        """Initialize empty schema registry."""
        self._by_type: dict[type, TypeSchema] = {}
        self._lock = threading.RLock()

    def get(self, tp: Any) -> TypeSchema:
        """Get (building on first use) the schema for a type annotation.

        Generic aliases resolve to their origin class (`list[X]` -> list);
        annotations without a runtime class (Any, unions) resolve to object.

        Args:
            tp: Class or type annotation.

        Returns:
            The memoized TypeSchema.
        """
        cls = runtime_class(tp) or object
        schema = self._by_type.get(cls)
        if schema is not None:
            return schema
        with self._lock:
            schema = self._by_type.get(cls)
            if schema is None:
                schema = build_schema(cls)
                self._by_type[cls] = schema
            return schema

    def is_built(self, tp: Any) -> bool:
        """Check if a schema has been published for this type."""
        return (runtime_class(tp) or object) in self._by_type

    def __len__(self) -> int:
        return len(self._by_type)


# Module-level registry instance
_registry = SchemaRegistry()


def get_schema_registry() -> SchemaRegistry:
    """Access the global schema registry.

    Returns:
        The process-wide SchemaRegistry instance.
    """
    return _registry


def schema_for(tp: Any) -> TypeSchema:
    """Get the memoized schema for a type.

    Args:
        tp: Class or type annotation.

    Returns:
        TypeSchema shared by every caller in the process.
    """
    return _registry.get(tp)
