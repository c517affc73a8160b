"""Process-wide equality and default-value registries.

Both registries map a type annotation to a value computed once and reused for
every later lookup. Common scalar types are preloaded; anything else is
derived on first request and published under a lock.

Usage:
    from typedpatch.core.registry import get_default, get_equality

    get_default(int)            # 0
    get_default(str)            # None
    get_default(UUID)           # UUID(int=0)
    get_equality(int)(1, 1.0)   # True
"""

from __future__ import annotations

import enum
import numbers
import operator
import threading
import uuid
from collections.abc import Callable
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any

from typedpatch.core.types import is_optional, runtime_class, unwrap

EqualityFn = Callable[[Any, Any], bool]

_PRELOADED_DEFAULTS: dict[Any, Any] = {
    bool: False,
    int: 0,
    float: 0.0,
    complex: 0j,
    Decimal: Decimal(0),
    str: None,
    bytes: None,
    datetime: datetime.min,
    date: date.min,
    time: time(),
    timedelta: timedelta(0),
    uuid.UUID: uuid.UUID(int=0),
}

_PRELOADED_EQUALITY_TYPES: tuple[type, ...] = (
    bool,
    int,
    float,
    complex,
    Decimal,
    str,
    bytes,
    datetime,
    date,
    time,
    timedelta,
    uuid.UUID,
)


def _typed_equality(cls: type) -> EqualityFn:
    """Build a comparer that requires the right operand to be a `cls`.

    Numbers accept any other number so that `1 == 1.0` still holds.

    Args:
        cls: Declared class of the left operand.

    Returns:
        Comparer raising TypeError when the right operand has the wrong type.
    """
    accepted: type | tuple[type, ...] = numbers.Number if issubclass(cls, numbers.Number) else cls

    def equals(a: Any, b: Any) -> bool:
        if not isinstance(b, accepted):
            raise TypeError(f"Cannot compare {cls.__name__} with {type(b).__name__}")
        return bool(a == b)

    equals.__qualname__ = f"equals[{cls.__name__}]"
    return equals


def _create_equality(tp: Any) -> EqualityFn:
    cls = runtime_class(tp)
    if cls is None or cls is object:
        return operator.eq
    return _typed_equality(cls)


def _create_default(tp: Any) -> Any:
    if is_optional(tp):
        return None
    inner = unwrap(tp)
    if inner in _PRELOADED_DEFAULTS:
        return _PRELOADED_DEFAULTS[inner]
    if isinstance(inner, type) and issubclass(inner, enum.Enum):
        return next((member for member in inner if member.value == 0), None)
    return None


class _TypeCache:
    """Lazily populated type -> value mapping with lock-free reads.

    Entries are derived once under a lock and never replaced afterwards.
    Unhashable annotations are computed on every request without caching.
    """

    def __init__(self, factory: Callable[[Any], Any], preloaded: dict[Any, Any]) -> None:
        self._factory = factory
        self._values: dict[Any, Any] = dict(preloaded)
        self._lock = threading.RLock()

    def get(self, tp: Any) -> Any:
        try:
            return self._values[tp]
        except KeyError:
            pass
        except TypeError:
            return self._factory(tp)
        with self._lock:
            if tp not in self._values:
                self._values[tp] = self._factory(tp)
            return self._values[tp]

    def __contains__(self, tp: Any) -> bool:
        try:
            return tp in self._values
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._values)


class EqualityRegistry:
    """Registry mapping types to equality comparers.

    Preloaded for numeric, string, bytes, date/time and UUID types. Any other
    type gets a comparer derived from its runtime class on first request.
    """

    def __init__(self) -> None:
        """Initialize registry with comparers for the common scalar types."""
        preloaded = {cls: _typed_equality(cls) for cls in _PRELOADED_EQUALITY_TYPES}
        self._cache = _TypeCache(self._derive, preloaded)

    def _derive(self, tp: Any) -> EqualityFn:
        inner = unwrap(tp)
        if inner is not tp:
            return self.get(inner)
        return _create_equality(inner)

    def get(self, tp: Any) -> EqualityFn:
        """Get the comparer for a type annotation.

        Args:
            tp: Declared type annotation (Optional/Annotated wrappers allowed).

        Returns:
            Callable `(current, expected) -> bool`.
        """
        return self._cache.get(tp)  # type: ignore[no-any-return]

    def is_cached(self, tp: Any) -> bool:
        """Check if a comparer for this exact annotation has been published."""
        return tp in self._cache


class DefaultRegistry:
    """Registry mapping types to their zero/empty value.

    Value-like types (numbers, date/time, UUID, enums with a zero member)
    default to their all-zero value; everything else, including str and any
    `X | None`, defaults to None.
    """

    def __init__(self) -> None:
        """Initialize registry with defaults for the common scalar types."""
        self._cache = _TypeCache(_create_default, _PRELOADED_DEFAULTS)

    def get(self, tp: Any) -> Any:
        """Get the default value for a type annotation.

        Args:
            tp: Declared type annotation.

        Returns:
            Zero value for value-like types, None otherwise.
        """
        return self._cache.get(tp)

    def is_cached(self, tp: Any) -> bool:
        """Check if a default for this exact annotation has been published."""
        return tp in self._cache


# Module-level registry instances
_equality_registry = EqualityRegistry()
_default_registry = DefaultRegistry()


def get_equality_registry() -> EqualityRegistry:
    """Access the global equality registry.

    Returns:
        The process-wide EqualityRegistry instance.
    """
    return _equality_registry


def get_default_registry() -> DefaultRegistry:
    """Access the global default-value registry.

    Returns:
        The process-wide DefaultRegistry instance.
    """
    return _default_registry


def get_equality(tp: Any) -> EqualityFn:
    """Shortcut for `get_equality_registry().get(tp)`."""
    return _equality_registry.get(tp)


def get_default(tp: Any) -> Any:
    """Shortcut for `get_default_registry().get(tp)`."""
    return _default_registry.get(tp)
