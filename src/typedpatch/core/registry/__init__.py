"""Equality and default-value registries keyed by type."""

from typedpatch.core.registry.core import (
    DefaultRegistry,
    EqualityFn,
    EqualityRegistry,
    get_default,
    get_default_registry,
    get_equality,
    get_equality_registry,
)

__all__ = [
    "EqualityFn",
    "EqualityRegistry",
    "DefaultRegistry",
    "get_equality",
    "get_default",
    "get_equality_registry",
    "get_default_registry",
]
