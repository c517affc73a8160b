"""Validation: path resolution and operation batch checks."""

from typedpatch.validation.paths import (
    PathValidator,
    normalize_path,
    path_segments,
    property_name,
    validate_segments,
)
from typedpatch.validation.validator import (
    ValidationError,
    ValidationErrorKind,
    validate_operation,
    validate_operations,
)

__all__ = [
    # Paths
    "PathValidator",
    "normalize_path",
    "path_segments",
    "property_name",
    "validate_segments",
    # Batches
    "ValidationError",
    "ValidationErrorKind",
    "validate_operation",
    "validate_operations",
]
