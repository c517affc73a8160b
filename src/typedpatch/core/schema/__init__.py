"""Type schema functionality: deny markers, descriptors, and the schema registry."""

from typedpatch.core.schema.core import (
    SchemaRegistry,
    build_schema,
    deny_patch,
    deny_patch_field,
    get_schema_registry,
    is_type_denied,
    schema_for,
)
from typedpatch.core.schema.models import (
    DENY_PATCH_ATTR,
    DENY_PATCH_METADATA_KEY,
    DenyPatch,
    Getter,
    PropertyDescriptor,
    Setter,
    TypeSchema,
)

__all__ = [
    # Models
    "DenyPatch",
    "PropertyDescriptor",
    "TypeSchema",
    "Getter",
    "Setter",
    "DENY_PATCH_ATTR",
    "DENY_PATCH_METADATA_KEY",
    # Core
    "deny_patch",
    "deny_patch_field",
    "is_type_denied",
    "build_schema",
    "schema_for",
    "get_schema_registry",
    "SchemaRegistry",
]
