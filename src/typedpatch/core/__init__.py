"""Core functionalities: registries, type schemas, and operation primitives.

Architecture Note:
    core/ holds the read-mostly building blocks: process-wide registries that
    are populated once per type and never mutated afterwards, plus the
    operation value objects and rule table. Path validation lives in
    validation/, transactional application in patching/.
"""

from typedpatch.core.operation import (
    RULES,
    OperationRule,
    OperationType,
    PatchExecutionResult,
    PatchOperation,
    dump_operations,
    parse_operations,
    rule_for,
)
from typedpatch.core.registry import (
    DefaultRegistry,
    EqualityRegistry,
    get_default,
    get_default_registry,
    get_equality,
    get_equality_registry,
)
from typedpatch.core.schema import (
    DenyPatch,
    PropertyDescriptor,
    SchemaRegistry,
    TypeSchema,
    deny_patch,
    deny_patch_field,
    get_schema_registry,
    schema_for,
)
from typedpatch.core.types import PropertyShape, classify, element_type

__all__ = [
    # Types
    "PropertyShape",
    "classify",
    "element_type",
    # Registries
    "EqualityRegistry",
    "DefaultRegistry",
    "get_equality",
    "get_default",
    "get_equality_registry",
    "get_default_registry",
    # Schema
    "deny_patch",
    "deny_patch_field",
    "DenyPatch",
    "PropertyDescriptor",
    "TypeSchema",
    "SchemaRegistry",
    "schema_for",
    "get_schema_registry",
    # Operations
    "OperationType",
    "PatchOperation",
    "PatchExecutionResult",
    "OperationRule",
    "RULES",
    "rule_for",
    "parse_operations",
    "dump_operations",
]
