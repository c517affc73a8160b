"""TypedPatch: JSON-Patch style operations applied to typed Python objects.

Usage:
    from typedpatch import PatchDoc, parse_operations

    @dataclass
    class Profile:
        name: str
        nickname: str | None = None
        tags: list[str] = field(default_factory=list)

    operations = parse_operations('[{"op": "replace", "path": "/name", "value": "Ada"}]')

    doc = PatchDoc.for_type(Profile)
    for error in doc.validate(operations):
        print(error.message)

    committed, results = doc.try_apply(profile, operations)
"""

__version__ = "0.1.0"

# Configuration
from typedpatch.config import PatchSettings, get_settings, reset_settings_cache

# Core primitives
from typedpatch.core import (
    DenyPatch,
    OperationType,
    PatchExecutionResult,
    PatchOperation,
    PropertyDescriptor,
    PropertyShape,
    TypeSchema,
    deny_patch,
    deny_patch_field,
    dump_operations,
    get_default,
    get_equality,
    parse_operations,
    schema_for,
)

# Patching
from typedpatch.patching import (
    CloneError,
    CommitError,
    NestedPathWarning,
    PatchDoc,
    PatchError,
    PatchRejectedError,
    TypeNotPatchableError,
    apply,
    is_valid,
    try_apply,
    validate,
)

# Validation
from typedpatch.validation import ValidationError, ValidationErrorKind

__all__ = [
    # Version
    "__version__",
    # Operations
    "OperationType",
    "PatchOperation",
    "PatchExecutionResult",
    "parse_operations",
    "dump_operations",
    # Schema
    "deny_patch",
    "deny_patch_field",
    "DenyPatch",
    "PropertyDescriptor",
    "PropertyShape",
    "TypeSchema",
    "schema_for",
    "get_equality",
    "get_default",
    # Documents
    "PatchDoc",
    "validate",
    "is_valid",
    "try_apply",
    "apply",
    # Validation
    "ValidationError",
    "ValidationErrorKind",
    # Errors
    "PatchError",
    "TypeNotPatchableError",
    "CloneError",
    "CommitError",
    "PatchRejectedError",
    "NestedPathWarning",
    # Configuration
    "PatchSettings",
    "get_settings",
    "reset_settings_cache",
]
