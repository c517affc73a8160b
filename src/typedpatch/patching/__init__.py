"""Patching: transactional execution and the PatchDoc entry point."""

from typedpatch.patching.document import PatchDoc, apply, is_valid, try_apply, validate
from typedpatch.patching.errors import (
    CloneError,
    CommitError,
    NestedPathWarning,
    PatchError,
    PatchRejectedError,
    TypeNotPatchableError,
)
from typedpatch.patching.executor import (
    HANDLERS,
    WorkingCopy,
    apply_operation,
    commit,
    create_working_copy,
    execute_batch,
)

__all__ = [
    # Document
    "PatchDoc",
    "validate",
    "is_valid",
    "try_apply",
    "apply",
    # Executor
    "WorkingCopy",
    "HANDLERS",
    "apply_operation",
    "create_working_copy",
    "commit",
    "execute_batch",
    # Errors
    "PatchError",
    "TypeNotPatchableError",
    "CloneError",
    "CommitError",
    "PatchRejectedError",
    "NestedPathWarning",
]
