"""Exceptions and warnings raised by the patch engine.

Only structural failures raise. Problems with individual operations are
reported as ValidationError data or failed PatchExecutionResults.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from typedpatch.core.operation import messages

if TYPE_CHECKING:
    from typedpatch.core.operation import PatchExecutionResult


class PatchError(Exception):
    """Base class for structural patch failures."""

    pass


class TypeNotPatchableError(PatchError):
    """Raised when applying a patch to a type that cannot be patched."""

    def __init__(self, cls: type) -> None:
        self.type = cls
        super().__init__(messages.type_not_patchable(cls.__name__))


class CloneError(PatchError):
    """Raised when the working copy of an instance cannot be created."""

    pass


class CommitError(PatchError):
    """Raised when copying the working copy back onto the instance fails."""

    pass


class PatchRejectedError(PatchError):
    """Raised by `apply` when at least one operation failed.

    Attributes:
        results: Per-operation results, in batch order.
    """

    def __init__(self, message: str, results: Sequence[PatchExecutionResult]) -> None:
        super().__init__(message)
        self.results = list(results)

    @property
    def failures(self) -> list[PatchExecutionResult]:
        """Results of the operations that failed."""
        return [result for result in self.results if not result.success]


class NestedPathWarning(UserWarning):
    """An executed operation named a nested path; only its top-level property was used."""

    pass
