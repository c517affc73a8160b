"""PatchDoc: the per-type entry point for validating and applying patches.

Usage:
    doc = PatchDoc.for_type(Profile)

    errors = list(doc.validate(operations))
    if not errors:
        committed, results = doc.try_apply(profile, operations)

    # Or raise on any failed operation
    doc.apply(profile, operations)

    # Module-level shortcuts resolve the document for you
    try_apply(profile, operations)
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from typing import Any, ClassVar

from typedpatch.config import PatchSettings, get_settings
from typedpatch.core.operation import PatchExecutionResult, PatchOperation
from typedpatch.core.schema import TypeSchema, schema_for
from typedpatch.patching.errors import PatchRejectedError
from typedpatch.patching.executor import execute_batch
from typedpatch.validation import PathValidator, ValidationError, validate_operations


class PatchDoc[T]:
    """Validates and applies operation batches to instances of one type.

    The schema and path memo are built once per document. Documents built
    with `for_type` are shared process-wide; construct one directly to use
    custom settings.

    Args:
        cls: Type whose instances are patched.
        settings: Engine settings; defaults to the process settings.
    """

    _documents: ClassVar[dict[type, PatchDoc[Any]]] = {}
    _documents_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, cls: type[T], settings: PatchSettings | None = None) -> None:
        self._type = cls
        self._settings = settings or get_settings()
        self._schema = schema_for(cls)
        self._paths = PathValidator(cls, self._settings)

    @classmethod
    def for_type(cls, target: type[T]) -> PatchDoc[T]:
        """Get the shared document for a type, creating it on first use."""
        document = cls._documents.get(target)
        if document is not None:
            return document
        with cls._documents_lock:
            document = cls._documents.get(target)
            if document is None:
                document = cls(target)
                cls._documents[target] = document
        return document

    @classmethod
    def clear_cache(cls) -> None:
        """Forget every shared document. Mainly for tests."""
        with cls._documents_lock:
            cls._documents.clear()

    @property
    def type(self) -> type[T]:
        return self._type

    @property
    def schema(self) -> TypeSchema:
        return self._schema

    @property
    def settings(self) -> PatchSettings:
        return self._settings

    @property
    def paths(self) -> PathValidator:
        return self._paths

    @property
    def is_patchable(self) -> bool:
        return self._schema.patchable

    def validate(self, operations: Iterable[PatchOperation]) -> Iterator[ValidationError]:
        """Lazily report problems with a batch without touching any instance.

        Args:
            operations: Operations in batch order.

        Yields:
            One ValidationError per failing operation.
        """
        return validate_operations(self._schema, self._paths, operations)

    def is_valid(self, operations: Iterable[PatchOperation]) -> bool:
        """Check that a batch produces no validation errors."""
        return next(iter(self.validate(operations)), None) is None

    def try_apply(
        self, instance: T, operations: Iterable[PatchOperation]
    ) -> tuple[bool, list[PatchExecutionResult]]:
        """Apply a batch all-or-nothing.

        Args:
            instance: Instance to patch; unchanged unless every operation succeeds.
            operations: Operations in batch order.

        Returns:
            (committed, results) with one result per operation, in order.

        Raises:
            TypeNotPatchableError: If the type cannot be patched.
            CloneError: If the working copy cannot be created.
            CommitError: If committing to the instance fails.
        """
        return execute_batch(self._schema, instance, operations, self._settings)

    def apply(
        self, instance: T, operations: Iterable[PatchOperation]
    ) -> list[PatchExecutionResult]:
        """Apply a batch, raising if any operation failed.

        Returns:
            Per-operation results, all successful.

        Raises:
            PatchRejectedError: If at least one operation failed; the
                instance is unchanged and the error carries every result.
        """
        committed, results = self.try_apply(instance, operations)
        if not committed:
            failures = [result for result in results if not result.success]
            raise PatchRejectedError(
                f"{len(failures)} of {len(results)} operations failed on "
                f"{self._schema.name}: {failures[0].error_message}",
                results,
            )
        return results

    def __repr__(self) -> str:
        return f"PatchDoc({self._schema.name}, patchable={self._schema.patchable})"


def validate(cls: type[Any], operations: Iterable[PatchOperation]) -> Iterator[ValidationError]:
    """Validate a batch against a type using its shared document."""
    return PatchDoc.for_type(cls).validate(operations)


def is_valid(cls: type[Any], operations: Iterable[PatchOperation]) -> bool:
    """Check a batch against a type using its shared document."""
    return PatchDoc.for_type(cls).is_valid(operations)


def try_apply[T](
    instance: T,
    operations: Iterable[PatchOperation],
    cls: type[T] | None = None,
) -> tuple[bool, list[PatchExecutionResult]]:
    """Apply a batch all-or-nothing using the shared document.

    Args:
        instance: Instance to patch.
        operations: Operations in batch order.
        cls: Type to patch as; defaults to the instance's own type.
    """
    return PatchDoc.for_type(cls or type(instance)).try_apply(instance, operations)


def apply[T](
    instance: T,
    operations: Iterable[PatchOperation],
    cls: type[T] | None = None,
) -> list[PatchExecutionResult]:
    """Apply a batch using the shared document, raising PatchRejectedError on failure."""
    return PatchDoc.for_type(cls or type(instance)).apply(instance, operations)
