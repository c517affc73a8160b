"""Validation of operation batches before any mutation.

Each operation yields at most its first failing check, in this order:

    1. path missing or blank
    2. path does not resolve for the kind's read/write requirements
    3. `from` missing or blank (kinds that need one)
    4. `from` does not resolve for the kind's read/write requirements
    5. value missing (kinds that need one)

An unpatchable type short-circuits the whole batch with a single error.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum, auto

from typedpatch.core.operation import PatchOperation, rule_for
from typedpatch.core.operation import messages
from typedpatch.core.schema import TypeSchema
from typedpatch.validation.paths import PathValidator


class ValidationErrorKind(Enum):
    """Which check an operation failed."""

    TYPE_NOT_PATCHABLE = auto()
    REQUIRES_PATH = auto()
    PATH_NOT_VALID = auto()
    REQUIRES_FROM = auto()
    FROM_NOT_VALID = auto()
    REQUIRES_VALUE = auto()


@dataclass(frozen=True, slots=True)
class ValidationError:
    """A reported problem with an operation batch. Data, never raised.

    Attributes:
        kind: Which check failed.
        message: Human-readable description.
        operation: The offending operation, None for batch-level errors.
    """

    kind: ValidationErrorKind
    message: str
    operation: PatchOperation | None = None


def _is_blank(path: str | None) -> bool:
    return path is None or not path.strip()


def validate_operation(
    schema: TypeSchema,
    paths: PathValidator,
    operation: PatchOperation,
) -> ValidationError | None:
    """Validate a single operation against a patchable type.

    Args:
        schema: Schema of the target type.
        paths: Path validator bound to the same type.
        operation: Operation to check.

    Returns:
        The first failing check, or None if the operation is valid.
    """
    op = operation.op
    rule = rule_for(op)

    if _is_blank(operation.path):
        return ValidationError(
            ValidationErrorKind.REQUIRES_PATH,
            messages.operation_requires_path(op),
            operation,
        )
    if not paths.is_valid(operation.path, rule.path_read, rule.path_write):
        return ValidationError(
            ValidationErrorKind.PATH_NOT_VALID,
            messages.operation_path_not_valid(op, operation.path, schema.name),
            operation,
        )

    if rule.requires_from:
        from_path = operation.from_
        if from_path is None or _is_blank(from_path):
            return ValidationError(
                ValidationErrorKind.REQUIRES_FROM,
                messages.operation_requires_from(op),
                operation,
            )
        if not paths.is_valid(from_path, rule.from_read, rule.from_write):
            return ValidationError(
                ValidationErrorKind.FROM_NOT_VALID,
                messages.operation_from_not_valid(op, from_path, schema.name),
                operation,
            )

    if rule.requires_value and operation.value is None:
        return ValidationError(
            ValidationErrorKind.REQUIRES_VALUE,
            messages.operation_requires_value(op),
            operation,
        )
    return None


def validate_operations(
    schema: TypeSchema,
    paths: PathValidator,
    operations: Iterable[PatchOperation],
) -> Iterator[ValidationError]:
    """Lazily validate a batch of operations.

    Args:
        schema: Schema of the target type.
        paths: Path validator bound to the same type.
        operations: Operations in batch order.

    Yields:
        One ValidationError per failing operation, in batch order. A single
        TYPE_NOT_PATCHABLE error if the type cannot be patched at all.
    """
    if not schema.patchable:
        yield ValidationError(
            ValidationErrorKind.TYPE_NOT_PATCHABLE,
            messages.type_not_patchable(schema.name),
        )
        return

    for operation in operations:
        error = validate_operation(schema, paths, operation)
        if error is not None:
            yield error
