"""Transactional execution of operation batches.

The executor never touches the live instance until every operation has
succeeded on a shallow working copy:

    clone = copy(instance)
    for op in operations: apply op to clone, record result
    if all succeeded: copy every writable property from clone onto instance

The working copy is shallow. Replacing a top-level property is rolled back
by discarding the copy; mutating the internals of a nested object that both
sides share is not.

Handlers resolve only the first segment of `path` and `from`. A nested path
such as "/address/city" acts on the top-level `address` property.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from typedpatch.config import PatchSettings
from typedpatch.core.operation import OperationType, PatchExecutionResult, PatchOperation, rule_for
from typedpatch.core.operation import messages
from typedpatch.core.schema import PropertyDescriptor, Setter, TypeSchema
from typedpatch.patching.errors import (
    CloneError,
    CommitError,
    NestedPathWarning,
    TypeNotPatchableError,
)
from typedpatch.validation.paths import path_segments, property_name

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WorkingCopy:
    """Shallow clone under modification plus values written to write-only properties.

    Write-only properties cannot be read back from the clone at commit time,
    so the last value written to each is remembered here.
    """

    schema: TypeSchema
    target: Any
    written: dict[str, Any] = field(default_factory=dict)

    def read(self, prop: PropertyDescriptor) -> Any:
        if prop.getter is None:
            raise AttributeError(messages.property_not_readable(prop.name, self.schema.name))
        return prop.getter(self.target)

    def write(self, prop: PropertyDescriptor, value: Any) -> None:
        if prop.setter is None:
            raise AttributeError(messages.property_not_writeable(prop.name, self.schema.name))
        prop.setter(self.target, value)
        if not prop.can_read:
            self.written[prop.name] = value

    def staged(self) -> list[tuple[str, Setter, Any]]:
        """Collect (name, setter, value) for every writable property to commit.

        Raises:
            CommitError: If a property cannot be read back from the clone.
        """
        staged: list[tuple[str, Setter, Any]] = []
        for prop in self.schema.writable():
            if prop.setter is None:
                continue
            if prop.can_read:
                try:
                    value = self.read(prop)
                except Exception as exc:
                    raise CommitError(
                        f"Could not read property '{prop.name}' from the working copy of "
                        f"{self.schema.name}: {exc}"
                    ) from exc
            elif prop.name in self.written:
                value = self.written[prop.name]
            else:
                continue
            staged.append((prop.name, prop.setter, value))
        return staged


Handler = Callable[[WorkingCopy, str, PatchOperation], PatchExecutionResult]


def _error_text(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


def _readable(schema: TypeSchema, name: str | None) -> PropertyDescriptor | None:
    prop = schema.get(name) if name else None
    return prop if prop is not None and prop.can_read else None


def _writable(schema: TypeSchema, name: str | None) -> PropertyDescriptor | None:
    prop = schema.get(name) if name else None
    return prop if prop is not None and prop.can_write else None


def _apply_add(working: WorkingCopy, name: str, operation: PatchOperation) -> PatchExecutionResult:
    return PatchExecutionResult.failed(operation, messages.operation_not_supported(operation.op))


def _apply_copy(working: WorkingCopy, name: str, operation: PatchOperation) -> PatchExecutionResult:
    schema = working.schema
    from_name = property_name(operation.from_)
    if not from_name or not from_name.strip():
        return PatchExecutionResult.failed(operation, messages.operation_requires_from(operation.op))

    source = _readable(schema, from_name)
    if source is None:
        return PatchExecutionResult.failed(
            operation, messages.property_not_readable(operation.from_, schema.name)
        )
    destination = _writable(schema, name)
    if destination is None:
        return PatchExecutionResult.failed(
            operation, messages.property_not_writeable(operation.path, schema.name)
        )

    try:
        working.write(destination, working.read(source))
    except Exception as exc:
        return PatchExecutionResult.failed(operation, _error_text(exc))
    return PatchExecutionResult.succeeded(operation)


def _apply_move(working: WorkingCopy, name: str, operation: PatchOperation) -> PatchExecutionResult:
    schema = working.schema
    from_name = property_name(operation.from_)
    if not from_name or not from_name.strip():
        return PatchExecutionResult.failed(operation, messages.operation_requires_from(operation.op))

    source = _readable(schema, from_name)
    if source is None:
        return PatchExecutionResult.failed(
            operation, messages.property_not_readable(operation.from_, schema.name)
        )
    destination = _writable(schema, name)
    if destination is None:
        return PatchExecutionResult.failed(
            operation, messages.property_not_writeable(operation.path, schema.name)
        )
    if not source.can_write:
        return PatchExecutionResult.failed(
            operation, messages.property_not_writeable(operation.from_, schema.name)
        )

    try:
        value = working.read(source)
        working.write(destination, value)
        working.write(source, source.default_value)
    except Exception as exc:
        return PatchExecutionResult.failed(operation, _error_text(exc))
    return PatchExecutionResult.succeeded(operation)


def _apply_remove(working: WorkingCopy, name: str, operation: PatchOperation) -> PatchExecutionResult:
    schema = working.schema
    target = _writable(schema, name)
    if target is None:
        return PatchExecutionResult.failed(
            operation, messages.property_not_writeable(operation.path, schema.name)
        )

    try:
        working.write(target, target.default_value)
    except Exception as exc:
        return PatchExecutionResult.failed(operation, _error_text(exc))
    return PatchExecutionResult.succeeded(operation)


def _apply_replace(working: WorkingCopy, name: str, operation: PatchOperation) -> PatchExecutionResult:
    schema = working.schema
    target = _writable(schema, name)
    if target is None:
        return PatchExecutionResult.failed(
            operation, messages.property_not_writeable(operation.path, schema.name)
        )

    try:
        working.write(target, operation.value)
    except Exception as exc:
        return PatchExecutionResult.failed(operation, _error_text(exc))
    return PatchExecutionResult.succeeded(operation)


def _apply_test(working: WorkingCopy, name: str, operation: PatchOperation) -> PatchExecutionResult:
    schema = working.schema
    target = _readable(schema, name)
    if target is None or target.equality is None:
        return PatchExecutionResult.failed(
            operation, messages.property_not_readable(operation.path, schema.name)
        )

    expected = operation.value
    try:
        actual = working.read(target)
        if actual is None and expected is None:
            return PatchExecutionResult.succeeded(operation)
        if actual is None or expected is None or not target.equality(actual, expected):
            return PatchExecutionResult.failed(
                operation, messages.operation_test_failed(expected, actual)
            )
    except Exception as exc:
        return PatchExecutionResult.failed(operation, _error_text(exc))
    return PatchExecutionResult.succeeded(operation)


HANDLERS: dict[OperationType, Handler] = {
    OperationType.ADD: _apply_add,
    OperationType.COPY: _apply_copy,
    OperationType.MOVE: _apply_move,
    OperationType.REMOVE: _apply_remove,
    OperationType.REPLACE: _apply_replace,
    OperationType.TEST: _apply_test,
}


def _warn_if_nested(operation: PatchOperation) -> None:
    paths = [operation.path]
    if rule_for(operation.op).requires_from:
        paths.append(operation.from_)
    for path in paths:
        if path is not None and len(path_segments(path)) > 1:
            warnings.warn(
                f"{operation.op.display_name} operation path '{path}' is nested; "
                f"only its top-level property '{property_name(path)}' is patched.",
                NestedPathWarning,
                stacklevel=5,
            )


def apply_operation(
    working: WorkingCopy,
    operation: PatchOperation,
    warn_on_nested_paths: bool = True,
) -> PatchExecutionResult:
    """Apply one operation to the working copy.

    Never raises for the operation's own failures; they are returned as a
    failed result.

    Args:
        working: Working copy under modification.
        operation: Operation to apply.
        warn_on_nested_paths: Emit NestedPathWarning for multi-segment paths.

    Returns:
        Result for this operation.
    """
    name = property_name(operation.path)
    if not name or not name.strip():
        return PatchExecutionResult.failed(operation, messages.operation_requires_path(operation.op))

    handler = HANDLERS.get(operation.op)
    if handler is None:
        return PatchExecutionResult.failed(operation, messages.operation_not_supported(operation.op))

    if warn_on_nested_paths:
        _warn_if_nested(operation)
    return handler(working, name, operation)


def create_working_copy(schema: TypeSchema, instance: Any) -> WorkingCopy:
    """Shallow-clone an instance for trial application.

    Args:
        schema: Schema of the instance's type.
        instance: Live instance.

    Returns:
        Working copy wrapping the clone.

    Raises:
        CloneError: If the type has no clone factory or cloning fails.
    """
    if schema.clone is None:
        raise CloneError(f"Type {schema.name} has no shallow-copy support.")
    try:
        clone = schema.clone(instance)
    except Exception as exc:
        raise CloneError(f"Could not create a working copy of {schema.name}: {exc}") from exc
    return WorkingCopy(schema=schema, target=clone)


def commit(working: WorkingCopy, instance: Any) -> None:
    """Copy every writable property from the working copy onto the instance.

    Args:
        working: Working copy after all operations succeeded.
        instance: Live instance to update.

    Every value is read from the working copy before the first write, so a
    failing getter leaves the instance untouched.

    Raises:
        CommitError: If a getter raises on the working copy or a setter
            raises on the live instance.
    """
    for name, setter, value in working.staged():
        try:
            setter(instance, value)
        except Exception as exc:
            raise CommitError(
                f"Could not commit property '{name}' on {working.schema.name}: {exc}"
            ) from exc


def execute_batch(
    schema: TypeSchema,
    instance: Any,
    operations: Iterable[PatchOperation],
    settings: PatchSettings,
) -> tuple[bool, list[PatchExecutionResult]]:
    """Apply a batch all-or-nothing.

    Args:
        schema: Schema of the instance's type.
        instance: Live instance; only modified if every operation succeeds.
        operations: Operations in batch order.
        settings: Engine settings.

    Returns:
        (committed, results) with one result per operation, in order.

    Raises:
        TypeNotPatchableError: If the type cannot be patched.
        TypeError: If instance is not an instance of the schema's type.
        CloneError: If the working copy cannot be created.
        CommitError: If committing to the live instance fails.
    """
    if not schema.patchable:
        raise TypeNotPatchableError(schema.type)
    if not isinstance(instance, schema.type):
        raise TypeError(f"Expected an instance of {schema.name}, got {type(instance).__name__}")

    working = create_working_copy(schema, instance)
    results = [
        apply_operation(working, operation, settings.warn_on_nested_paths)
        for operation in operations
    ]

    failed = sum(1 for result in results if not result.success)
    if failed:
        logger.debug(
            "Discarded working copy of %s: %d of %d operations failed",
            schema.name,
            failed,
            len(results),
        )
        return False, results

    commit(working, instance)
    logger.debug("Committed %d operations to %s", len(results), schema.name)
    return True, results
