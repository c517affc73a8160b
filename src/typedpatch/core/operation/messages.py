"""Error message templates shared by validation and execution."""

from __future__ import annotations

from typing import Any

from typedpatch.core.operation.models import OperationType

TYPE_NOT_PATCHABLE = (
    "Type {type_name} cannot be patched. This is either because it has the deny_patch "
    "marker or all of its properties are read-only or have the deny_patch marker."
)
OPERATION_NOT_SUPPORTED = "{op} operation is not supported."
OPERATION_REQUIRES_PATH = "{op} operation requires a path."
OPERATION_REQUIRES_VALUE = "{op} operation requires a value."
OPERATION_REQUIRES_FROM = "{op} operation requires a from path."
OPERATION_PATH_NOT_VALID = "{op} operation path '{path}' is not valid for type {type_name}."
OPERATION_FROM_NOT_VALID = "{op} operation from '{path}' is not valid for type {type_name}."
PROPERTY_NOT_READABLE = "Property '{path}' is missing or cannot be read from type {type_name}."
PROPERTY_NOT_WRITEABLE = (
    "Property '{path}' is missing or does not support patching on type {type_name}."
)
OPERATION_TEST_FAILED = "Expected value {expected} does not equal actual value {actual}."


def type_not_patchable(type_name: str) -> str:
    return TYPE_NOT_PATCHABLE.format(type_name=type_name)


def operation_not_supported(op: OperationType) -> str:
    return OPERATION_NOT_SUPPORTED.format(op=op.display_name)


def operation_requires_path(op: OperationType) -> str:
    return OPERATION_REQUIRES_PATH.format(op=op.display_name)


def operation_requires_value(op: OperationType) -> str:
    return OPERATION_REQUIRES_VALUE.format(op=op.display_name)


def operation_requires_from(op: OperationType) -> str:
    return OPERATION_REQUIRES_FROM.format(op=op.display_name)


def operation_path_not_valid(op: OperationType, path: str, type_name: str) -> str:
    return OPERATION_PATH_NOT_VALID.format(op=op.display_name, path=path, type_name=type_name)


def operation_from_not_valid(op: OperationType, path: str, type_name: str) -> str:
    return OPERATION_FROM_NOT_VALID.format(op=op.display_name, path=path, type_name=type_name)


def property_not_readable(path: str | None, type_name: str) -> str:
    return PROPERTY_NOT_READABLE.format(path=path, type_name=type_name)


def property_not_writeable(path: str | None, type_name: str) -> str:
    return PROPERTY_NOT_WRITEABLE.format(path=path, type_name=type_name)


def operation_test_failed(expected: Any, actual: Any) -> str:
    return OPERATION_TEST_FAILED.format(expected=expected, actual=actual)
