"""Operation functionality: kinds, models, rule table, messages, and wire codec."""

from typedpatch.core.operation.models import OperationType, PatchExecutionResult, PatchOperation
from typedpatch.core.operation.rules import (
    REQUIRES_FROM,
    REQUIRES_FROM_READ,
    REQUIRES_FROM_WRITE,
    REQUIRES_PATH_READ,
    REQUIRES_PATH_WRITE,
    REQUIRES_VALUE,
    RULES,
    UNSUPPORTED_RULE,
    OperationRule,
    rule_for,
)
from typedpatch.core.operation.wire import dump_operation, dump_operations, parse_operations

__all__ = [
    # Models
    "OperationType",
    "PatchOperation",
    "PatchExecutionResult",
    # Rules
    "OperationRule",
    "RULES",
    "UNSUPPORTED_RULE",
    "REQUIRES_VALUE",
    "REQUIRES_FROM",
    "REQUIRES_PATH_READ",
    "REQUIRES_PATH_WRITE",
    "REQUIRES_FROM_READ",
    "REQUIRES_FROM_WRITE",
    "rule_for",
    # Wire
    "parse_operations",
    "dump_operations",
    "dump_operation",
]
