"""Operation rule table.

Single source of truth for what each operation kind needs, consumed by both
validation and execution.

    kind      value  from  path read  path write  from read  from write
    ADD       yes    no    no         yes         -          -
    COPY      no     yes   no         yes         yes        no
    MOVE      no     yes   no         yes         yes        yes
    REMOVE    no     no    no         yes         -          -
    REPLACE   yes    no    no         yes         -          -
    TEST      no     no    yes        no          -          -
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from typedpatch.core.operation.models import OperationType

REQUIRES_VALUE = OperationType.ADD | OperationType.REPLACE
REQUIRES_FROM = OperationType.COPY | OperationType.MOVE
REQUIRES_PATH_READ = OperationType.TEST
REQUIRES_PATH_WRITE = (
    OperationType.ADD
    | OperationType.COPY
    | OperationType.MOVE
    | OperationType.REMOVE
    | OperationType.REPLACE
)
REQUIRES_FROM_READ = OperationType.COPY | OperationType.MOVE
REQUIRES_FROM_WRITE = OperationType.MOVE


@dataclass(frozen=True, slots=True)
class OperationRule:
    """Requirement flags for one operation kind."""

    requires_value: bool = False
    requires_from: bool = False
    path_read: bool = False
    path_write: bool = False
    from_read: bool = False
    from_write: bool = False


def _rule(op: OperationType) -> OperationRule:
    return OperationRule(
        requires_value=op in REQUIRES_VALUE,
        requires_from=op in REQUIRES_FROM,
        path_read=op in REQUIRES_PATH_READ,
        path_write=op in REQUIRES_PATH_WRITE,
        from_read=op in REQUIRES_FROM_READ,
        from_write=op in REQUIRES_FROM_WRITE,
    )


RULES: Mapping[OperationType, OperationRule] = MappingProxyType(
    {op: _rule(op) for op in OperationType}
)

UNSUPPORTED_RULE = OperationRule()
"""Rule for anything that is not exactly one of the six kinds."""


def rule_for(op: OperationType) -> OperationRule:
    """Get the requirement flags for an operation kind.

    Args:
        op: Operation kind.

    Returns:
        Matching rule, or an all-false rule for empty or combined flags.
    """
    return RULES.get(op, UNSUPPORTED_RULE)
