"""Operation models: kinds, operations, and execution results.

Usage:
    op = PatchOperation(op=OperationType.REPLACE, path="/name", value="Ada")
    op = PatchOperation.model_validate({"op": "move", "from": "/a", "path": "/b"})

    result = PatchExecutionResult.failed(op, "Replace operation is not supported.")
    result.success  # False
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Flag, auto
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class OperationType(Flag):
    """Operation kinds based on RFC 6902.

    A Flag only so that operation groups can be tested with a single
    membership check; an operation always carries exactly one kind.
    """

    ADD = auto()  # Add a value at the target location
    COPY = auto()  # Copy the value at `from` to the target location
    MOVE = auto()  # Move the value at `from` to the target location
    REMOVE = auto()  # Remove the value at the target location
    REPLACE = auto()  # Replace the value at the target location
    TEST = auto()  # Test the value at the target location for equality

    @classmethod
    def parse(cls, name: str) -> OperationType:
        """Parse a kind name, ignoring case.

        Args:
            name: Kind name such as "replace" or "Replace".

        Returns:
            Matching operation type.

        Raises:
            ValueError: If name is not one of the six kinds.
        """
        member = cls.__members__.get(name.strip().upper())
        if member is None:
            raise ValueError(f"Invalid operation type: {name}")
        return member

    @property
    def wire_name(self) -> str:
        """Lower-case name used in JSON Patch documents."""
        return (self.name or str(self.value)).lower()

    @property
    def display_name(self) -> str:
        """Capitalized name used in error messages."""
        return (self.name or str(self.value)).capitalize()


class PatchOperation(BaseModel):
    """A single patch operation.

    `path` may be empty at construction; whether it is usable is decided by
    validation. `from_` is exposed as "from" on the wire.
    """

    model_config = ConfigDict(
        validate_by_name=True,
        validate_by_alias=True,
        serialize_by_alias=True,
    )

    op: OperationType
    path: str = ""
    from_: str | None = Field(default=None, alias="from")
    value: Any = None

    @field_validator("op", mode="before")
    @classmethod
    def _parse_op(cls, value: Any) -> Any:
        if isinstance(value, str):
            return OperationType.parse(value)
        return value

    @field_serializer("op")
    def _serialize_op(self, op: OperationType) -> str:
        return op.wire_name


@dataclass(frozen=True, slots=True)
class PatchExecutionResult:
    """Outcome of applying one operation to the working copy.

    `success` refers to the operation's own execution, not to whether the
    batch was committed.
    """

    operation: PatchOperation
    error_message: str | None = None

    @classmethod
    def succeeded(cls, operation: PatchOperation) -> PatchExecutionResult:
        """Create a successful result for an operation."""
        return cls(operation=operation)

    @classmethod
    def failed(cls, operation: PatchOperation, error_message: str) -> PatchExecutionResult:
        """Create a failed result carrying an error message."""
        return cls(operation=operation, error_message=error_message)

    @property
    def success(self) -> bool:
        """True if the operation executed without error."""
        return self.error_message is None

    @property
    def op(self) -> OperationType:
        return self.operation.op

    @property
    def path(self) -> str:
        return self.operation.path

    @property
    def from_(self) -> str | None:
        return self.operation.from_

    @property
    def value(self) -> Any:
        return self.operation.value

    def to_operation(self) -> PatchOperation:
        """Return a copy of the plain operation without result data."""
        return self.operation.model_copy()
