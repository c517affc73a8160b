"""JSON Patch wire format for operation lists.

Kind names are accepted in any case and written in lower case; `value` and
`from` are omitted from output when they are None.

Usage:
    ops = parse_operations('[{"op": "Replace", "path": "/name", "value": "Ada"}]')
    text = dump_operations(ops)  # '[{"op":"replace","path":"/name","value":"Ada"}]'
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import TypeAdapter

from typedpatch.core.operation.models import PatchOperation

_OPERATIONS = TypeAdapter(list[PatchOperation])


def parse_operations(data: str | bytes | Iterable[dict[str, Any]]) -> list[PatchOperation]:
    """Parse a JSON Patch document into operations.

    Args:
        data: JSON text, or already-decoded list of operation objects.

    Returns:
        Operations in document order.

    Raises:
        pydantic.ValidationError: If the document is malformed or names an
            unknown operation kind.
    """
    if isinstance(data, (str, bytes)):
        return _OPERATIONS.validate_json(data)
    return _OPERATIONS.validate_python(list(data))


def dump_operations(operations: Iterable[PatchOperation]) -> str:
    """Serialize operations to a JSON Patch document.

    Args:
        operations: Operations to serialize.

    Returns:
        Compact JSON text.
    """
    return _OPERATIONS.dump_json(list(operations), exclude_none=True, by_alias=True).decode()


def dump_operation(operation: PatchOperation) -> dict[str, Any]:
    """Serialize one operation to a JSON-compatible dict."""
    return operation.model_dump(mode="json", exclude_none=True, by_alias=True)
