"""Path resolution and validation against type schemas.

A path is a slash-separated list of segments. The first names a property of
the target type; what may follow depends on that property's shape:

    /name                  simple property
    /address/city          composite: next segment is a property of Address
    /tags/3                collection: next segment is a numeric index
    /contacts/0/email      collection of composites: index, then property

Only the shape of a path is checked, never index bounds.

Usage:
    validate_segments(Profile, ["contacts", "0", "email"], False, True)

    validator = PathValidator(Profile)
    validator.is_valid("/contacts/12/email", requires_read=False, requires_write=True)
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Sequence
from typing import Any

from typedpatch.config import PatchSettings, get_settings
from typedpatch.core.schema import schema_for
from typedpatch.core.types import PropertyShape

logger = logging.getLogger(__name__)

_INDEX_SEGMENT = re.compile(r"/\d+(?=/|$)", re.ASCII)
_INDEX = re.compile(r"\d+", re.ASCII)


def normalize_path(path: str) -> str:
    """Replace every numeric segment with a canonical index.

    Paths that differ only in index values share one memo entry.

    Args:
        path: Raw path such as "/items/12/name".

    Returns:
        Normalized path such as "/items/0/name".
    """
    return _INDEX_SEGMENT.sub("/0", path)


def path_segments(path: str) -> list[str]:
    """Split a path into segments, ignoring leading slashes."""
    return path.lstrip("/").split("/")


def property_name(path: str | None) -> str | None:
    """Get the first segment of a path, or None when there is no path."""
    if path is None:
        return None
    return path_segments(path)[0]


def validate_segments(
    tp: Any,
    segments: Sequence[str],
    requires_read: bool,
    requires_write: bool,
) -> bool:
    """Check that segments resolve through a type's properties.

    Args:
        tp: Type the first segment is resolved against.
        segments: Remaining path segments. Empty means the whole object.
        requires_read: Every named property must have a getter.
        requires_write: Every named property must have a setter.

    Returns:
        True if the segments resolve, False otherwise.
    """
    if not segments:
        return True

    name, rest = segments[0], segments[1:]
    prop = schema_for(tp).get(name)
    if prop is None:
        return False
    if requires_read and not prop.can_read:
        return False
    if requires_write and not prop.can_write:
        return False
    if not rest:
        return True

    if prop.shape is PropertyShape.COLLECTION:
        if not _INDEX.fullmatch(rest[0]):
            return False
        return validate_segments(prop.element_type, rest[1:], requires_read, requires_write)
    if prop.shape is PropertyShape.COMPOSITE:
        return validate_segments(prop.declared_type, rest, requires_read, requires_write)
    return False


class PathValidator:
    """Memoizing path validator bound to one type.

    Results are keyed by (normalized path, requires_read, requires_write).
    Concurrent first computations of the same key are idempotent; the memo
    stops growing once `max_cached_paths` entries are stored.

    Args:
        tp: Type paths are resolved against.
        settings: Cache settings; defaults to the process settings.
    """

    def __init__(self, tp: Any, settings: PatchSettings | None = None) -> None:
        self._type = tp
        self._settings = settings or get_settings()
        self._results: dict[tuple[str, bool, bool], bool] = {}
        self._lock = threading.Lock()

    def is_valid(self, path: str, requires_read: bool, requires_write: bool) -> bool:
        """Check a full path string.

        Args:
            path: Path as written in the operation.
            requires_read: Every named property must have a getter.
            requires_write: Every named property must have a setter.

        Returns:
            True if the path resolves under the given requirements.
        """
        normalized = normalize_path(path)
        if not self._settings.cache_path_validation:
            return validate_segments(
                self._type, path_segments(normalized), requires_read, requires_write
            )

        key = (normalized, requires_read, requires_write)
        cached = self._results.get(key)
        if cached is not None:
            return cached

        result = validate_segments(self._type, path_segments(normalized), requires_read, requires_write)
        with self._lock:
            if len(self._results) < self._settings.max_cached_paths:
                self._results.setdefault(key, result)
            else:
                logger.debug("Path memo for %s is full; not caching %r", self._type, normalized)
        return result

    def __len__(self) -> int:
        return len(self._results)

    def clear(self) -> None:
        """Drop every memoized result."""
        with self._lock:
            self._results.clear()
