"""Snapshot file layout and writing.

Each catalog object maps to exactly one file:

    <root>/<owner>/<type>/<name>.sql

Every segment is sanitized so the same object yields the same path on every
platform. Distinct names that sanitize to the same string share a file (last
write wins); that collision is accepted rather than treated as an error.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from ddlsnap.core.models import CatalogObject

log = logging.getLogger(__name__)

PLACEHOLDER = "_"

# Union of what Windows and POSIX reject in a directory path, plus separators.
_INVALID_DIR_CHARS = re.compile(r'[\x00-\x1f"<>|/\\]')
# Filenames additionally exclude the characters Windows reserves for drives and wildcards.
_INVALID_FILE_CHARS = re.compile(r'[\x00-\x1f"<>|/\\:*?]')


def _sanitize(segment: str, pattern: re.Pattern[str]) -> str:
    safe = pattern.sub(PLACEHOLDER, segment)
    if not safe:
        return PLACEHOLDER
    if safe in {".", ".."}:
        return PLACEHOLDER * len(safe)
    return safe


def sanitize_dir(segment: str) -> str:
    """Return a directory name safe on every platform."""
    return _sanitize(segment, _INVALID_DIR_CHARS)


def sanitize_file(segment: str) -> str:
    """Return a file name (without extension) safe on every platform."""
    return _sanitize(segment, _INVALID_FILE_CHARS)


def snapshot_path(root: Path, obj: CatalogObject) -> Path:
    """Return the snapshot file path for `obj` under `root`."""
    return (
        Path(root)
        / sanitize_dir(obj.owner)
        / sanitize_dir(obj.type)
        / f"{sanitize_file(obj.name)}.sql"
    )


def save(root: Path, obj: CatalogObject, ddl: str | None) -> Path | None:
    """
    Write `ddl` to the snapshot file of `obj`, replacing previous content.

    Returns:
        The written path, or None when `ddl` is None (nothing is written).
    """
    if ddl is None:
        return None

    path = snapshot_path(root, obj)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as handle:
        handle.write(ddl)
    log.debug("Wrote %s", path)
    return path
