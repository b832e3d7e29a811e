"""Core domain models for schema snapshots.

These models represent catalog objects, extraction outcomes and git history
records in a simple, immutable form. They are intentionally free of driver
types (oracledb, subprocess output) and UI/CLI concerns.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

OBJECT_TYPES: frozenset[str] = frozenset(
    {
        "TABLE",
        "TRIGGER",
        "INDEX",
        "SYNONYM",
        "SEQUENCE",
        "VIEW",
        "FUNCTION",
        "PROCEDURE",
        "PACKAGE",
        "PACKAGE_BODY",
        "TYPE",
        "TYPE_BODY",
    }
)


def normalize_object_type(object_type: str) -> str:
    """Return the catalog type with embedded spaces replaced by underscores."""
    return object_type.strip().replace(" ", "_")


@dataclass(frozen=True)
class CatalogObject:
    """
    A named schema entity tracked by the database catalog.

    Attributes:
        owner: Schema that owns the object.
        name: Object name as stored in the catalog.
        type: Normalized object type (e.g. `PACKAGE_BODY`).
    """

    owner: str
    name: str
    type: str

    @property
    def label(self) -> str:
        """Human-readable `<TYPE> <OWNER>.<NAME>` label."""
        return f"{self.type} {self.owner}.{self.name}"


@dataclass(frozen=True)
class Extracted:
    """DDL was obtained for the object. `ddl` is None if the facility returned nothing."""

    obj: CatalogObject
    ddl: str | None


@dataclass(frozen=True)
class Skipped:
    """The object disappeared between listing and extraction."""

    obj: CatalogObject
    reason: str


@dataclass(frozen=True)
class Failed:
    """Extraction failed for a reason that should abort the run."""

    obj: CatalogObject
    error: BaseException


ExtractResult = Extracted | Skipped | Failed


@dataclass(frozen=True)
class CommitRecord:
    """A single commit as read from the version-control log."""

    id: str
    parent_ids: tuple[str, ...]
    author_name: str
    author_email: str
    author_time: datetime
    message: str

    @property
    def is_merge(self) -> bool:
        return len(self.parent_ids) > 1


@dataclass(frozen=True)
class TagRecord:
    """A tag and the commit it points at (annotated tags are peeled)."""

    name: str
    target_id: str


@dataclass
class SyncReport:
    """Summary of one synchronization run."""

    cutoff: datetime
    watermark: str
    listed: int = 0
    ignored: int = 0
    written: int = 0
    skipped: int = 0
    undefined: int = 0
    aborted: bool = False
    committed: bool = False
    dry_run: bool = False
    objects: list[CatalogObject] | None = None
