"""Exception types shared by the ddlsnap core and its adapters."""

from __future__ import annotations


class DdlSnapError(RuntimeError):
    """Base class for all ddlsnap errors."""


class ConfigError(DdlSnapError):
    """Raised when the sync configuration is missing or invalid."""


class CatalogRowError(DdlSnapError):
    """Raised when a catalog row lacks one of the expected fields."""


class ObjectNotFoundError(DdlSnapError):
    """Raised by a catalog adapter when the object no longer exists (ORA-31603)."""


class ExtractionError(DdlSnapError):
    """Raised when DDL extraction fails for a reason other than a missing object."""

    def __init__(self, obj, cause: BaseException):
        super().__init__(f"DDL extraction failed for {obj.label}: {cause}")
        self.obj = obj
        self.cause = cause


class GitError(DdlSnapError):
    """Raised when a git command exits with a non-zero status."""

    def __init__(self, args: list[str], returncode: int, stderr: str):
        command = " ".join(args)
        detail = stderr.strip() or "no output"
        super().__init__(f"`{command}` failed with exit code {returncode}: {detail}")
        self.command = args
        self.returncode = returncode
        self.stderr = stderr
