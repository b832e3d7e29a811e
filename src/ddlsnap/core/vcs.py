"""Version-control interface and the commit step of a sync run."""

from __future__ import annotations

import logging
from typing import Protocol

from ddlsnap.core.models import CommitRecord, TagRecord

log = logging.getLogger(__name__)


class VersionControl(Protocol):
    """Interface for the repository operations used by the core domain."""

    def stage_all(self) -> None:
        """Stage every working-tree change (added, modified, deleted)."""
        ...

    def commit(self, message: str) -> None:
        """Create a commit with `message`."""
        ...

    def push(self) -> None:
        """Push the current branch to its configured remote."""
        ...

    def list_commits(self, limit: int) -> list[CommitRecord]:
        """Return up to `limit` commits reachable from HEAD, newest first."""
        ...

    def list_tags(self) -> list[TagRecord]:
        """Return all tags with the commit each one points at."""
        ...

    def changed_paths(self, old_id: str, new_id: str) -> list[str]:
        """Return the paths that differ between the trees of two commits."""
        ...


def commit_snapshot(vcs: VersionControl, message: str, *, push: bool = True) -> None:
    """
    Stage all changes, commit them with `message` and optionally push.

    Errors propagate unchanged. If the push fails the local commit is kept;
    reconciling with the remote is left to the operator.
    """
    vcs.stage_all()
    vcs.commit(message)
    log.info("Committed snapshot '%s'", message)
    if push:
        vcs.push()
        log.info("Pushed snapshot '%s'", message)
