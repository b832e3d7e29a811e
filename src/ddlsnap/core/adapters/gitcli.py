from __future__ import annotations

import logging
import subprocess
from datetime import datetime
from pathlib import Path

from ddlsnap.core.errors import GitError
from ddlsnap.core.models import CommitRecord, TagRecord

log = logging.getLogger(__name__)

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = "%H%x1f%P%x1f%an%x1f%ae%x1f%aI%x1f%B%x1e"
_TAG_FORMAT = "%(refname:lstrip=2)%1f%(objectname)%1f%(*objectname)"


class GitCliAdapter:
    """Adapter around the `git` command line for one working tree."""

    def __init__(self, root: str | Path, *, allow_empty: bool = True) -> None:
        """
        Args:
            root: Working tree of the repository.
            allow_empty: Commit even when nothing is staged, so every sync
                run leaves its watermark in the log.
        """
        self.root = Path(root)
        self.allow_empty = allow_empty

    def _run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
        cmd = ["git", *args]
        log.debug("Running %s in %s", " ".join(cmd), self.root)
        proc = subprocess.run(
            cmd,
            cwd=self.root,
            check=False,
            capture_output=True,
            text=True,
            encoding="utf-8",
        )
        if check and proc.returncode != 0:
            raise GitError(cmd, proc.returncode, proc.stderr or proc.stdout)
        return proc

    def has_commits(self) -> bool:
        """Return True if HEAD points at a commit.

        Only an unborn HEAD in an existing repository yields False; a root
        outside any repository raises GitError.
        """
        self._run("rev-parse", "--git-dir")
        return self._run("rev-parse", "--verify", "--quiet", "HEAD", check=False).returncode == 0

    def stage_all(self) -> None:
        self._run("add", "--all")

    def commit(self, message: str) -> None:
        args = ["commit", "--quiet", "-m", message]
        if self.allow_empty:
            args.insert(1, "--allow-empty")
        self._run(*args)

    def push(self) -> None:
        self._run("push", "--quiet")

    def list_commits(self, limit: int) -> list[CommitRecord]:
        """Return up to `limit` commits reachable from HEAD, newest first."""
        if not self.has_commits():
            return []
        stdout = self._run("log", f"--max-count={limit}", f"--format={_LOG_FORMAT}").stdout
        commits: list[CommitRecord] = []
        for record in stdout.split(_RECORD_SEP):
            record = record.lstrip("\n")
            if not record:
                continue
            sha, parents, name, email, when, message = record.split(_FIELD_SEP, 5)
            commits.append(
                CommitRecord(
                    id=sha,
                    parent_ids=tuple(parents.split()),
                    author_name=name,
                    author_email=email,
                    author_time=datetime.fromisoformat(when),
                    message=message.rstrip("\n"),
                )
            )
        return commits

    def list_tags(self) -> list[TagRecord]:
        """Return all tags; annotated tags are peeled to their commit."""
        stdout = self._run("for-each-ref", f"--format={_TAG_FORMAT}", "refs/tags").stdout
        tags: list[TagRecord] = []
        for line in stdout.splitlines():
            if not line:
                continue
            name, target, peeled = line.split(_FIELD_SEP, 2)
            tags.append(TagRecord(name=name, target_id=peeled or target))
        return tags

    def changed_paths(self, old_id: str, new_id: str) -> list[str]:
        """Return paths that differ between the trees of two commits."""
        stdout = self._run(
            "diff", "--name-only", "--no-renames", "-z", old_id, new_id
        ).stdout
        return [path for path in stdout.split("\0") if path]
