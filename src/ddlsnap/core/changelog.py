"""Changelog reconstruction from the snapshot repository history.

The builder walks the newest commits and pairs each one with the tags that
point at it. Two anchors are tracked while walking: the newest commit (head)
and the newest tagged commit other than head (base). Once both are known the
paths that differ between their trees are computed. That is the set of
snapshot files changed since the last tagged release.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from ddlsnap.core.config import DEFAULT_LOOKBACK
from ddlsnap.core.models import CommitRecord
from ddlsnap.core.vcs import VersionControl

_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


@dataclass(frozen=True)
class ChangelogEntry:
    """One commit of the changelog with the tags pointing at it."""

    commit: CommitRecord
    tags: tuple[str, ...] = ()

    @property
    def merge_parents(self) -> tuple[str, ...]:
        """Abbreviated parent ids, only for merge commits."""
        if not self.commit.is_merge:
            return ()
        return tuple(p[:7] for p in self.commit.parent_ids)


@dataclass
class Changelog:
    """Entries newest first plus the paths changed since the last tagged commit."""

    entries: list[ChangelogEntry] = field(default_factory=list)
    head: CommitRecord | None = None
    base: CommitRecord | None = None
    changed_paths: list[str] | None = None


def format_author_date(moment: datetime) -> str:
    """
    Format a timestamp as `Wed 01 May 10:00:00 2024 +03:00`.

    Day and month names are fixed English abbreviations regardless of locale.
    Naive datetimes are rendered without an offset.
    """
    text = (
        f"{_DAYS[moment.weekday()]} {moment.day:02d} {_MONTHS[moment.month - 1]} "
        f"{moment:%H:%M:%S} {moment.year:04d}"
    )
    offset = moment.utcoffset()
    if offset is None:
        return text
    minutes = int(offset.total_seconds()) // 60
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{text} {sign}{hours:02d}:{minutes:02d}"


def build_changelog(vcs: VersionControl, limit: int = DEFAULT_LOOKBACK) -> Changelog:
    """
    Walk the newest `limit` commits and correlate them with tags.

    Args:
        vcs: Repository to read.
        limit: Size of the commit window. History is a DAG and the window is
            capped, so the walk always terminates.

    Returns:
        A Changelog whose `changed_paths` is set only when both a head and a
        distinct tagged base commit were found inside the window.
    """
    tags_by_commit: dict[str, list[str]] = {}
    for tag in vcs.list_tags():
        tags_by_commit.setdefault(tag.target_id, []).append(tag.name)

    changelog = Changelog()
    for commit in vcs.list_commits(limit):
        if changelog.head is None:
            changelog.head = commit

        tags = tuple(sorted(tags_by_commit.get(commit.id, ())))
        if tags and changelog.base is None and commit.id != changelog.head.id:
            changelog.base = commit

        changelog.entries.append(ChangelogEntry(commit=commit, tags=tags))

    if changelog.head is not None and changelog.base is not None:
        changelog.changed_paths = vcs.changed_paths(
            changelog.base.id, changelog.head.id
        )
    return changelog


def render_entry(entry: ChangelogEntry) -> list[str]:
    """Render one entry in `git log` style."""
    commit = entry.commit
    lines = [f"commit {commit.id}"]
    if entry.merge_parents:
        lines.append(f"Merge: {' '.join(entry.merge_parents)}")
    lines.append(f"Author: {commit.author_name} <{commit.author_email}>")
    lines.append(f"Date:   {format_author_date(commit.author_time)}")
    lines.extend(entry.tags)
    lines.append("")
    lines.extend(commit.message.rstrip("\n").splitlines() or [""])
    lines.append("")
    return lines


def render_changelog(changelog: Changelog) -> list[str]:
    """
    Render the whole changelog as text lines.

    The changed paths are printed once, directly after the entry of the base
    (newest tagged) commit.
    """
    lines: list[str] = []
    for entry in changelog.entries:
        lines.extend(render_entry(entry))
        if (
            changelog.base is not None
            and changelog.changed_paths is not None
            and entry.commit.id == changelog.base.id
        ):
            lines.extend(changelog.changed_paths)
            lines.append("")
    return lines
