"""Recover the sync watermark from the commit log.

A sync run commits with a message that starts with its timestamp in
WATERMARK_FORMAT. The newest such message is the cutoff for the next run, so
no separate state file is needed.
"""

from __future__ import annotations

from datetime import datetime

from ddlsnap.core.config import DEFAULT_LOOKBACK
from ddlsnap.core.vcs import VersionControl

WATERMARK_FORMAT = "%Y-%m-%dT%H:%M:%S"
WATERMARK_LENGTH = len("2000-01-01T00:00:00")
DEFAULT_CUTOFF = datetime(2000, 1, 1)


def format_watermark(moment: datetime) -> str:
    """Render `moment` as a commit-message watermark."""
    return moment.strftime(WATERMARK_FORMAT)


def parse_watermark(message: str | None) -> datetime | None:
    """Parse the watermark prefix of a commit message, or return None."""
    if not message or len(message) < WATERMARK_LENGTH:
        return None
    try:
        return datetime.strptime(message[:WATERMARK_LENGTH], WATERMARK_FORMAT)
    except ValueError:
        return None


def resolve_cutoff(vcs: VersionControl, lookback: int = DEFAULT_LOOKBACK) -> datetime:
    """
    Return the timestamp of the last sync found in the newest commits.

    Args:
        vcs: Repository to inspect.
        lookback: Number of commits scanned, newest first.

    Returns:
        The first parseable watermark, or DEFAULT_CUTOFF so the next sync
        extracts everything.
    """
    for commit in vcs.list_commits(lookback):
        parsed = parse_watermark(commit.message)
        if parsed is not None:
            return parsed
    return DEFAULT_CUTOFF
