"""Command for rendering the snapshot changelog."""

from __future__ import annotations

from ddlsnap.cli.common.context import build_context
from ddlsnap.cli.common.exits import exit_from_exc, ok_exit
from ddlsnap.cli.common.logs import configure_logging
from ddlsnap.cli.common.options import LimitOpt, RootOpt, VerboseOpt
from ddlsnap.cli.common.output import out
from ddlsnap.core.changelog import build_changelog, render_changelog
from ddlsnap.core.errors import DdlSnapError


def changelog(
    root: str | None = RootOpt,
    limit: int = LimitOpt,
    verbose: bool = VerboseOpt,
):
    """
    Show recent snapshot commits with tags and the files changed since the last tag.
    """
    configure_logging(verbose)
    appctx = build_context(root=root, lookback=max(limit, 1))

    try:
        with out.status("Reading history..."):
            result = build_changelog(appctx.vcs, appctx.config.lookback)
    except DdlSnapError as exc:
        exit_from_exc(exc)

    if not result.entries:
        ok_exit("No commits yet")

    for line in render_changelog(result):
        out.line(line)

    if result.base is None:
        out.warn(f"No tagged commit in the last {appctx.config.lookback} commit(s)")
