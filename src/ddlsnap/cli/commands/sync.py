"""Commands for synchronizing catalog DDL into the snapshot repository."""

from __future__ import annotations

import signal
import threading
from contextlib import contextmanager
from datetime import datetime

import oracledb
import typer

from ddlsnap.cli.common.context import SnapshotAppContext, build_context
from ddlsnap.cli.common.exits import die, exit_from_exc, ok_exit
from ddlsnap.cli.common.logs import configure_logging
from ddlsnap.cli.common.options import (
    ConfirmOpt,
    DryRunOpt,
    DsnOpt,
    LookbackOpt,
    ParallelOpt,
    PasswordOpt,
    PushOpt,
    RootOpt,
    SchemaOpt,
    SinceOpt,
    TypeOpt,
    UserOpt,
    VerboseOpt,
)
from ddlsnap.cli.common.output import out
from ddlsnap.cli.common.progress import sync_progress
from ddlsnap.core.cutoff import parse_watermark, resolve_cutoff
from ddlsnap.core.errors import DdlSnapError
from ddlsnap.core.sync import run_sync

# Conventional status for a run stopped by SIGINT.
EXIT_ABORTED = 130


@contextmanager
def _abort_on_interrupt(abort: threading.Event):
    """Turn the first Ctrl+C into an abort request instead of a KeyboardInterrupt."""

    def _handler(signum, frame):
        if abort.is_set():
            raise KeyboardInterrupt
        out.warn("Abort requested; finishing current work and committing what was written")
        abort.set()

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def _resolve_cutoff_or_exit(appctx: SnapshotAppContext, since: str | None) -> datetime:
    """Return `--since` if given, otherwise the watermark recovered from git.

    The root must be a git repository in both cases.
    """
    cutoff = None
    if since:
        cutoff = parse_watermark(since)
        if cutoff is None:
            die(f"Invalid --since value '{since}' (expected YYYY-MM-DDTHH:MM:SS)", code=2)
    try:
        appctx.vcs.has_commits()
        if cutoff is not None:
            return cutoff
        return resolve_cutoff(appctx.vcs, appctx.config.lookback)
    except DdlSnapError as exc:
        exit_from_exc(exc)


def sync(
    root: str | None = RootOpt,
    dsn: str | None = DsnOpt,
    user: str | None = UserOpt,
    password: str | None = PasswordOpt,
    schema: list[str] = SchemaOpt,
    object_type: list[str] = TypeOpt,
    parallel: int | None = ParallelOpt,
    since: str | None = SinceOpt,
    push: bool = PushOpt,
    confirm: bool = ConfirmOpt,
    dry_run: bool = DryRunOpt,
    lookback: int = LookbackOpt,
    verbose: bool = VerboseOpt,
):
    """
    Extract DDL changed since the last sync and commit it.
    """
    configure_logging(verbose)
    appctx = build_context(
        root=root,
        dsn=dsn,
        user=user,
        password=password,
        schemas=schema,
        object_types=object_type,
        parallel=parallel,
        push=push,
        lookback=lookback,
    )
    config = appctx.config
    try:
        config.require_connection()
    except DdlSnapError as exc:
        die(str(exc), code=2)

    if not config.schemas:
        out.warn("No schemas configured (--schema or DDLSNAP_SCHEMAS); nothing will be extracted")

    cutoff = _resolve_cutoff_or_exit(appctx, since)
    out.kv({"Root": config.root, "Schemas": ", ".join(sorted(config.schemas)), "Cutoff": cutoff})

    try:
        if dry_run or confirm:
            with out.status("Listing changed objects..."):
                preview = run_sync(
                    config, appctx.connect, appctx.vcs, cutoff, notify=out.warn, dry_run=True
                )
            out.objects_table(preview.objects or [], title="Objects to extract")
            if dry_run:
                ok_exit("Dry-run enabled: nothing was written or committed")
            if not out.confirm("Extract these objects and commit?"):
                ok_exit("Cancelled")

        abort = threading.Event()
        with _abort_on_interrupt(abort), sync_progress() as progress:
            report = run_sync(
                config,
                appctx.connect,
                appctx.vcs,
                cutoff,
                notify=out.warn,
                abort=abort,
                on_progress=progress.on_progress,
                on_listed=progress.on_listed,
            )
    except (DdlSnapError, oracledb.Error, OSError) as exc:
        exit_from_exc(exc)

    out.sync_report_table(report)
    pushed = " and pushed" if config.push else ""
    out.success(f"Committed{pushed} snapshot '{report.watermark}'")
    if report.aborted:
        raise typer.Exit(EXIT_ABORTED)


def show_cutoff(
    root: str | None = RootOpt,
    lookback: int = LookbackOpt,
    verbose: bool = VerboseOpt,
):
    """
    Show the cutoff the next sync would use.
    """
    configure_logging(verbose)
    appctx = build_context(root=root, lookback=lookback)
    value = _resolve_cutoff_or_exit(appctx, None)
    out.line(value.isoformat())
