"""Synchronization run: catalog -> DDL -> snapshot files -> commit.

A run lists the objects changed after the cutoff, extracts the DDL of every
allow-listed object, overwrites its snapshot file and finally commits the
working tree with the run's watermark as the message.

Extraction is sequential over a single connection by default. With
`parallel > 1` a thread pool is used and every worker thread opens its own
connection; a catalog connection is never shared between threads. Files are
always written from the calling thread.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from contextlib import ExitStack
from datetime import datetime
from typing import Callable

from ddlsnap.core.catalog import CatalogAdapter, CatalogConnector, list_changed_objects
from ddlsnap.core.config import SyncConfig
from ddlsnap.core.cutoff import format_watermark
from ddlsnap.core.errors import ExtractionError
from ddlsnap.core.extractor import extract_ddl
from ddlsnap.core.models import (
    CatalogObject,
    Extracted,
    ExtractResult,
    Failed,
    Skipped,
    SyncReport,
)
from ddlsnap.core.snapshot import save
from ddlsnap.core.vcs import VersionControl, commit_snapshot

log = logging.getLogger(__name__)

Notify = Callable[[str], None]
Progress = Callable[[CatalogObject], None]


def not_found_notice(obj: CatalogObject) -> str:
    """Notice shown when an object vanished before its DDL could be read."""
    return f"{obj.label} not found"


def undefined_notice(obj: CatalogObject) -> str:
    """Notice shown when the definition facility returned nothing."""
    return f"{obj.label} returned no definition"


def select_objects(
    objects: list[CatalogObject], object_types: frozenset[str]
) -> list[CatalogObject]:
    """Keep objects whose type is allow-listed, preserving order."""
    return [obj for obj in objects if obj.type in object_types]


def _extract_sequential(
    adapter: CatalogAdapter,
    objects: list[CatalogObject],
    handle: Callable[[ExtractResult], None],
    abort: threading.Event,
) -> bool:
    """Extract on the given connection. Returns True if aborted early."""
    for obj in objects:
        if abort.is_set():
            return True
        handle(extract_ddl(adapter, obj))
    return False


def _extract_parallel(
    connect: CatalogConnector,
    objects: list[CatalogObject],
    max_parallel: int,
    handle: Callable[[ExtractResult], None],
    abort: threading.Event,
) -> bool:
    """
    Extract on a thread pool with one connection per worker thread.

    Workers check `abort` before starting an extraction; results are handed
    to `handle` on the calling thread in completion order. Returns True if
    any object was left unprocessed because of an abort.
    """
    local = threading.local()
    lock = threading.Lock()
    aborted = False

    with ExitStack() as connections:

        def work(obj: CatalogObject) -> ExtractResult | None:
            if abort.is_set():
                return None
            adapter = getattr(local, "adapter", None)
            if adapter is None:
                with lock:
                    adapter = connections.enter_context(connect())
                local.adapter = adapter
            return extract_ddl(adapter, obj)

        pool = ThreadPoolExecutor(max_workers=max_parallel)
        try:
            pending: set[Future] = {pool.submit(work, obj) for obj in objects}
            while pending:
                done, pending = wait(pending, timeout=0.5, return_when=FIRST_COMPLETED)
                for future in done:
                    result = future.result()
                    if result is None:
                        aborted = True
                        continue
                    handle(result)
        finally:
            pool.shutdown(wait=True, cancel_futures=True)

    return aborted


def run_sync(
    config: SyncConfig,
    connect: CatalogConnector,
    vcs: VersionControl,
    cutoff: datetime,
    *,
    notify: Notify | None = None,
    abort: threading.Event | None = None,
    on_progress: Progress | None = None,
    on_listed: Callable[[list[CatalogObject]], None] | None = None,
    dry_run: bool = False,
    now: datetime | None = None,
) -> SyncReport:
    """
    Synchronize changed catalog objects into the snapshot tree and commit.

    Args:
        config: Run settings (root, schemas, object types, parallelism, push).
        connect: Factory returning a context manager that yields a catalog
            adapter with an open connection.
        vcs: Repository the snapshot tree belongs to.
        cutoff: Objects whose last DDL time is strictly after this are synced.
        notify: Receives human-readable notices (e.g. objects not found).
        abort: When set, no new extractions are started; the files already
            written are still committed.
        on_progress: Called after each object has been handled.
        on_listed: Called once with the allow-listed objects before extraction.
        dry_run: Only list the objects; no extraction, no commit.
        now: Start time of the run (defaults to the current local time).

    Returns:
        A SyncReport describing the run.

    Raises:
        ExtractionError: If extraction of an object fails for a reason other
            than the object no longer existing. Nothing is committed.
    """
    notify = notify or log.info
    abort = abort or threading.Event()
    started_at = (now or datetime.now()).replace(microsecond=0)
    report = SyncReport(cutoff=cutoff, watermark=format_watermark(started_at))

    def handle(result: ExtractResult) -> None:
        obj = result.obj
        if isinstance(result, Skipped):
            report.skipped += 1
            notify(not_found_notice(obj))
        elif isinstance(result, Failed):
            raise ExtractionError(obj, result.error) from result.error
        elif isinstance(result, Extracted) and result.ddl is None:
            report.undefined += 1
            log.warning("%s: definition facility returned no text", obj.label)
            notify(undefined_notice(obj))
        else:
            save(config.root, obj, result.ddl)
            report.written += 1
        if on_progress is not None:
            on_progress(obj)

    with connect() as adapter:
        objects = list_changed_objects(adapter, cutoff, config.schemas)
        selected = select_objects(objects, config.object_types)
        report.listed = len(objects)
        report.ignored = len(objects) - len(selected)
        log.debug(
            "%d object(s) to extract, %d ignored by type", len(selected), report.ignored
        )
        if on_listed is not None:
            on_listed(selected)

        if dry_run:
            report.dry_run = True
            report.objects = selected
            return report

        if config.parallel == 1:
            report.aborted = _extract_sequential(adapter, selected, handle, abort)

    if config.parallel > 1:
        report.aborted = _extract_parallel(
            connect, selected, config.parallel, handle, abort
        )

    if report.aborted:
        log.warning("Sync aborted; committing the %d file(s) written so far", report.written)

    commit_snapshot(vcs, report.watermark, push=config.push)
    report.committed = True
    return report
