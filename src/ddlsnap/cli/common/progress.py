"""Progress formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from ddlsnap.cli.common.output import console
from ddlsnap.core.models import CatalogObject

_MAX_LABEL_WIDTH = 56


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


@dataclass
class SyncProgress:
    """Callbacks feeding a rich progress bar from a sync run."""

    progress: Progress
    task_id: TaskID

    def on_listed(self, objects: list[CatalogObject]) -> None:
        """Size the bar once the catalog listing is known."""
        self.progress.update(self.task_id, total=max(len(objects), 1), current="")

    def on_progress(self, obj: CatalogObject) -> None:
        """Advance the bar after one object has been handled."""
        self.progress.update(
            self.task_id,
            advance=1,
            current=escape(_truncate(obj.label, _MAX_LABEL_WIDTH)),
        )


@contextmanager
def sync_progress() -> Iterator[SyncProgress]:
    """
    Show an overall extraction bar (x/y objects) with the last handled object.

    The bar is transient; the summary table printed afterwards replaces it.
    """
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold]Extracting[/]"),
        BarColumn(),
        TaskProgressColumn(),
        TextColumn("[meta]{task.fields[current]}[/]"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
    task_id = progress.add_task("sync", total=None, current="listing catalog...")
    with progress:
        yield SyncProgress(progress=progress, task_id=task_id)
