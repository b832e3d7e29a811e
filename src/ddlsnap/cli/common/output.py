"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import questionary
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from ddlsnap.cli.common.tui_style import QUESTIONARY_STYLE_CONFIRM

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def _q_try(self, fn, *args, **kwargs):
        """Call questionary prompts and drop unsupported kwargs on older versions."""
        try:
            return fn(*args, **kwargs)
        except TypeError:
            for k in ("pointer", "auto_enter"):
                kwargs.pop(k, None)
            return fn(*args, **kwargs)

    def _q(self, message: str) -> str:
        """Prefix Questionary prompts to be DDLSNAP consistent."""
        return f"[DDLSNAP] {message}"

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {escape(msg)}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {escape(msg)}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {escape(msg)}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {escape(msg)}")

    def line(self, text: str) -> None:
        """Print a line verbatim (no markup, no highlighting)."""
        console.print(text, markup=False, highlight=False, soft_wrap=True)

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {escape(str(v))}")

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask the user for confirmation using a standardized Questionary prompt.

        Args:
            message: Confirmation question shown to the user.
            default: Default answer if the user just presses enter.

        Returns:
            True if the user confirms, False otherwise.
        """
        console.print("[meta]Use y/n then Enter[/]")

        prompt = self._q_try(
            questionary.confirm,
            self._q(message),
            default=default,
            style=QUESTIONARY_STYLE_CONFIRM,
            qmark="✦",
            auto_enter=False,
            pointer="❯",
        )
        return bool(prompt.ask())

    def objects_table(self, objects: Iterable[Any], title: str = "Objects") -> None:
        """
        Expects objects with .owner .type .name (like ddlsnap.core.models.CatalogObject)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Owner", style="ok", no_wrap=True)
        t.add_column("Type", style="meta", no_wrap=True)
        t.add_column("Name")

        for o in objects:
            t.add_row(escape(o.owner), escape(o.type), escape(o.name))

        console.print(t)

    def sync_report_table(self, report: Any, title: str = "Sync summary") -> None:
        """Render the counters of a SyncReport."""
        t = Table(title=title, show_lines=False)
        t.add_column("Metric", style="meta")
        t.add_column("Value", style="ok", justify="right")

        t.add_row("Cutoff", str(report.cutoff))
        t.add_row("Watermark", report.watermark)
        t.add_row("Changed in catalog", str(report.listed))
        t.add_row("Ignored by type", str(report.ignored))
        t.add_row("Written", str(report.written))
        t.add_row("Not found", str(report.skipped))
        t.add_row("No definition", str(report.undefined))
        if report.aborted:
            t.add_row("Aborted", "[warn]yes[/]")

        console.print(t)


out = Out()
