"""CLI application for schema DDL snapshots."""

import typer

from ddlsnap.cli.commands.changelog import changelog
from ddlsnap.cli.commands.sync import show_cutoff, sync

app = typer.Typer(
    help="ddlsnap - mirror Oracle schema DDL into a git repository",
    no_args_is_help=True,
)

app.command("sync", help="Extract changed DDL and commit it.")(sync)
app.command("cutoff", help="Show the cutoff of the next sync.")(show_cutoff)
app.command("changelog", help="Show recent snapshot history.")(changelog)


if __name__ == "__main__":
    app()
