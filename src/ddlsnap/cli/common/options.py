"""Common CLI options for the CLI."""

import typer

from ddlsnap.core.config import (
    DEFAULT_LOOKBACK,
    ENV_DSN,
    ENV_PARALLEL,
    ENV_PASSWORD,
    ENV_ROOT,
    ENV_USER,
)

RootOpt = typer.Option(
    None,
    "--root",
    "-r",
    envvar=ENV_ROOT,
    help="Working tree of the snapshot git repository",
)

DsnOpt = typer.Option(
    None,
    "--dsn",
    envvar=ENV_DSN,
    help="Oracle connect string (host:port/service or TNS alias)",
)

UserOpt = typer.Option(
    None,
    "--user",
    "-u",
    envvar=ENV_USER,
    help="Database user",
)

PasswordOpt = typer.Option(
    None,
    "--password",
    envvar=ENV_PASSWORD,
    help="Database password",
    show_default=False,
)

SchemaOpt = typer.Option(
    [],
    "--schema",
    "-s",
    help="Schema (owner) to synchronize. This is reusable; falls back to DDLSNAP_SCHEMAS.",
    show_default=False,
)

TypeOpt = typer.Option(
    [],
    "--type",
    "-t",
    help="Restrict to an object type (e.g. PACKAGE_BODY). This is reusable.",
    show_default=False,
)

ParallelOpt = typer.Option(
    None,
    "--parallel",
    "-n",
    envvar=ENV_PARALLEL,
    help="Number of extraction workers, each with its own connection (default 1)",
)

SinceOpt = typer.Option(
    None,
    "--since",
    help="Use this cutoff (YYYY-MM-DDTHH:MM:SS) instead of the one found in the git log",
)

PushOpt = typer.Option(
    True,
    "--push/--no-push",
    help="Push to the remote after committing",
)

ConfirmOpt = typer.Option(
    False,
    "--confirm/--no-confirm",
    help="Show the objects to extract and ask before extracting them",
)

DryRunOpt = typer.Option(
    False,
    "--dry-run",
    help="Show which objects would be extracted, but don't write or commit anything",
)

LookbackOpt = typer.Option(
    DEFAULT_LOOKBACK,
    "--lookback",
    help="Number of recent commits scanned for the last sync timestamp",
)

LimitOpt = typer.Option(
    DEFAULT_LOOKBACK,
    "--limit",
    "-l",
    help="Number of recent commits to show",
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Enable debug logging",
)
