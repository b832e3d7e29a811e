"""Exit handling utilities for the CLI."""

from typing import NoReturn

import typer

from ddlsnap.cli.common.output import out


def ok_exit(msg: str | None = None) -> NoReturn:
    """Exit successfully with an optional informational message."""
    if msg:
        out.info(msg)
    raise typer.Exit(0)


def die(msg: str, code: int = 1) -> NoReturn:
    """Exit with an error message and optional exit code."""
    out.error(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str | None = None, code: int = 1) -> NoReturn:
    """
    Print an error message for `exc` and exit with a given code.

    The exception is chained so `--verbose` tracebacks keep the cause.
    """
    out.error(message or str(exc))
    raise typer.Exit(code) from exc
