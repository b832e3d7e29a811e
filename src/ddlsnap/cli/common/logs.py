"""Logging setup for the CLI."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

from ddlsnap.cli.common.output import console

_LOG_FORMAT = "%(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Route `ddlsnap.*` loggers to the shared rich console."""
    handler = RichHandler(
        console=console,
        show_path=False,
        rich_tracebacks=verbose,
        markup=False,
    )
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    logger = logging.getLogger("ddlsnap")
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
