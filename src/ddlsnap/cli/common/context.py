"""Application context management for the CLI."""

from dataclasses import dataclass
from functools import partial
from typing import Iterable

from ddlsnap.cli.common.exits import die
from ddlsnap.core.adapters import oracle
from ddlsnap.core.adapters.gitcli import GitCliAdapter
from ddlsnap.core.catalog import CatalogConnector
from ddlsnap.core.config import DEFAULT_LOOKBACK, SyncConfig, load_config
from ddlsnap.core.errors import ConfigError


@dataclass
class SnapshotAppContext:
    """Application context holding the configuration and the adapters built from it."""

    config: SyncConfig
    vcs: GitCliAdapter
    connect: CatalogConnector


def build_context(
    *,
    root: str | None,
    dsn: str | None = None,
    user: str | None = None,
    password: str | None = None,
    schemas: Iterable[str] | None = None,
    object_types: Iterable[str] | None = None,
    parallel: int | None = None,
    push: bool = True,
    lookback: int = DEFAULT_LOOKBACK,
) -> SnapshotAppContext:
    """Validate the configuration and wire the git and Oracle adapters.

    Configuration errors end the process with exit code 2.
    """
    try:
        config = load_config(
            root=root,
            dsn=dsn,
            user=user,
            password=password,
            schemas=schemas,
            object_types=object_types,
            parallel=parallel,
            push=push,
            lookback=lookback,
        )
    except ConfigError as exc:
        die(str(exc), code=2)
    if not config.root.is_dir():
        die(f"Snapshot root does not exist: {config.root}", code=2)

    return SnapshotAppContext(
        config=config,
        vcs=GitCliAdapter(config.root),
        connect=partial(oracle.connect, config),
    )
