"""Sync configuration.

The configuration is an explicit, immutable value passed to the orchestrator
and the changelog builder. Nothing in the core reads module-level settings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from ddlsnap.core.errors import ConfigError
from ddlsnap.core.models import OBJECT_TYPES, normalize_object_type

DEFAULT_LOOKBACK = 15

ENV_DSN = "DDLSNAP_DSN"
ENV_USER = "DDLSNAP_USER"
ENV_PASSWORD = "DDLSNAP_PASSWORD"
ENV_ROOT = "DDLSNAP_ROOT"
ENV_SCHEMAS = "DDLSNAP_SCHEMAS"
ENV_PARALLEL = "DDLSNAP_PARALLEL"


@dataclass(frozen=True)
class SyncConfig:
    """
    Settings for a synchronization or changelog run.

    Attributes:
        root: Working tree of the snapshot repository.
        dsn: Oracle connect string (host:port/service or TNS alias).
        user: Database user used for catalog queries.
        password: Password for `user`.
        schemas: Owners to synchronize. Empty means "match none".
        object_types: Object types to extract, a subset of OBJECT_TYPES.
        parallel: Number of extraction workers (1 = single connection).
        push: Push to the configured remote after committing.
        lookback: Number of recent commits scanned for the cutoff.
    """

    root: Path
    dsn: str | None = None
    user: str | None = None
    password: str | None = field(default=None, repr=False)
    schemas: frozenset[str] = frozenset()
    object_types: frozenset[str] = OBJECT_TYPES
    parallel: int = 1
    push: bool = True
    lookback: int = DEFAULT_LOOKBACK

    def require_connection(self) -> None:
        """Raise ConfigError unless the database connection settings are present."""
        missing = [
            env
            for env, value in (
                (ENV_DSN, self.dsn),
                (ENV_USER, self.user),
                (ENV_PASSWORD, self.password),
            )
            if not value
        ]
        if missing:
            raise ConfigError(
                "Missing database connection settings: " + ", ".join(missing)
            )


def parse_schemas(values: Iterable[str] | str | None) -> frozenset[str]:
    """
    Normalize schema names from CLI options or a comma-separated string.

    Names are stripped and upper-cased, matching how Oracle stores
    unquoted identifiers. Blank entries are dropped.
    """
    if values is None:
        return frozenset()
    if isinstance(values, str):
        values = values.split(",")
    out: set[str] = set()
    for value in values:
        for part in value.split(","):
            part = part.strip()
            if part:
                out.add(part.upper())
    return frozenset(out)


def _parse_object_types(values: Iterable[str] | None) -> frozenset[str]:
    if not values:
        return OBJECT_TYPES
    types = frozenset(normalize_object_type(v).upper() for v in values if v.strip())
    unknown = sorted(types - OBJECT_TYPES)
    if unknown:
        raise ConfigError(
            f"Unsupported object type(s): {', '.join(unknown)}. "
            f"Expected one of: {', '.join(sorted(OBJECT_TYPES))}"
        )
    return types


def load_config(
    *,
    root: str | Path | None = None,
    dsn: str | None = None,
    user: str | None = None,
    password: str | None = None,
    schemas: Iterable[str] | str | None = None,
    object_types: Iterable[str] | None = None,
    parallel: int | None = None,
    push: bool = True,
    lookback: int = DEFAULT_LOOKBACK,
) -> SyncConfig:
    """
    Build a validated SyncConfig.

    Explicit arguments win; missing values fall back to the DDLSNAP_*
    environment variables.

    Raises:
        ConfigError: If the root is missing, `parallel`/`lookback` are not
            positive, or an unknown object type is requested.
    """
    root = root or os.getenv(ENV_ROOT)
    if not root:
        raise ConfigError(f"Snapshot root is required (--root or {ENV_ROOT}).")

    if schemas is not None and not isinstance(schemas, str):
        schemas = list(schemas)
    if not schemas:
        schemas = os.getenv(ENV_SCHEMAS)

    if parallel is None:
        raw = os.getenv(ENV_PARALLEL)
        try:
            parallel = int(raw) if raw else 1
        except ValueError as exc:
            raise ConfigError(f"{ENV_PARALLEL} must be an integer, got {raw!r}") from exc
    if parallel < 1:
        raise ConfigError("parallel must be >= 1")
    if lookback < 1:
        raise ConfigError("lookback must be >= 1")

    return SyncConfig(
        root=Path(root).expanduser(),
        dsn=dsn or os.getenv(ENV_DSN),
        user=user or os.getenv(ENV_USER),
        password=password or os.getenv(ENV_PASSWORD),
        schemas=parse_schemas(schemas),
        object_types=_parse_object_types(object_types),
        parallel=parallel,
        push=push,
        lookback=lookback,
    )
