"""Catalog reading: which objects changed since the last sync.

The adapter runs the vendor-specific catalog query and returns raw rows;
this module decodes them into CatalogObject values with an explicit,
checked step instead of relying on column-name conventions.
"""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Any, Callable, Mapping, Protocol

from ddlsnap.core.errors import CatalogRowError
from ddlsnap.core.models import CatalogObject, normalize_object_type

log = logging.getLogger(__name__)

_FIELDS = ("owner", "name", "type")


class CatalogAdapter(Protocol):
    """Interface for catalog queries used by the core domain."""

    def list_changed_objects(
        self, cutoff: datetime, owners: frozenset[str]
    ) -> list[Mapping[str, Any]]:
        """Return rows for objects changed after `cutoff`, newest change first."""
        ...

    def fetch_ddl(self, obj: CatalogObject) -> str | None:
        """Return the raw definition text; raise ObjectNotFoundError if gone."""
        ...


CatalogConnector = Callable[[], AbstractContextManager[CatalogAdapter]]


def decode_catalog_row(row: Mapping[str, Any]) -> CatalogObject:
    """
    Decode one catalog row into a CatalogObject.

    Keys are matched case-insensitively, so both `OWNER` (as Oracle reports
    column names) and `owner` work.

    Raises:
        CatalogRowError: If `owner`, `name` or `type` is absent or empty.
    """
    lowered = {str(k).lower(): v for k, v in row.items()}
    values: dict[str, str] = {}
    for key in _FIELDS:
        value = lowered.get(key)
        if value is None or str(value) == "":
            raise CatalogRowError(
                f"Catalog row is missing field '{key}': {dict(row)!r}"
            )
        values[key] = str(value)
    return CatalogObject(
        owner=values["owner"],
        name=values["name"],
        type=normalize_object_type(values["type"]),
    )


def list_changed_objects(
    adapter: CatalogAdapter,
    cutoff: datetime,
    schemas: frozenset[str],
) -> list[CatalogObject]:
    """
    List catalog objects modified strictly after `cutoff`.

    The order reported by the adapter (last DDL time, descending) is kept.
    An empty schema allow-list matches nothing; the adapter is not called.

    Args:
        adapter: Catalog adapter holding an open connection.
        cutoff: Exclusive lower bound on the catalog's last DDL time.
        schemas: Owners to include.

    Returns:
        The decoded objects, most recently changed first.
    """
    if not schemas:
        log.warning("Schema allow-list is empty; no catalog objects will match.")
        return []

    rows = adapter.list_changed_objects(cutoff, schemas)
    objects = [decode_catalog_row(row) for row in rows]
    log.debug("Catalog reports %d object(s) changed after %s", len(objects), cutoff)
    return objects
