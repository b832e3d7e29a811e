"""DDL extraction for a single catalog object."""

from __future__ import annotations

import logging

from ddlsnap.core.catalog import CatalogAdapter
from ddlsnap.core.errors import ObjectNotFoundError
from ddlsnap.core.models import CatalogObject, Extracted, ExtractResult, Failed, Skipped

log = logging.getLogger(__name__)


def trim_ddl(ddl: str | None) -> str | None:
    """
    Remove one leading and one trailing line terminator.

    DBMS_METADATA.GET_DDL characteristically wraps its output in a newline on
    each side; anything beyond that single terminator is part of the definition.
    """
    if ddl is None:
        return None
    for terminator in ("\r\n", "\n"):
        if ddl.startswith(terminator):
            ddl = ddl[len(terminator) :]
            break
    for terminator in ("\r\n", "\n"):
        if ddl.endswith(terminator):
            ddl = ddl[: -len(terminator)]
            break
    return ddl


def extract_ddl(adapter: CatalogAdapter, obj: CatalogObject) -> ExtractResult:
    """
    Obtain the canonical DDL for `obj`.

    Returns:
        Extracted with the trimmed text (or None if the facility returned
        nothing), Skipped if the object no longer exists, or Failed carrying
        any other error.
    """
    try:
        raw = adapter.fetch_ddl(obj)
    except ObjectNotFoundError as exc:
        log.debug("%s not found: %s", obj.label, exc)
        return Skipped(obj=obj, reason=str(exc) or "object does not exist")
    except Exception as exc:  # noqa: BLE001 - surfaced as Failed, re-raised by the orchestrator
        return Failed(obj=obj, error=exc)
    return Extracted(obj=obj, ddl=trim_ddl(raw))
