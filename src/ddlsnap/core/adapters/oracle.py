from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator

import oracledb

from ddlsnap.core.config import SyncConfig
from ddlsnap.core.errors import ObjectNotFoundError
from ddlsnap.core.models import CatalogObject

log = logging.getLogger(__name__)

# ORA-31603: object "..." of type ... not found in schema "..."
ORA_OBJECT_NOT_FOUND = 31603

_CHANGED_OBJECTS_SQL = """
SELECT
    o.owner,
    o.object_name AS name,
    replace(o.object_type, ' ', '_') AS type
FROM all_objects o
WHERE o.generated = 'N'
  AND o.secondary = 'N'
  AND o.oracle_maintained = 'N'
  AND o.owner IN ({owners})
  AND o.last_ddl_time > :cutoff
ORDER BY o.last_ddl_time DESC"""

_GET_DDL_PLSQL = """
begin
    :ddl_code := dbms_metadata.get_ddl(:object_type, :object_name, :owner);
end;"""


def _error_code(exc: oracledb.DatabaseError) -> int | None:
    """Return the ORA- error number carried by a driver exception."""
    if not exc.args:
        return None
    return getattr(exc.args[0], "code", None)


class OracleCatalogAdapter:
    """Adapter around a python-oracledb connection (catalog query + DBMS_METADATA)."""

    def __init__(self, connection: Any) -> None:
        self.connection = connection

    def list_changed_objects(
        self, cutoff: datetime, owners: frozenset[str]
    ) -> list[dict[str, Any]]:
        """Return `owner`/`name`/`type` rows changed after `cutoff`, newest first."""
        ordered = sorted(owners)
        binds: dict[str, Any] = {f"owner{i}": owner for i, owner in enumerate(ordered)}
        binds["cutoff"] = cutoff
        sql = _CHANGED_OBJECTS_SQL.format(
            owners=", ".join(f":owner{i}" for i in range(len(ordered)))
        )
        with self.connection.cursor() as cursor:
            cursor.execute(sql, binds)
            columns = [d[0].lower() for d in cursor.description]
            return [dict(zip(columns, row)) for row in cursor.fetchall()]

    def fetch_ddl(self, obj: CatalogObject) -> str | None:
        """
        Return the DDL generated by DBMS_METADATA.GET_DDL.

        Raises:
            ObjectNotFoundError: If Oracle reports ORA-31603 for the object.
        """
        with self.connection.cursor() as cursor:
            ddl_var = cursor.var(oracledb.DB_TYPE_CLOB)
            try:
                cursor.execute(
                    _GET_DDL_PLSQL,
                    ddl_code=ddl_var,
                    object_type=obj.type,
                    object_name=obj.name,
                    owner=obj.owner,
                )
            except oracledb.DatabaseError as exc:
                if _error_code(exc) == ORA_OBJECT_NOT_FOUND:
                    raise ObjectNotFoundError(str(exc)) from exc
                raise
            value = ddl_var.getvalue()
            if value is None:
                return None
            return value.read() if hasattr(value, "read") else str(value)


@contextmanager
def connect(config: SyncConfig) -> Iterator[OracleCatalogAdapter]:
    """Open a connection for one sync run (or one worker) and close it afterwards."""
    config.require_connection()
    log.debug("Connecting to %s as %s", config.dsn, config.user)
    connection = oracledb.connect(
        user=config.user, password=config.password, dsn=config.dsn
    )
    try:
        yield OracleCatalogAdapter(connection)
    finally:
        connection.close()
