from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import oracledb
import pytest

from ddlsnap.core.adapters import oracle
from ddlsnap.core.adapters.oracle import OracleCatalogAdapter
from ddlsnap.core.config import SyncConfig
from ddlsnap.core.errors import ConfigError, ObjectNotFoundError
from ddlsnap.core.models import CatalogObject

OBJ = CatalogObject(owner="HR", name="PKG_PAYROLL", type="PACKAGE_BODY")


class _Lob:
    def __init__(self, text: str):
        self.text = text

    def read(self) -> str:
        return self.text


class _Var:
    def __init__(self, value):
        self.value = value

    def getvalue(self):
        return self.value


class _Cursor:
    def __init__(self, connection: "_Connection"):
        self.connection = connection
        self.description = [("OWNER",), ("NAME",), ("TYPE",)]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def var(self, db_type):
        self.connection.var_types.append(db_type)
        return _Var(self.connection.ddl_value)

    def execute(self, sql, params=None, **kwargs):
        self.connection.executed.append((sql, params if params is not None else kwargs))
        if self.connection.error is not None:
            raise self.connection.error

    def fetchall(self):
        return self.connection.rows


class _Connection:
    def __init__(self, rows=None, ddl_value=None, error=None):
        self.rows = rows or []
        self.ddl_value = ddl_value
        self.error = error
        self.executed: list = []
        self.var_types: list = []
        self.closed = False

    def cursor(self):
        return _Cursor(self)

    def close(self):
        self.closed = True


def _ora_error(code: int) -> oracledb.DatabaseError:
    return oracledb.DatabaseError(SimpleNamespace(code=code, message=f"ORA-{code:05d}"))


def test_list_changed_objects_binds_owners_and_cutoff():
    conn = _Connection(rows=[("HR", "EMPLOYEES", "TABLE")])
    cutoff = datetime(2024, 5, 1, 10, 0, 0)

    rows = OracleCatalogAdapter(conn).list_changed_objects(cutoff, frozenset({"SALES", "HR"}))

    assert rows == [{"owner": "HR", "name": "EMPLOYEES", "type": "TABLE"}]
    sql, binds = conn.executed[0]
    assert "o.owner IN (:owner0, :owner1)" in sql
    assert "o.last_ddl_time > :cutoff" in sql
    assert "ORDER BY o.last_ddl_time DESC" in sql
    assert binds == {"owner0": "HR", "owner1": "SALES", "cutoff": cutoff}


def test_fetch_ddl_reads_clob_output():
    conn = _Connection(ddl_value=_Lob("\n  CREATE OR REPLACE PACKAGE BODY ...\n"))

    ddl = OracleCatalogAdapter(conn).fetch_ddl(OBJ)

    assert ddl == "\n  CREATE OR REPLACE PACKAGE BODY ...\n"
    assert conn.var_types == [oracledb.DB_TYPE_CLOB]
    _, binds = conn.executed[0]
    assert binds["object_type"] == "PACKAGE_BODY"
    assert binds["object_name"] == "PKG_PAYROLL"
    assert binds["owner"] == "HR"


def test_fetch_ddl_returns_none_when_output_is_unset():
    assert OracleCatalogAdapter(_Connection(ddl_value=None)).fetch_ddl(OBJ) is None


def test_fetch_ddl_maps_ora_31603_to_object_not_found():
    conn = _Connection(error=_ora_error(31603))

    with pytest.raises(ObjectNotFoundError):
        OracleCatalogAdapter(conn).fetch_ddl(OBJ)


def test_fetch_ddl_propagates_other_database_errors():
    conn = _Connection(error=_ora_error(1031))

    with pytest.raises(oracledb.DatabaseError):
        OracleCatalogAdapter(conn).fetch_ddl(OBJ)


def test_connect_opens_and_closes(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    conn = _Connection()
    calls = []

    def fake_connect(**kwargs):
        calls.append(kwargs)
        return conn

    monkeypatch.setattr(oracle.oracledb, "connect", fake_connect)
    config = SyncConfig(root=tmp_path, dsn="db/ORCL", user="reader", password="pw")

    with oracle.connect(config) as adapter:
        assert adapter.connection is conn
        assert conn.closed is False

    assert conn.closed is True
    assert calls == [{"user": "reader", "password": "pw", "dsn": "db/ORCL"}]


def test_connect_requires_settings(tmp_path: Path):
    with pytest.raises(ConfigError):
        with oracle.connect(SyncConfig(root=tmp_path)):
            pass
