from datetime import datetime

import pytest

from ddlsnap.core.catalog import decode_catalog_row, list_changed_objects
from ddlsnap.core.errors import CatalogRowError
from ddlsnap.core.models import CatalogObject

CUTOFF = datetime(2024, 5, 1, 10, 0, 0)


def test_decode_catalog_row_accepts_upper_case_columns():
    obj = decode_catalog_row({"OWNER": "HR", "NAME": "EMPLOYEES", "TYPE": "TABLE"})

    assert obj == CatalogObject(owner="HR", name="EMPLOYEES", type="TABLE")


def test_decode_catalog_row_normalizes_type_spaces():
    obj = decode_catalog_row({"owner": "HR", "name": "PKG", "type": "PACKAGE BODY"})

    assert obj.type == "PACKAGE_BODY"


@pytest.mark.parametrize("missing", ["owner", "name", "type"])
def test_decode_catalog_row_rejects_missing_fields(missing: str):
    row = {"owner": "HR", "name": "EMPLOYEES", "type": "TABLE"}
    del row[missing]

    with pytest.raises(CatalogRowError, match=missing):
        decode_catalog_row(row)


def test_decode_catalog_row_rejects_empty_values():
    with pytest.raises(CatalogRowError, match="name"):
        decode_catalog_row({"owner": "HR", "name": "", "type": "TABLE"})


def test_list_changed_objects_empty_allowlist_matches_none():
    class _Adapter:
        def __init__(self):
            self.calls = 0

        def list_changed_objects(self, cutoff, owners):
            self.calls += 1
            return [{"owner": "HR", "name": "T", "type": "TABLE"}]

    adapter = _Adapter()

    assert list_changed_objects(adapter, CUTOFF, frozenset()) == []
    assert adapter.calls == 0


def test_list_changed_objects_keeps_adapter_order_and_passes_filters():
    class _Adapter:
        def __init__(self):
            self.received = None

        def list_changed_objects(self, cutoff, owners):
            self.received = (cutoff, owners)
            return [
                {"owner": "HR", "name": "NEWEST", "type": "VIEW"},
                {"owner": "SALES", "name": "OLDER", "type": "PACKAGE BODY"},
            ]

    adapter = _Adapter()
    objects = list_changed_objects(adapter, CUTOFF, frozenset({"HR", "SALES"}))

    assert adapter.received == (CUTOFF, frozenset({"HR", "SALES"}))
    assert [o.name for o in objects] == ["NEWEST", "OLDER"]
    assert objects[1].type == "PACKAGE_BODY"


def test_list_changed_objects_propagates_adapter_errors():
    class _Adapter:
        def list_changed_objects(self, cutoff, owners):
            raise ConnectionError("listener refused")

    with pytest.raises(ConnectionError, match="listener"):
        list_changed_objects(_Adapter(), CUTOFF, frozenset({"HR"}))
