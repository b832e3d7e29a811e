from pathlib import Path

import pytest

from ddlsnap.core.models import CatalogObject
from ddlsnap.core.snapshot import sanitize_dir, sanitize_file, save, snapshot_path


def test_snapshot_path_layout(tmp_path: Path):
    obj = CatalogObject(owner="HR", name="EMPLOYEES", type="TABLE")

    assert snapshot_path(tmp_path, obj) == tmp_path / "HR" / "TABLE" / "EMPLOYEES.sql"


def test_snapshot_path_is_deterministic(tmp_path: Path):
    first = snapshot_path(tmp_path, CatalogObject("HR", "PKG$UTIL", "PACKAGE_BODY"))
    second = snapshot_path(tmp_path, CatalogObject("HR", "PKG$UTIL", "PACKAGE_BODY"))

    assert first == second
    assert first.relative_to(tmp_path).as_posix() == "HR/PACKAGE_BODY/PKG$UTIL.sql"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("A/B", "A_B"),
        ("A\\B", "A_B"),
        ('A"<>|B', "A____B"),
        ("TAB\tNAME", "TAB_NAME"),
        ("..", "__"),
        (".", "_"),
        ("", "_"),
        ("C:MIXED", "C:MIXED"),
    ],
)
def test_sanitize_dir(raw: str, expected: str):
    assert sanitize_dir(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("BIN$abc==$0", "BIN$abc==$0"),
        ("what?*:", "what___"),
        ("a/b\\c", "a_b_c"),
        ("..", "__"),
    ],
)
def test_sanitize_file(raw: str, expected: str):
    assert sanitize_file(raw) == expected


def test_unsafe_segments_cannot_escape_root(tmp_path: Path):
    obj = CatalogObject(owner="..", name="../../etc/passwd", type="TABLE")

    path = snapshot_path(tmp_path, obj)

    assert path.parent.parent.parent == tmp_path
    assert path.name == ".._.._etc_passwd.sql"


def test_save_writes_utf8_and_creates_directories(tmp_path: Path):
    obj = CatalogObject(owner="HR", name="GREETING", type="VIEW")

    path = save(tmp_path, obj, "CREATE VIEW greeting AS SELECT 'привет' FROM dual")

    assert path == tmp_path / "HR" / "VIEW" / "GREETING.sql"
    assert path.read_bytes().decode("utf-8").endswith("'привет' FROM dual")


def test_save_overwrites_previous_content(tmp_path: Path):
    obj = CatalogObject(owner="HR", name="T", type="TABLE")
    save(tmp_path, obj, "CREATE TABLE t (a NUMBER, b NUMBER, c NUMBER)")

    path = save(tmp_path, obj, "CREATE TABLE t (a NUMBER)")

    assert path.read_text(encoding="utf-8") == "CREATE TABLE t (a NUMBER)"


def test_save_none_is_a_no_op(tmp_path: Path):
    obj = CatalogObject(owner="HR", name="T", type="TABLE")

    assert save(tmp_path, obj, None) is None
    assert list(tmp_path.iterdir()) == []


def test_save_empty_definition_writes_empty_file(tmp_path: Path):
    obj = CatalogObject(owner="HR", name="S", type="SYNONYM")

    path = save(tmp_path, obj, "")

    assert path.exists()
    assert path.read_text(encoding="utf-8") == ""


def test_save_keeps_line_endings(tmp_path: Path):
    obj = CatalogObject(owner="HR", name="P", type="PROCEDURE")

    path = save(tmp_path, obj, "line1\nline2\r\nline3")

    assert path.read_bytes() == b"line1\nline2\r\nline3"


def test_sanitized_collision_is_last_write_wins(tmp_path: Path):
    first = CatalogObject(owner="HR", name="A?B", type="TABLE")
    second = CatalogObject(owner="HR", name="A*B", type="TABLE")

    save(tmp_path, first, "first")
    path = save(tmp_path, second, "second")

    assert snapshot_path(tmp_path, first) == path
    assert path.read_text(encoding="utf-8") == "second"
