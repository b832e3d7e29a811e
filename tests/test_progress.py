from ddlsnap.cli.common.progress import _MAX_LABEL_WIDTH, _truncate


def test_truncate_keeps_short_labels():
    assert _truncate("TABLE HR.EMPLOYEES", _MAX_LABEL_WIDTH) == "TABLE HR.EMPLOYEES"


def test_truncate_long_labels_with_ellipsis():
    label = "PACKAGE_BODY HR." + "X" * 100

    short = _truncate(label, _MAX_LABEL_WIDTH)

    assert len(short) == _MAX_LABEL_WIDTH
    assert short.endswith("...")
