from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace

import pyreadstat
import pytest

from conftest import touch_dataset
from sas_column_audit.errors import ProviderError
from sas_column_audit.mapping import map_row
from sas_column_audit.models import DatasetFile
from sas_column_audit.provider import ReadstatProvider, columns_from_metadata, split_sas_format


@pytest.mark.parametrize(
    "text,expected",
    [
        ("DOLLAR8.2", ("DOLLAR", 8, 2)),
        ("BEST12.", ("BEST", 12, 0)),
        ("$CHAR25.", ("$CHAR", 25, 0)),
        ("$25.", ("$", 25, 0)),
        ("E8601DT19.", ("E8601DT", 19, 0)),
        ("DATE", ("DATE", None, 0)),
        ("8.2", ("", 8, 2)),
        ("8", ("", 8, 0)),
        ("NULL", ("", None, None)),
        ("", ("", None, None)),
        (None, ("", None, None)),
    ],
)
def test_split_sas_format(text, expected):
    assert split_sas_format(text) == expected


def _meta():
    return SimpleNamespace(
        column_names=["USUBJID", "AGE", "FEE"],
        column_labels=["Subject ID", None, "Fee paid"],
        original_variable_types={"USUBJID": "$CHAR20.", "AGE": "NULL", "FEE": "DOLLAR10.2"},
        readstat_variable_types={"USUBJID": "string", "AGE": "double", "FEE": "double"},
        variable_storage_width={"USUBJID": 20, "AGE": 8, "FEE": 8},
    )


def test_columns_from_metadata():
    rows = columns_from_metadata(_meta())

    assert [(r.column_name, r.ordinal_position, r.data_type) for r in rows] == [
        ("USUBJID", 1, 129),
        ("AGE", 2, 5),
        ("FEE", 3, 5),
    ]
    assert rows[0].description == "Subject ID"
    assert rows[1].description == ""
    assert rows[0].character_maximum_length == 20
    assert (rows[1].format_name, rows[1].format_length) == ("", None)
    assert (rows[2].format_name, rows[2].format_length, rows[2].format_decimal) == ("DOLLAR", 10, 2)
    assert all(r.informat_name == "" and r.indexed is False for r in rows)


def test_open_schema_reads_metadata_only(tmp_path, monkeypatch):
    fp = touch_dataset(tmp_path / "ae.sas7bdat")
    calls = []

    def fake_read(path, metadataonly=False, encoding=None, **kw):
        calls.append((path, metadataonly, encoding))
        return None, _meta()

    monkeypatch.setattr(pyreadstat, "read_sas7bdat", fake_read)

    with ReadstatProvider(encoding="latin1").connect(tmp_path) as conn:
        rows = list(conn.open_schema("columns", (None, None, "ae")))

    assert conn.closed
    assert calls == [(str(fp), True, "latin1")]
    assert len(rows) == 3


def test_resolves_upper_case_extension(tmp_path, monkeypatch):
    fp = touch_dataset(tmp_path / "DM.SAS7BDAT")
    seen = []

    def fake_read(path, **kw):
        seen.append(path)
        return None, _meta()

    monkeypatch.setattr(pyreadstat, "read_sas7bdat", fake_read)

    conn = ReadstatProvider().connect(tmp_path)
    list(conn.open_schema("columns", (None, None, "DM")))

    assert seen == [str(fp)]


def test_backend_failure_becomes_provider_error(tmp_path, monkeypatch):
    touch_dataset(tmp_path / "bad.sas7bdat")

    def boom(path, **kw):
        raise ValueError("Invalid file, or file has unsupported features")

    monkeypatch.setattr(pyreadstat, "read_sas7bdat", boom)

    conn = ReadstatProvider().connect(tmp_path)
    with pytest.raises(ProviderError) as ei:
        conn.open_schema("columns", (None, None, "bad"))
    assert ei.value.messages == ["ValueError: Invalid file, or file has unsupported features"]


def test_missing_dataset(tmp_path):
    conn = ReadstatProvider().connect(tmp_path)
    with pytest.raises(ProviderError, match="dataset not found"):
        conn.open_schema("columns", (None, None, "nope"))


def test_unsupported_collection(tmp_path):
    conn = ReadstatProvider().connect(tmp_path)
    with pytest.raises(ProviderError, match="unsupported schema collection"):
        conn.open_schema("tables", (None, None, "x"))


def test_connect_requires_directory(tmp_path):
    with pytest.raises(ProviderError):
        ReadstatProvider().connect(tmp_path / "missing")


def test_is_registered():
    assert ReadstatProvider().is_registered() is True


def test_nameless_format_renders_empty():
    meta = SimpleNamespace(
        column_names=["RATE"],
        column_labels=[None],
        original_variable_types={"RATE": "8.2"},
        readstat_variable_types={"RATE": "double"},
        variable_storage_width={"RATE": 8},
    )
    (row,) = columns_from_metadata(meta)
    ds = DatasetFile(path=Path("/d/rates.sas7bdat"), modified=datetime(2024, 1, 1, tzinfo=timezone.utc), size=1)

    assert (row.format_name, row.format_length, row.format_decimal) == ("", 8, 2)
    assert map_row(row, ds).display_format == ""
