from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import pytest

from sas_column_audit.errors import ProviderError
from sas_column_audit.models import ColumnSchemaRow
from sas_column_audit.provider import SchemaConnection, SchemaCursor, SchemaProvider


def make_row(name: str, pos: int, data_type=5, fmt=("", None, None), label: str = "", length=8) -> ColumnSchemaRow:
    return ColumnSchemaRow(
        column_name=name,
        description=label,
        ordinal_position=pos,
        data_type=data_type,
        character_maximum_length=length,
        format_name=fmt[0],
        format_length=fmt[1],
        format_decimal=fmt[2],
        informat_name="",
        informat_length=None,
        informat_decimal=None,
        indexed=False,
    )


class FakeConnection(SchemaConnection):
    def __init__(self, provider: "FakeProvider", directory: Path) -> None:
        self.provider = provider
        self.directory = directory
        self.closed = False
        self.cursors: List[SchemaCursor] = []

    def open_schema(self, collection: str, restrictions: Sequence[Optional[str]]) -> SchemaCursor:
        self.provider.queries.append((collection, tuple(restrictions)))
        result = self.provider.tables.get(restrictions[2], [])
        if isinstance(result, Exception):
            raise result
        cursor = SchemaCursor(result)
        self.cursors.append(cursor)
        return cursor

    def close(self) -> None:
        self.closed = True


class FakeProvider(SchemaProvider):
    name = "fake"
    install_hint = "fake provider missing. Install with: pip install fake"

    def __init__(self, tables: Optional[Dict[str, Union[List[ColumnSchemaRow], Exception]]] = None, registered: bool = True) -> None:
        self.tables = tables or {}
        self.registered = registered
        self.connections: List[FakeConnection] = []
        self.queries: list = []
        self.fail_connect: Dict[str, Exception] = {}

    def is_registered(self) -> bool:
        return self.registered

    def connect(self, directory: Path) -> FakeConnection:
        err = self.fail_connect.get(directory.name)
        if err is not None:
            raise err
        conn = FakeConnection(self, directory)
        self.connections.append(conn)
        return conn


def touch_dataset(path: Path, size: int = 16) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"\0" * size)
    return path


@pytest.fixture()
def fake_provider():
    return FakeProvider()


@pytest.fixture()
def provider_error():
    return ProviderError("open failed", ["driver: file locked", "driver: retry later"])
