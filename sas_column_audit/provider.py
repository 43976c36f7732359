"""
Schema providers.

A provider answers one question: given a directory and a dataset base name,
what columns does that dataset have? The pipeline only talks to the small
connection/cursor surface below; the readstat provider is the shipped
implementation.
"""

from __future__ import annotations

import importlib.util
import re
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from . import DATASET_EXTENSION
from .errors import ProviderError
from .mapping import TYPE_CHARACTER, TYPE_NUMERIC
from .models import ColumnSchemaRow

COLUMNS = "columns"


class SchemaCursor:
    """Forward-only cursor over schema rows."""

    def __init__(self, rows: Iterable[ColumnSchemaRow]) -> None:
        self._rows = iter(rows)
        self.closed = False

    def __iter__(self) -> Iterator[ColumnSchemaRow]:
        return self

    def __next__(self) -> ColumnSchemaRow:
        if self.closed:
            raise StopIteration
        return next(self._rows)

    def close(self) -> None:
        self.closed = True


class SchemaConnection:
    def open_schema(self, collection: str, restrictions: Sequence[Optional[str]]) -> SchemaCursor:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self) -> "SchemaConnection":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


class SchemaProvider:
    name = "abstract"
    install_hint = ""

    def is_registered(self) -> bool:
        raise NotImplementedError

    def connect(self, directory: Path) -> SchemaConnection:
        raise NotImplementedError


# ----------------------------
# readstat
# ----------------------------

# "DOLLAR8.2" -> ("DOLLAR", "8", "2"); "$CHAR25." -> ("$CHAR", "25", "");
# "E8601DT19." -> ("E8601DT", "19", "")  (names may contain digits but never end in one)
_FORMAT_RE = re.compile(r"^(?P<name>\$?(?:[A-Za-z_](?:[A-Za-z0-9_]*[A-Za-z_])?)?)(?P<width>\d*)\.?(?P<decimals>\d*)$")


def split_sas_format(text: Optional[str]) -> Tuple[str, Optional[int], Optional[int]]:
    if text is None:
        return ("", None, None)
    s = str(text).strip()
    # readstat reports "NULL" for columns that carry no format
    if s == "" or s.upper() == "NULL":
        return ("", None, None)
    m = _FORMAT_RE.match(s)
    if not m:
        return (s, None, None)
    width = m.group("width")
    decimals = m.group("decimals")
    if not m.group("name"):
        # nameless formats ("8.2" from `format x 8.2;`) carry no format name
        if not width:
            return ("", None, None)
        return ("", int(width), int(decimals) if decimals else 0)
    return (
        m.group("name"),
        int(width) if width else None,
        int(decimals) if decimals else 0,
    )


def columns_from_metadata(meta: Any) -> List[ColumnSchemaRow]:
    """
    Convert a pyreadstat metadata container to schema rows.

    readstat exposes no informats or index flags, so those come back empty.
    """
    names = list(meta.column_names or [])
    labels = list(meta.column_labels or [None] * len(names))
    formats: Dict[str, Any] = meta.original_variable_types or {}
    rtypes: Dict[str, Any] = meta.readstat_variable_types or {}
    widths: Dict[str, Any] = meta.variable_storage_width or {}

    rows: List[ColumnSchemaRow] = []
    for pos, name in enumerate(names, start=1):
        fmt_name, fmt_len, fmt_dec = split_sas_format(formats.get(name))
        width = widths.get(name)
        rows.append(ColumnSchemaRow.from_mapping({
            "COLUMN_NAME": name,
            "DESCRIPTION": labels[pos - 1] if pos - 1 < len(labels) else None,
            "ORDINAL_POSITION": pos,
            "DATA_TYPE": TYPE_CHARACTER if rtypes.get(name) == "string" else TYPE_NUMERIC,
            "CHARACTER_MAXIMUM_LENGTH": int(width) if width is not None else None,
            "FORMAT_NAME": fmt_name,
            "FORMAT_LENGTH": fmt_len,
            "FORMAT_DECIMAL": fmt_dec,
            "INFORMAT_NAME": "",
            "INFORMAT_LENGTH": None,
            "INFORMAT_DECIMAL": None,
            "INDEXED": False,
        }))
    return rows


class ReadstatConnection(SchemaConnection):
    def __init__(self, directory: Path, encoding: Optional[str] = None) -> None:
        self.directory = directory
        self.encoding = encoding
        self.closed = False

    def _resolve(self, base_name: str) -> Path:
        exact = self.directory / f"{base_name}{DATASET_EXTENSION}"
        if exact.is_file():
            return exact
        # extension case differs (AE.SAS7BDAT)
        for fp in self.directory.iterdir():
            if fp.stem == base_name and fp.suffix.lower() == DATASET_EXTENSION and fp.is_file():
                return fp
        raise ProviderError(f"dataset not found: {base_name} in {self.directory}")

    def open_schema(self, collection: str, restrictions: Sequence[Optional[str]]) -> SchemaCursor:
        if self.closed:
            raise ProviderError("connection is closed")
        if collection != COLUMNS:
            raise ProviderError(f"unsupported schema collection: {collection}")
        if len(restrictions) < 3 or not restrictions[2]:
            raise ProviderError("columns schema requires a table name restriction")

        path = self._resolve(str(restrictions[2]))
        try:
            import pyreadstat

            _, meta = pyreadstat.read_sas7bdat(str(path), metadataonly=True, encoding=self.encoding)
        except Exception as e:
            raise ProviderError(str(e), [f"{type(e).__name__}: {e}"]) from e
        return SchemaCursor(columns_from_metadata(meta))

    def close(self) -> None:
        self.closed = True


class ReadstatProvider(SchemaProvider):
    name = "readstat"
    install_hint = "pyreadstat not available. Install with: pip install pyreadstat"

    def __init__(self, encoding: Optional[str] = None) -> None:
        self.encoding = encoding

    def is_registered(self) -> bool:
        return importlib.util.find_spec("pyreadstat") is not None

    def connect(self, directory: Path) -> ReadstatConnection:
        if not directory.is_dir():
            raise ProviderError(f"data source is not a directory: {directory}")
        return ReadstatConnection(directory, self.encoding)
