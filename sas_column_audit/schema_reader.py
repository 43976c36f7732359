from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, List, Optional

from .discovery import discover_dataset_files
from .errors import ProviderError
from .mapping import map_row
from .models import ColumnSchemaRow, DatasetFile, OutputRecord
from .provider import COLUMNS, SchemaConnection, SchemaCursor, SchemaProvider


def error_messages(exc: BaseException) -> List[str]:
    if isinstance(exc, ProviderError) and exc.messages:
        return list(exc.messages)
    return [str(exc) or repr(exc)]


@dataclass
class ScanSummary:
    files: int = 0
    records: int = 0
    failed: int = 0


class SchemaReader:
    def __init__(self, provider: SchemaProvider) -> None:
        self.provider = provider
        self.failed = 0

    def read_file_columns(self, dataset: DatasetFile) -> Iterator[ColumnSchemaRow]:
        """
        Yield the column rows the provider reports for one dataset.

        Failures are reported to stderr and end the sequence early; the
        connection and cursor are closed on every path.
        """
        connection: Optional[SchemaConnection] = None
        cursor: Optional[SchemaCursor] = None
        try:
            connection = self.provider.connect(dataset.directory)
            cursor = connection.open_schema(COLUMNS, (None, None, dataset.base_name))
            first = next(cursor, None)
            if first is None:
                self.failed += 1
                print(f"[scan] error opening {dataset.path}", file=sys.stderr)
                return
            yield first
            for row in cursor:
                yield row
        except Exception as e:
            self.failed += 1
            for msg in error_messages(e):
                print(f"[scan][ERROR] {dataset.path}: {msg}", file=sys.stderr)
        finally:
            if cursor is not None:
                cursor.close()
            if connection is not None:
                connection.close()


def scan_directory(
    provider: SchemaProvider,
    root: Path,
    on_record: Callable[[OutputRecord], None],
    local_time: bool = False,
) -> ScanSummary:
    reader = SchemaReader(provider)
    summary = ScanSummary()
    for dataset in discover_dataset_files(root, local_time=local_time):
        summary.files += 1
        for row in reader.read_file_columns(dataset):
            on_record(map_row(row, dataset))
            summary.records += 1
    summary.failed = reader.failed
    return summary
