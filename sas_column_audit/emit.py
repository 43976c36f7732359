from __future__ import annotations

import csv
import json
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional, TextIO

from .models import RECORD_FIELDS, OutputRecord

OUTPUT_FORMATS = ("jsonl", "csv")


def _plain(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: (v.isoformat() if isinstance(v, datetime) else v) for k, v in d.items()}


class JsonLinesEmitter:
    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream or sys.stdout

    def emit(self, record: OutputRecord) -> None:
        self.stream.write(json.dumps(_plain(record.as_dict()), ensure_ascii=False) + "\n")
        self.stream.flush()


class CsvEmitter:
    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream or sys.stdout
        self._writer = csv.DictWriter(self.stream, fieldnames=RECORD_FIELDS, lineterminator="\n")
        self._header_done = False

    def emit(self, record: OutputRecord) -> None:
        if not self._header_done:
            self._writer.writeheader()
            self._header_done = True
        self._writer.writerow(_plain(record.as_dict()))
        self.stream.flush()


def make_emitter(output_format: str, stream: Optional[TextIO] = None):
    if output_format == "csv":
        return CsvEmitter(stream)
    return JsonLinesEmitter(stream)


class Tee:
    """Forward each record to the emitter and remember it for export."""

    def __init__(self, emitter, keep: bool = True) -> None:
        self.emitter = emitter
        self.keep = keep
        self.records: List[OutputRecord] = []

    def __call__(self, record: OutputRecord) -> None:
        self.emitter.emit(record)
        if self.keep:
            self.records.append(record)
