from __future__ import annotations

import numbers
from typing import Optional, Union

from .models import ColumnSchemaRow, DatasetFile, OutputRecord

# Provider data-type codes (OLE DB numbering, which the SAS providers use)
TYPE_NUMERIC = 5
TYPE_CHARACTER = 129

TYPE_LABELS = {
    TYPE_NUMERIC: "NUM",
    TYPE_CHARACTER: "CHAR",
}


def translate_type(code: Union[int, str, None]) -> Union[int, str, None]:
    # unknown codes (and already-translated labels) pass through
    if isinstance(code, numbers.Integral) and not isinstance(code, bool):
        return TYPE_LABELS.get(int(code), code)
    return code


def _text(v: Optional[int]) -> str:
    return "" if v is None else str(v)


def assemble_format(
    name: str,
    length: Optional[int],
    decimals: Optional[int],
    data_type: Union[int, str, None],
) -> str:
    """
    DOLLAR, 8, 2 on a numeric column -> "DOLLAR8.2"
    DOLLAR, 8, 0                      -> "DOLLAR8."
    empty name                        -> ""
    """
    if not name:
        return ""
    out = f"{name}{_text(length)}."
    if data_type == TYPE_NUMERIC and decimals is not None and decimals > 0:
        out += str(decimals)
    return out


def map_row(row: ColumnSchemaRow, dataset: DatasetFile) -> OutputRecord:
    return OutputRecord(
        file_name=dataset.name,
        column=row.column_name,
        label=row.description,
        pos=row.ordinal_position,
        column_type=translate_type(row.data_type),
        length=row.character_maximum_length,
        display_format=assemble_format(row.format_name, row.format_length, row.format_decimal, row.data_type),
        input_format=assemble_format(row.informat_name, row.informat_length, row.informat_decimal, row.data_type),
        indexed=row.indexed,
        path=str(dataset.directory),
        file_time=dataset.modified,
        file_size=dataset.size,
    )
