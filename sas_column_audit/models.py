from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union


@dataclass(frozen=True)
class DatasetFile:
    path: Path
    modified: datetime
    size: int

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def base_name(self) -> str:
        # "ae.sas7bdat" -> "ae"; the provider looks datasets up by this key
        return self.path.stem

    @property
    def directory(self) -> Path:
        return self.path.parent


@dataclass(frozen=True)
class ColumnSchemaRow:
    """
    One row of the provider's "columns" schema collection.

    Built once at the provider boundary; nothing downstream looks fields up
    by name.
    """

    column_name: str
    description: str
    ordinal_position: int
    data_type: Union[int, str, None]
    character_maximum_length: Optional[int]
    format_name: str
    format_length: Optional[int]
    format_decimal: Optional[int]
    informat_name: str
    informat_length: Optional[int]
    informat_decimal: Optional[int]
    indexed: bool

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "ColumnSchemaRow":
        return cls(
            column_name=row["COLUMN_NAME"],
            description=row.get("DESCRIPTION") or "",
            ordinal_position=row["ORDINAL_POSITION"],
            data_type=row.get("DATA_TYPE"),
            character_maximum_length=row.get("CHARACTER_MAXIMUM_LENGTH"),
            format_name=row.get("FORMAT_NAME") or "",
            format_length=row.get("FORMAT_LENGTH"),
            format_decimal=row.get("FORMAT_DECIMAL"),
            informat_name=row.get("INFORMAT_NAME") or "",
            informat_length=row.get("INFORMAT_LENGTH"),
            informat_decimal=row.get("INFORMAT_DECIMAL"),
            indexed=bool(row.get("INDEXED")),
        )


# Output labels, in emission order.
RECORD_FIELDS = [
    "File name",
    "Column",
    "Label",
    "Pos",
    "Type",
    "Length",
    "Format",
    "Informat",
    "Indexed",
    "Path",
    "File time",
    "File size",
]


@dataclass(frozen=True)
class OutputRecord:
    file_name: str
    column: str
    label: str
    pos: int
    column_type: Union[int, str, None]
    length: Optional[int]
    display_format: str
    input_format: str
    indexed: bool
    path: str
    file_time: datetime
    file_size: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "File name": self.file_name,
            "Column": self.column,
            "Label": self.label,
            "Pos": self.pos,
            "Type": self.column_type,
            "Length": self.length,
            "Format": self.display_format,
            "Informat": self.input_format,
            "Indexed": self.indexed,
            "Path": self.path,
            "File time": self.file_time,
            "File size": self.file_size,
        }
