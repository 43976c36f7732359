from __future__ import annotations

from pathlib import Path
from typing import List

import pandas as pd

from .errors import ConfigError
from .models import RECORD_FIELDS, OutputRecord

EXPORT_SUFFIXES = (".csv", ".parquet")


def check_export_path(path: Path) -> None:
    if path.suffix.lower() not in EXPORT_SUFFIXES:
        raise ConfigError(f"unsupported export type {path.suffix or '(none)'}; use one of {', '.join(EXPORT_SUFFIXES)}")


def records_to_frame(records: List[OutputRecord]) -> pd.DataFrame:
    return pd.DataFrame([r.as_dict() for r in records], columns=RECORD_FIELDS)


def export_records(records: List[OutputRecord], out_path: Path) -> int:
    """
    Write the collected records to CSV or parquet, chosen by suffix.
    Returns the row count.
    """
    check_export_path(out_path)
    df = records_to_frame(records)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    if out_path.suffix.lower() == ".parquet":
        # unknown type codes pass through as ints; arrow needs one type per column
        df["Type"] = df["Type"].map(lambda v: v if v is None else str(v))
        df.to_parquet(out_path, engine="pyarrow", index=False)
    else:
        df.to_csv(out_path, index=False)
    return len(df)
