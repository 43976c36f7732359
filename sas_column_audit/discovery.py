from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from . import DATASET_EXTENSION
from .models import DatasetFile


def file_mtime(ts: float, local_time: bool = False) -> datetime:
    dt = datetime.fromtimestamp(ts, tz=timezone.utc)
    if local_time:
        dt = dt.astimezone()
    return dt.replace(microsecond=0)


def discover_dataset_files(root: Path, local_time: bool = False) -> Iterator[DatasetFile]:
    """
    Walk `root` recursively and yield every *.sas7bdat file:
      root/ae.sas7bdat          -> DatasetFile(base_name="ae")
      root/raw/2024/DM.SAS7BDAT -> DatasetFile(base_name="DM")
    Order is whatever the file system returns.
    """
    for fp in root.rglob("*"):
        if fp.suffix.lower() != DATASET_EXTENSION:
            continue
        try:
            if not fp.is_file():
                continue
            st = fp.stat()
        except FileNotFoundError:
            # removed between listing and stat
            continue
        yield DatasetFile(
            path=fp,
            modified=file_mtime(st.st_mtime, local_time),
            size=int(st.st_size),
        )
