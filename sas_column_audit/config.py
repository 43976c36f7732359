from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .emit import OUTPUT_FORMATS
from .errors import ConfigError


@dataclass
class ReportConfig:
    output_format: str = "jsonl"
    export: Optional[Path] = None
    encoding: Optional[str] = None
    local_time: bool = False

    def validate(self) -> "ReportConfig":
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigError(f"output_format must be one of {', '.join(OUTPUT_FORMATS)} (got {self.output_format!r})")
        if not isinstance(self.local_time, bool):
            raise ConfigError(f"local_time must be true or false (got {self.local_time!r})")
        if self.export is not None and not isinstance(self.export, Path):
            self.export = Path(str(self.export))
        return self


def load_config(path: Optional[Path]) -> ReportConfig:
    """
    Example YAML (all keys optional):

        output_format: csv
        export: reports/columns.parquet
        encoding: latin1
        local_time: true
    """
    if path is None:
        return ReportConfig()
    if not path.exists():
        raise ConfigError(f"config not found: {path}")
    try:
        cfg = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e
    if not isinstance(cfg, dict):
        raise ConfigError(f"config must be a mapping: {path}")

    known = {f.name for f in fields(ReportConfig)}
    unknown = sorted(set(cfg) - known)
    if unknown:
        raise ConfigError(f"unknown config keys in {path}: {', '.join(unknown)}")

    kwargs: Dict[str, Any] = dict(cfg)
    if kwargs.get("export") is not None:
        kwargs["export"] = Path(str(kwargs["export"]))
    return ReportConfig(**kwargs).validate()
