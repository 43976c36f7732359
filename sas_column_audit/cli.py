from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .config import ReportConfig, load_config
from .emit import OUTPUT_FORMATS, Tee, make_emitter
from .errors import ConfigError
from .export import check_export_path, export_records
from .provider import ReadstatProvider, SchemaProvider
from .schema_reader import scan_directory

FAILURE = -1


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="sas-column-audit",
        description="List column metadata for every SAS dataset under a directory.",
    )
    ap.add_argument("directory", nargs="*", help="Root directory to scan (searched recursively)")
    ap.add_argument("--config", default=None, help="Path to YAML config (e.g., configs/audit.yaml)")
    ap.add_argument("--format", dest="output_format", choices=OUTPUT_FORMATS, default=None, help="Record format on stdout (default jsonl)")
    ap.add_argument("--export", default=None, help="Also write all records to a .csv or .parquet file")
    ap.add_argument("--encoding", default=None, help="Character encoding passed to the schema provider")
    ap.add_argument("--local-time", action="store_true", default=None, help="Report file times in local time instead of UTC")
    return ap


def merge_args(cfg: ReportConfig, args: argparse.Namespace) -> ReportConfig:
    if args.output_format is not None:
        cfg.output_format = args.output_format
    if args.export is not None:
        cfg.export = Path(args.export)
    if args.encoding is not None:
        cfg.encoding = args.encoding
    if args.local_time is not None:
        cfg.local_time = args.local_time
    return cfg.validate()


def main(argv: Optional[List[str]] = None, provider: Optional[SchemaProvider] = None) -> int:
    ap = build_parser()
    # intermixed so "a --format csv b" still counts two directories
    args = ap.parse_intermixed_args(argv)

    if len(args.directory) != 1:
        sys.stderr.write(ap.format_usage())
        print("[error] expected exactly one directory argument", file=sys.stderr)
        return FAILURE

    root = Path(args.directory[0])
    if not root.is_dir():
        print(f"[error] directory not found: {root}", file=sys.stderr)
        return FAILURE

    try:
        cfg = merge_args(load_config(Path(args.config) if args.config else None), args)
        if cfg.export is not None:
            check_export_path(cfg.export)
    except ConfigError as e:
        print(f"[error] {e}", file=sys.stderr)
        return FAILURE

    if provider is None:
        provider = ReadstatProvider(encoding=cfg.encoding)
    if not provider.is_registered():
        print(f"[error] schema provider {provider.name!r} is not registered. {provider.install_hint}", file=sys.stderr)
        return FAILURE

    sink = Tee(make_emitter(cfg.output_format), keep=cfg.export is not None)
    summary = scan_directory(provider, root.resolve(), sink, local_time=cfg.local_time)
    print(f"[scan] files={summary.files} records={summary.records} failed={summary.failed}", file=sys.stderr)

    if cfg.export is not None:
        n = export_records(sink.records, cfg.export)
        print(f"[export] wrote {cfg.export} ({n} rows)", file=sys.stderr)
    return 0


def run() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    run()
