"""
Summarize parquet exports written by `sas-column-audit --export x.parquet`.

    python scripts/print_export_schema.py "reports/*.parquet"
"""

import glob
import sys

try:
    import pyarrow.compute as pc
    import pyarrow.parquet as pq
except Exception:
    print("[error] pyarrow not available. Install with: pip install pyarrow")
    raise


def describe_export(path: str) -> list:
    table = pq.read_table(path)
    lines = [path, f"  rows: {table.num_rows}"]
    if "File name" in table.column_names and table.num_rows:
        n = pc.count_distinct(table.column("File name")).as_py()
        lines.append(f"  datasets: {n}")
    for field in table.schema:
        lines.append(f"  - {field.name}: {field.type}")
    return lines


def main(path_glob: str) -> int:
    files = sorted(glob.glob(path_glob))
    print(f"count: {len(files)}")
    for f in files:
        print("\n" + "\n".join(describe_export(f)))
    return 0


if __name__ == "__main__":
    pattern = sys.argv[1] if len(sys.argv) > 1 else "reports/*.parquet"
    raise SystemExit(main(pattern))
