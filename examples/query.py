"""Query an exported diff - which fids are missing the most on each side."""
from __future__ import annotations

import sys
from pathlib import Path

import duckdb

from hub_diff.export import verify_diff_export


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python query.py <export_dir> [limit]")
        print("Example: python query.py diff_out/ 20")
        sys.exit(1)

    export = Path(sys.argv[1])
    limit = int(sys.argv[2]) if len(sys.argv) > 2 else 10

    result = verify_diff_export(export)
    if result["status"] != "PASS":
        for err in result["errors"]:
            print(f"FATAL: {err['message']} {err.get('path', '')}".rstrip())
        sys.exit(1)

    con = duckdb.connect(":memory:")

    for side in ("source", "target"):
        path = export / f"only_in_{side}.parquet"
        print(f"--- Only in {side.capitalize()} ---")
        if not path.exists():
            print("No differences.\n")
            continue

        con.execute(f"CREATE OR REPLACE VIEW diff AS SELECT * FROM '{path}'")
        sql = f"""
        SELECT
            fid,
            record_type,
            count(*) AS ids,
            min(timestamp) AS first_seen,
            max(timestamp) AS last_seen
        FROM diff
        GROUP BY fid, record_type
        ORDER BY ids DESC, fid
        LIMIT {limit}
        """
        df = con.execute(sql).fetchdf()
        for _, row in df.iterrows():
            print(f"FID {row['fid']:>8}  {row['record_type']:<14} {row['ids']:>5}  "
                  f"{row['first_seen']} .. {row['last_seen']}")
        print()


if __name__ == "__main__":
    main()
