"""Write a diff report to Parquet with a canonical JSON manifest, and recheck it later."""
from __future__ import annotations

import hashlib
import json
from pathlib import Path

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from hub_core.errors import ERRORS
from hub_core.sync_id import decode_sync_id

from .differ import SyncIdDiffReport

CANONICAL_JSON_KW = {"sort_keys": True, "separators": (",", ":"), "ensure_ascii": False}

SIDES = {
    "source": "only_in_source.parquet",
    "target": "only_in_target.parquet",
}

DIFF_SCHEMA = pa.schema(
    [
        ("sync_id", pa.string()),
        ("timestamp", pa.timestamp("s", tz="UTC")),
        ("record_type", pa.string()),
        ("root_prefix", pa.int16()),
        ("fid", pa.int64()),
        ("suffix", pa.string()),
    ]
)


def canonical_json_bytes(obj) -> bytes:
    return json.dumps(obj, **CANONICAL_JSON_KW).encode("utf-8")


def file_digests(out_path: Path, names: list[str]) -> dict[str, str]:
    return {name: hashlib.sha256((out_path / name).read_bytes()).hexdigest() for name in sorted(names)}


def export_root(digests: dict[str, str]) -> str:
    """sha256 over "<name> <digest>\\n" lines in name order."""
    lines = "".join(f"{name} {digests[name]}\n" for name in sorted(digests))
    return hashlib.sha256(lines.encode("utf-8")).hexdigest()


def _fail(errors: list[dict]) -> dict:
    return {"status": "FAIL", "error_count": len(errors), "errors": errors}


def verify_diff_export(out_path: Path) -> dict:
    """Recheck an export directory against its manifest. Returns a PASS/FAIL result."""
    out_path = Path(out_path)
    try:
        manifest = json.loads((out_path / "manifest.json").read_text(encoding="utf-8"))
        integrity = manifest["integrity"]
        expected = dict(integrity["files"])
        expected_root = integrity["root"]
    except (OSError, ValueError, KeyError, TypeError) as e:
        return _fail([{"code": "E_EXPORT_MANIFEST", "message": ERRORS["E_EXPORT_MANIFEST"], "detail": str(e)}])

    missing = sorted(name for name in expected if not (out_path / name).is_file())
    if missing:
        return _fail(
            [{"code": "E_EXPORT_FILE", "message": ERRORS["E_EXPORT_FILE"], "path": str(out_path / n)} for n in missing]
        )

    errors = []
    computed = file_digests(out_path, list(expected))
    for name in sorted(expected):
        if computed[name] != expected[name]:
            errors.append(
                {
                    "code": "E_EXPORT_INTEGRITY",
                    "message": ERRORS["E_EXPORT_INTEGRITY"],
                    "path": str(out_path / name),
                    "expected": expected[name],
                    "computed": computed[name],
                }
            )
    if not errors and export_root(computed) != expected_root:
        errors.append(
            {
                "code": "E_EXPORT_INTEGRITY",
                "message": ERRORS["E_EXPORT_INTEGRITY"],
                "expected": expected_root,
                "computed": export_root(computed),
            }
        )
    if errors:
        return _fail(errors)
    return {"status": "PASS", "error_count": 0, "errors": []}


def _rows(ids: tuple[bytes, ...]) -> list[dict]:
    rows: list[dict] = []
    for raw in ids:
        sid = decode_sync_id(raw)
        rows.append(
            {
                "sync_id": raw.hex(),
                "timestamp": sid.timestamp,
                "record_type": sid.label,
                "root_prefix": sid.root_prefix,
                "fid": sid.fid,
                "suffix": sid.suffix.hex(),
            }
        )
    return rows


def write_diff_export(report: SyncIdDiffReport, out_path: Path) -> dict:
    """Export both sides. Returns the manifest that was written."""
    out_path = Path(out_path)
    out_path.mkdir(parents=True, exist_ok=True)

    files: list[str] = []
    counts: dict[str, int] = {}
    for side, filename in SIDES.items():
        ids = getattr(report, f"only_in_{side}")
        counts[side] = len(ids)
        if not ids:
            continue
        df = pd.DataFrame(_rows(ids)).sort_values("sync_id")
        table = pa.Table.from_pandas(df, schema=DIFF_SCHEMA, preserve_index=False)
        pq.write_table(table, out_path / filename)
        files.append(filename)

    digests = file_digests(out_path, files)
    manifest = {
        "window": {
            "start": report.window.start.isoformat().replace("+00:00", "Z"),
            "end": report.window.end.isoformat().replace("+00:00", "Z"),
        },
        "counts": counts,
        "integrity": {
            "algorithm": "sha256",
            "files": digests,
            "root": export_root(digests),
        },
    }
    (out_path / "manifest.json").write_bytes(canonical_json_bytes(manifest))
    return manifest
