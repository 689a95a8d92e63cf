import base64
import json
import sys
from pathlib import Path

def main():
    if len(sys.argv) != 2:
        print("Usage: corrupt_sync_id.py <snapshot.json>")
        raise SystemExit(2)

    p = Path(sys.argv[1])
    doc = json.loads(p.read_text(encoding="utf-8"))
    ids = doc.get("syncIds", [])
    if not ids:
        print("Snapshot has no sync ids to corrupt.")
        raise SystemExit(2)

    # Overwrite the first timestamp digit of the first id with a non-digit.
    # The diff can no longer place that id in time and must fail closed.
    b = bytearray(base64.b64decode(ids[0]))
    b[0] = ord("x")
    ids[0] = base64.b64encode(bytes(b)).decode("ascii")
    p.write_text(json.dumps(doc), encoding="utf-8")
    print(f"Corrupted timestamp of sync id 0 in {p}")

if __name__ == "__main__":
    main()
