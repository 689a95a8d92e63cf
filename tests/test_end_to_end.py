import json
import os
import sys
import subprocess
from pathlib import Path

def run(cmd, cwd):
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(Path(cwd) / "src"), env.get("PYTHONPATH")]))
    return subprocess.run(cmd, cwd=cwd, shell=True, check=False, capture_output=True, text=True, env=env)

def test_simulated_hubs_diff(tmp_path):
    repo = Path(__file__).resolve().parents[1]
    hubs = tmp_path / "hubs"
    export = tmp_path / "diff_out"
    py = sys.executable

    r = run(f'"{py}" tools/sim_hub.py {hubs} --day 2024-01-01 --ids 300 --drift 7 --seed 3', cwd=repo)
    assert r.returncode == 0, r.stderr + r.stdout
    meta = json.loads((hubs / "meta.json").read_text(encoding="utf-8"))

    src = hubs / "source_sync_ids.json"
    tgt = hubs / "target_sync_ids.json"
    diff = (
        f'"{py}" -m hub_diff.cli diff --source-file {src} --target-file {tgt} '
        f"--from-day 2024-01-01 --to-day 2024-01-02 --bucket day"
    )
    r = run(f"{diff} --export {export}", cwd=repo)
    assert r.returncode == 0, r.stderr + r.stdout
    assert "Only in Source" in r.stdout

    manifest = json.loads((export / "manifest.json").read_text(encoding="utf-8"))
    assert manifest["counts"] == {"source": meta["only_in_source"], "target": meta["only_in_target"]}

    r = run(f'"{py}" -m hub_diff.cli verify-export {export}', cwd=repo)
    assert r.returncode == 0, r.stderr + r.stdout
    assert json.loads(r.stdout)["status"] == "PASS"

    # The id from the previous day sits in both snapshots and is never reported
    assert "2023-12-31" not in r.stdout

    # Corrupt and ensure failure
    r = run(f'"{py}" scripts/corrupt_sync_id.py {src}', cwd=repo)
    assert r.returncode == 0, r.stderr + r.stdout

    r = run(diff, cwd=repo)
    assert r.returncode != 0
    assert r.stdout.startswith("FATAL:")
