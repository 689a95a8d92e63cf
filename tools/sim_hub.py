import json
import random
from datetime import datetime, timedelta, timezone
from pathlib import Path

from hub_core.protocol import FARCASTER_EPOCH, ROOT_PREFIX_FNAME_USERNAME_PROOF, ROOT_PREFIX_ONCHAIN_EVENT, ROOT_PREFIX_USER
from hub_core.sync_id import SyncId
from hub_diff.sources import dump_sync_ids

# Roughly the mix a mainnet hub sees
ROOT_PREFIX_WEIGHTS = [
    (ROOT_PREFIX_USER, 90),
    (ROOT_PREFIX_ONCHAIN_EVENT, 7),
    (ROOT_PREFIX_FNAME_USERNAME_PROOF, 3),
]


def random_sync_id(rng: random.Random, day_start: datetime) -> bytes:
    ts = day_start + timedelta(seconds=rng.randrange(24 * 3600))
    prefixes, weights = zip(*ROOT_PREFIX_WEIGHTS)
    root_prefix = rng.choices(prefixes, weights=weights)[0]
    # Message sync ids carry a type byte plus a 20-byte ts hash
    suffix = bytes([rng.randint(1, 13)]) + rng.randbytes(20)
    return SyncId(
        timestamp_delta=int(ts.timestamp()) - FARCASTER_EPOCH,
        root_prefix=root_prefix,
        fid=rng.randint(1, 900_000),
        suffix=suffix,
    ).encode()


def generate_pair(output_dir: str, day: str, ids: int = 200, drift: int = 5, seed: int = 0) -> Path:
    """Write source/target snapshots that share all but ``drift`` ids per side."""
    rng = random.Random(seed)
    day_start = datetime.strptime(day, "%Y-%m-%d").replace(tzinfo=timezone.utc)

    common = {random_sync_id(rng, day_start) for _ in range(ids)}
    only_source = {random_sync_id(rng, day_start) for _ in range(drift)} - common
    only_target = {random_sync_id(rng, day_start) for _ in range(drift)} - common - only_source

    # One id a day outside the window on both sides; the diff must ignore it
    stale = random_sync_id(rng, day_start - timedelta(days=1))

    source = sorted(common | only_source | {stale})
    target = sorted(common | only_target | {stale})
    rng.shuffle(source)
    rng.shuffle(target)

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    (out / "source_sync_ids.json").write_text(json.dumps(dump_sync_ids(source)), encoding="utf-8")
    (out / "target_sync_ids.json").write_text(json.dumps(dump_sync_ids(target)), encoding="utf-8")

    meta = {
        "day": day,
        "seed": seed,
        "common": len(common),
        "only_in_source": len(only_source),
        "only_in_target": len(only_target),
    }
    (out / "meta.json").write_text(json.dumps(meta, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")

    print(f"GENERATED: {out}")
    return out


if __name__ == "__main__":
    import sys

    # Usage:
    #   python tools/sim_hub.py OUT_DIR [--day YYYY-MM-DD] [--ids N] [--drift K] [--seed S]

    args = [a for a in sys.argv[1:] if a]

    def pop_option(arg_list: list[str], flag: str, default: str) -> tuple[str, list[str]]:
        """Remove ``flag VALUE`` from an argv-style list."""
        if flag not in arg_list:
            return default, arg_list
        i = arg_list.index(flag)
        if i + 1 >= len(arg_list):
            raise SystemExit(f"{flag} requires a value")
        return arg_list[i + 1], arg_list[:i] + arg_list[i + 2:]

    day, args = pop_option(args, "--day", "2024-01-01")
    n_ids, args = pop_option(args, "--ids", "200")
    drift, args = pop_option(args, "--drift", "5")
    seed, args = pop_option(args, "--seed", "0")

    out = args[0] if args else "simulated_hubs"
    generate_pair(out, day, ids=int(n_ids), drift=int(drift), seed=int(seed))
