"""Diff the sync ids held by two hubs over a time window."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable

from hub_core.sync_id import SyncIdType, decode_sync_id, timestamp_prefix
from hub_core.window import TimeWindow

from .sources import SyncIdSource


@dataclass(frozen=True)
class SyncIdDiffReport:
    window: TimeWindow
    only_in_source: tuple[bytes, ...]
    only_in_target: tuple[bytes, ...]

    @property
    def is_empty(self) -> bool:
        return not self.only_in_source and not self.only_in_target


def _in_scope(ids: Iterable[bytes], window: TimeWindow, record_type: SyncIdType | None) -> set[bytes]:
    # Every id is decoded; an id we cannot place in time fails the whole diff.
    kept: set[bytes] = set()
    for raw in ids:
        raw = bytes(raw)
        sid = decode_sync_id(raw)
        if not window.contains(sid.timestamp):
            continue
        if record_type is not None and sid.record_type is not record_type:
            continue
        kept.add(raw)
    return kept


def diff_sync_ids(
    source_ids: Iterable[bytes],
    target_ids: Iterable[bytes],
    window: TimeWindow,
    record_type: SyncIdType | None = None,
) -> SyncIdDiffReport:
    """Symmetric difference of two id sets, restricted to the window."""
    source = _in_scope(source_ids, window, record_type)
    target = _in_scope(target_ids, window, record_type)
    return SyncIdDiffReport(
        window=window,
        only_in_source=tuple(sorted(source - target)),
        only_in_target=tuple(sorted(target - source)),
    )


class HubStateDiffer:
    """Fetch both sides concurrently, then diff.

    - Both fetches must complete; a failure on either side fails the diff.
    - The fetch is scoped by the window's shared timestamp prefix and trimmed
      to the exact window afterwards.
    """

    def __init__(self, source: SyncIdSource, target: SyncIdSource):
        self.source = source
        self.target = target
        self.fetch_stats = {"source": 0, "target": 0}

    def fetch_both(self, prefix: bytes | None) -> tuple[list[bytes], list[bytes]]:
        with ThreadPoolExecutor(max_workers=2) as pool:
            f_src = pool.submit(self.source.fetch, prefix)
            f_tgt = pool.submit(self.target.fetch, prefix)
            # result() re-raises the fetch error; never substitute an empty set.
            source_ids = f_src.result()
            target_ids = f_tgt.result()

        self.fetch_stats["source"] = len(source_ids)
        self.fetch_stats["target"] = len(target_ids)
        return source_ids, target_ids

    def diff_sync_ids(self, window: TimeWindow, record_type: SyncIdType | None = None) -> SyncIdDiffReport:
        prefix = timestamp_prefix(window) or None
        source_ids, target_ids = self.fetch_both(prefix)
        return diff_sync_ids(source_ids, target_ids, window, record_type)
