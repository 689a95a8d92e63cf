"""Histograms over one side of a sync id diff."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable
from warnings import warn

from hub_core.errors import SyncIdDecodeError
from hub_core.sync_id import decode_sync_id

from .differ import SyncIdDiffReport

MALFORMED = "malformed"
BAR_WIDTH = 40

# Bucket label format per granularity. Truncation drops everything finer.
GRANULARITIES = {
    "minute": "%Y-%m-%d %H:%M",
    "hour": "%Y-%m-%d %H:00",
    "day": "%Y-%m-%d",
}


@dataclass(frozen=True)
class Histogram:
    title: str
    rows: tuple[tuple[str, int], ...]
    total: int

    def as_dict(self) -> dict[str, int]:
        return dict(self.rows)

    def render(self) -> str:
        lines = [f"{self.title} ({self.total} ids)"]
        if not self.rows:
            lines.append("  (none)")
            return "\n".join(lines)

        key_w = max(len("total"), *(len(k) for k, _ in self.rows))
        cnt_w = len(str(self.total))
        peak = max(c for _, c in self.rows)
        for key, count in self.rows:
            bar = "#" * max(1, round(BAR_WIDTH * count / peak))
            lines.append(f"  {key:<{key_w}}  {count:>{cnt_w}}  {bar}")
        lines.append(f"  {'total':<{key_w}}  {self.total:>{cnt_w}}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()


def _warn_malformed(raw: bytes, err: SyncIdDecodeError) -> None:
    warn(f"Malformed sync id {raw.hex()}: {err}")


def histogram_by_record_type(ids: Iterable[bytes], title: str = "By record type") -> Histogram:
    """Count ids per record type, most common first, ties by label."""
    counts: Counter[str] = Counter()
    for raw in ids:
        try:
            counts[decode_sync_id(raw).label] += 1
        except SyncIdDecodeError as e:
            _warn_malformed(bytes(raw), e)
            counts[MALFORMED] += 1

    rows = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    return Histogram(title=title, rows=tuple(rows), total=sum(counts.values()))


def _truncate(ts: datetime, granularity: str) -> datetime:
    if granularity == "minute":
        return ts.replace(second=0, microsecond=0)
    if granularity == "hour":
        return ts.replace(minute=0, second=0, microsecond=0)
    return ts.replace(hour=0, minute=0, second=0, microsecond=0)


def histogram_by_time_bucket(
    ids: Iterable[bytes],
    granularity: str = "hour",
    title: str | None = None,
) -> Histogram:
    """Count ids per truncated timestamp, in time order. Malformed ids come last."""
    if granularity not in GRANULARITIES:
        raise ValueError(f"Unknown granularity {granularity!r}, expected one of {sorted(GRANULARITIES)}")

    buckets: Counter[datetime] = Counter()
    malformed = 0
    for raw in ids:
        try:
            buckets[_truncate(decode_sync_id(raw).timestamp, granularity)] += 1
        except SyncIdDecodeError as e:
            _warn_malformed(bytes(raw), e)
            malformed += 1

    fmt = GRANULARITIES[granularity]
    rows = [(b.strftime(fmt), buckets[b]) for b in sorted(buckets)]
    if malformed:
        rows.append((MALFORMED, malformed))
    return Histogram(
        title=title or f"By {granularity}",
        rows=tuple(rows),
        total=sum(buckets.values()) + malformed,
    )


def _banner(text: str) -> str:
    return f"{text:-^66}"


def render_report(report: SyncIdDiffReport, granularity: str = "hour") -> str:
    """Both sides, each with its own record-type and time histograms."""
    sections = [f"Window: {report.window}"]
    for name, ids in (("Only in Source", report.only_in_source), ("Only in Target", report.only_in_target)):
        sections.append(_banner(name))
        sections.append(histogram_by_record_type(ids).render())
        sections.append(histogram_by_time_bucket(ids, granularity).render())
    return "\n".join(sections)
