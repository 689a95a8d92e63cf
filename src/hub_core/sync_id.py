"""Sync id codec.

A sync id is the key a hub's merkle trie stores for every replicated record:

  1. The first 10 bytes are the timestamp, as zero-padded ASCII digits counting
     seconds since the Farcaster epoch.
  2. The next byte is the root prefix, i.e. the kind of record.
  3. The next 4 bytes are the owning fid, big-endian.
  4. Whatever follows (message type and hash, fname, block and log index) is
     opaque here.

Example: [48,49,48,54,50,49,49,50,56,48,1,0,0,7,243] is a user message from
fid 2035 at delta 0106211280.
"""
from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING

from .errors import InvalidSyncIdText, InvalidTimestamp, TooShort
from .protocol import (
    FARCASTER_EPOCH,
    FID_OFFSET,
    MAX_TIMESTAMP_DELTA,
    ROOT_PREFIX_FNAME_USERNAME_PROOF,
    ROOT_PREFIX_OFFSET,
    ROOT_PREFIX_ONCHAIN_EVENT,
    ROOT_PREFIX_USER,
    SUFFIX_OFFSET,
    SYNC_ID_MIN_LEN,
    TIMESTAMP_LENGTH,
)

if TYPE_CHECKING:
    from .window import TimeWindow

_FID_FMT = ">I"


class SyncIdType(Enum):
    UNKNOWN = "unknown"
    MESSAGE = "user message"
    FNAME = "fname proof"
    ONCHAIN_EVENT = "onchain event"

    @classmethod
    def from_root_prefix(cls, root_prefix: int) -> "SyncIdType":
        return _ROOT_PREFIX_TYPES.get(root_prefix, cls.UNKNOWN)

    @classmethod
    def from_name(cls, name: str) -> "SyncIdType":
        """Accept either the enum name or the label ("message", "user message", "ONCHAIN_EVENT")."""
        key = name.strip().lower().replace("-", " ").replace("_", " ")
        for t in cls:
            if key in (t.value, t.name.lower().replace("_", " ")):
                return t
        raise ValueError(f"Unknown record type {name!r}")


_ROOT_PREFIX_TYPES = {
    ROOT_PREFIX_USER: SyncIdType.MESSAGE,
    ROOT_PREFIX_FNAME_USERNAME_PROOF: SyncIdType.FNAME,
    ROOT_PREFIX_ONCHAIN_EVENT: SyncIdType.ONCHAIN_EVENT,
}


def record_type_label(root_prefix: int) -> str:
    return SyncIdType.from_root_prefix(root_prefix).value


def farcaster_to_datetime(delta: int) -> datetime:
    return datetime.fromtimestamp(FARCASTER_EPOCH + delta, tz=timezone.utc)


@dataclass(frozen=True)
class SyncId:
    timestamp_delta: int
    root_prefix: int
    fid: int
    suffix: bytes = b""

    @property
    def timestamp(self) -> datetime:
        return farcaster_to_datetime(self.timestamp_delta)

    @property
    def record_type(self) -> SyncIdType:
        return SyncIdType.from_root_prefix(self.root_prefix)

    @property
    def label(self) -> str:
        return self.record_type.value

    def encode(self) -> bytes:
        ts = str(self.timestamp_delta).zfill(TIMESTAMP_LENGTH).encode("ascii")
        return ts + bytes([self.root_prefix]) + struct.pack(_FID_FMT, self.fid) + self.suffix


def decode_sync_id(raw: bytes) -> SyncId:
    """Decode a raw sync id. Raises TooShort or InvalidTimestamp."""
    raw = bytes(raw)
    if len(raw) < SYNC_ID_MIN_LEN:
        raise TooShort(f"{len(raw)} < {SYNC_ID_MIN_LEN} bytes: {raw.hex()}")

    ts_region = raw[:TIMESTAMP_LENGTH]
    if not ts_region.isdigit():
        raise InvalidTimestamp(f"non-digit timestamp region {ts_region!r}")
    delta = int(ts_region)
    if delta > MAX_TIMESTAMP_DELTA:
        raise InvalidTimestamp(f"timestamp {delta} overflows 32 bits")

    (fid,) = struct.unpack(_FID_FMT, raw[FID_OFFSET:SUFFIX_OFFSET])
    return SyncId(
        timestamp_delta=delta,
        root_prefix=raw[ROOT_PREFIX_OFFSET],
        fid=int(fid),
        suffix=raw[SUFFIX_OFFSET:],
    )


def describe(sync_id: SyncId) -> dict:
    """Structured view of a decoded sync id for printing and export."""
    return {
        "sync_id": sync_id.encode().hex(),
        "timestamp_delta": sync_id.timestamp_delta,
        "timestamp": sync_id.timestamp.isoformat().replace("+00:00", "Z"),
        "root_prefix": sync_id.root_prefix,
        "record_type": sync_id.label,
        "fid": sync_id.fid,
        "suffix": sync_id.suffix.hex(),
    }


def parse_sync_id_text(text: str) -> bytes:
    """Parse the comma-separated decimal byte notation, e.g. "48,49,48,54"."""
    parts = [p.strip() for p in text.split(",")]
    out = bytearray()
    for part in parts:
        if not part.isdigit() or int(part) > 255:
            raise InvalidSyncIdText(f"bad byte {part!r} in {text!r}")
        out.append(int(part))
    return bytes(out)


def _delta_digits(delta: int) -> bytes:
    return str(delta).zfill(TIMESTAMP_LENGTH).encode("ascii")


def timestamp_prefix(window: "TimeWindow") -> bytes:
    """Longest timestamp prefix shared by every second inside the window.

    Returns b"" when the window is empty or falls outside the encodable range,
    in which case callers fetch unscoped and rely on the differ to trim.
    """
    first = max(0, math.ceil(window.start.timestamp() - FARCASTER_EPOCH))
    last = min(MAX_TIMESTAMP_DELTA, math.ceil(window.end.timestamp() - FARCASTER_EPOCH) - 1)
    if last < first:
        return b""

    lo, hi = _delta_digits(first), _delta_digits(last)
    n = 0
    while n < TIMESTAMP_LENGTH and lo[n] == hi[n]:
        n += 1
    return lo[:n]
