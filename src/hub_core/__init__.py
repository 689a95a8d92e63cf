"""Hub core - sync id codec and time windows."""
from .sync_id import SyncId, SyncIdType, decode_sync_id, record_type_label, timestamp_prefix
from .window import TimeWindow, resolve_time_window

__all__ = [
    "SyncId",
    "SyncIdType",
    "decode_sync_id",
    "record_type_label",
    "timestamp_prefix",
    "TimeWindow",
    "resolve_time_window",
]
