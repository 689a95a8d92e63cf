"""Hub diff - compare the sync ids held by two hubs."""
from .differ import HubStateDiffer, SyncIdDiffReport, diff_sync_ids
from .report import Histogram, histogram_by_record_type, histogram_by_time_bucket, render_report

__all__ = [
    "HubStateDiffer",
    "SyncIdDiffReport",
    "diff_sync_ids",
    "Histogram",
    "histogram_by_record_type",
    "histogram_by_time_bucket",
    "render_report",
]
