"""Error codes and exceptions shared by the codec, resolver and sources."""
from __future__ import annotations

ERRORS = {
    "E_TIME_CONFLICT": "Cannot specify both day and hour time ranges",
    "E_TIME_FORMAT": "Invalid time format",
    "E_TIME_RANGE": "Invalid time range",
    "E_SYNCID_SHORT": "Sync id too short",
    "E_SYNCID_TIMESTAMP": "Sync id timestamp invalid",
    "E_SYNCID_TEXT": "Sync id text invalid",
    "E_ENDPOINT": "Endpoint configuration invalid",
    "E_FETCH": "Failed to fetch sync ids",
    "E_EXPORT_MANIFEST": "Export manifest missing or unreadable",
    "E_EXPORT_FILE": "Exported file missing",
    "E_EXPORT_INTEGRITY": "Exported files do not match manifest",
}


class HubDiffError(ValueError):
    """Base error. ``code`` indexes ERRORS; ``detail`` echoes the offending input."""

    code = ""

    def __init__(self, detail: str):
        super().__init__(f"{ERRORS[self.code]}: {detail}")
        self.detail = detail


class ConflictingTimeSpec(HubDiffError):
    code = "E_TIME_CONFLICT"


class InvalidTimeFormat(HubDiffError):
    code = "E_TIME_FORMAT"


class InvalidRange(HubDiffError):
    code = "E_TIME_RANGE"


class SyncIdDecodeError(HubDiffError):
    pass


class TooShort(SyncIdDecodeError):
    code = "E_SYNCID_SHORT"


class InvalidTimestamp(SyncIdDecodeError):
    code = "E_SYNCID_TIMESTAMP"


class InvalidSyncIdText(HubDiffError):
    code = "E_SYNCID_TEXT"


class EndpointError(HubDiffError):
    code = "E_ENDPOINT"


class FetchError(HubDiffError):
    code = "E_FETCH"
