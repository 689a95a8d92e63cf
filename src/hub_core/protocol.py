"""Farcaster hub sync protocol constants.

Single source of truth for the sync id layout and network defaults.
Keep this file stable. The codec, the differ and the exporter must agree.
"""

# Network epoch: 2021-01-01T00:00:00Z, in unix seconds
FARCASTER_EPOCH = 1609459200

# SyncId: [Timestamp(10 ASCII digits) | RootPrefix(1) | Fid(4, big-endian) | Suffix(*)]
TIMESTAMP_LENGTH = 10
ROOT_PREFIX_OFFSET = TIMESTAMP_LENGTH
FID_OFFSET = ROOT_PREFIX_OFFSET + 1
FID_BYTES = 4
SUFFIX_OFFSET = FID_OFFSET + FID_BYTES
SYNC_ID_MIN_LEN = SUFFIX_OFFSET

# Timestamp delta is an unsigned 32-bit value
MAX_TIMESTAMP_DELTA = 2**32 - 1

# Root prefixes that can appear in a sync id
ROOT_PREFIX_USER = 1
ROOT_PREFIX_FNAME_USERNAME_PROOF = 17
ROOT_PREFIX_ONCHAIN_EVENT = 23

# Endpoint defaults
DEFAULT_RPC_PORT = 2283
DEFAULT_FETCH_TIMEOUT = 30.0
SYNC_IDS_HTTP_PATH = "/v1/syncIds"
MAX_SYNC_ID_PAGES = 10_000
