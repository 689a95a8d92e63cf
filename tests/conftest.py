from datetime import datetime

import pytest

from hub_core.protocol import FARCASTER_EPOCH, ROOT_PREFIX_USER
from hub_core.sync_id import SyncId


@pytest.fixture
def make_id():
    """Encode a sync id for a given UTC instant."""

    def _make(ts: datetime, root_prefix: int = ROOT_PREFIX_USER, fid: int = 1, suffix: bytes = b"\x01") -> bytes:
        return SyncId(int(ts.timestamp()) - FARCASTER_EPOCH, root_prefix, fid, suffix).encode()

    return _make
