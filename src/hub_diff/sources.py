"""Where sync ids come from: a JSON snapshot on disk or a hub's HTTP endpoint."""
from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import httpx

from hub_core.errors import EndpointError, FetchError
from hub_core.protocol import (
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_RPC_PORT,
    MAX_SYNC_ID_PAGES,
    SYNC_IDS_HTTP_PATH,
)


class SyncIdSource(Protocol):
    def fetch(self, prefix: bytes | None = None) -> list[bytes]:
        ...


@dataclass(frozen=True)
class RpcEndpoint:
    endpoint: str
    port: int = DEFAULT_RPC_PORT
    http: bool = True
    https: bool = False

    def load_endpoint(self) -> str:
        host = self.endpoint.strip()
        if not host:
            raise EndpointError("empty endpoint host")
        if "://" in host:
            raise EndpointError(f"{host!r}: pass the bare host, use --https to select the scheme")
        if not (self.http or self.https):
            raise EndpointError(f"{host!r}: neither http nor https enabled")
        scheme = "https" if self.https else "http"
        return f"{scheme}://{host}:{int(self.port)}"


def _coerce_sync_id(item: Any) -> bytes:
    # Protobuf JSON encodes bytes as base64; serde-style dumps use a list of ints.
    if isinstance(item, str):
        return base64.b64decode(item, validate=True)
    if isinstance(item, list):
        return bytes(item)
    raise ValueError(f"unsupported sync id encoding {type(item).__name__}")


def load_sync_ids(payload: Any) -> list[bytes]:
    """Extract raw sync ids from a SyncIds JSON document."""
    if not isinstance(payload, dict):
        raise ValueError("sync id document must be a JSON object")
    items = payload.get("syncIds", payload.get("sync_ids"))
    if items is None:
        raise ValueError("missing 'syncIds' field")
    return [_coerce_sync_id(x) for x in items]


def dump_sync_ids(ids: list[bytes]) -> dict:
    return {"syncIds": [base64.b64encode(i).decode("ascii") for i in ids]}


class SnapshotFileSource:
    """Sync ids captured earlier into a JSON file.

    The prefix is ignored: the whole snapshot goes to the differ so that every
    id in it is decoded and checked, not just the ones matching the prefix.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def fetch(self, prefix: bytes | None = None) -> list[bytes]:
        try:
            ids = load_sync_ids(json.loads(self.path.read_text(encoding="utf-8")))
        except (OSError, ValueError, TypeError, binascii.Error) as e:
            raise FetchError(f"{self.path}: {e}") from e
        return ids


class HttpSyncIdSource:
    """Paged GET against a hub's sync id endpoint.

    Pages are followed until ``nextPageToken`` is empty. A partial fetch is an
    error; the caller never sees a truncated set.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_endpoint(cls, endpoint: RpcEndpoint, timeout: float = DEFAULT_FETCH_TIMEOUT) -> "HttpSyncIdSource":
        return cls(endpoint.load_endpoint(), timeout=timeout)

    def fetch(self, prefix: bytes | None = None) -> list[bytes]:
        ids: list[bytes] = []
        params: dict[str, str] = {}
        if prefix:
            params["prefix"] = base64.b64encode(prefix).decode("ascii")

        try:
            with httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self.transport) as client:
                for _ in range(MAX_SYNC_ID_PAGES):
                    resp = client.get(SYNC_IDS_HTTP_PATH, params=params)
                    resp.raise_for_status()
                    body = resp.json()
                    ids.extend(load_sync_ids(body))

                    token = body.get("nextPageToken") or ""
                    if not token:
                        return ids
                    params["pageToken"] = token
        except httpx.HTTPError as e:
            raise FetchError(f"{self.base_url}: {e}") from e
        except (ValueError, TypeError, binascii.Error) as e:
            raise FetchError(f"{self.base_url}: malformed response: {e}") from e

        raise FetchError(f"{self.base_url}: more than {MAX_SYNC_ID_PAGES} pages")
