from __future__ import annotations

"""
Epoch oracle - asks a live CometBFT node which epoch was active at a height
"""
import base64
import binascii
import itertools
import logging
import struct
from typing import Any
from urllib.parse import urlparse

import httpx

from namada_explorer.errors import OracleError

logger = logging.getLogger(__name__)

EPOCH_AT_HEIGHT_PATH = "/shell/epoch_at_height/{height}"


def decode_optional_epoch(value: bytes) -> int | None:
    """Decode a borsh ``Option<u64>``"""
    if value == b"\x00":
        return None
    if len(value) != 9 or value[0] != 1:
        raise ValueError(f"unexpected epoch encoding: {value.hex()}")
    return struct.unpack("<Q", value[1:])[0]


class EpochOracle:
    """
    JSON-RPC client for the node's ``abci_query`` endpoint.

    The httpx client is owned by the caller so one connection pool can be
    shared by every request.
    """

    def __init__(self, client: httpx.AsyncClient, node_url: str, timeout: float = 10.0):
        if "://" not in node_url:
            node_url = f"http://{node_url}"
        parsed = urlparse(node_url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("node_url must include scheme and host, e.g. http://127.0.0.1:26657")

        self.client = client
        self.node_url = node_url.rstrip("/")
        self.timeout = timeout
        self._ids = itertools.count(1)

    async def epoch_at_height(self, height: int) -> int:
        result = await self._abci_query(EPOCH_AT_HEIGHT_PATH.format(height=height))

        response = result.get("response") or {}
        if response.get("code", 0) != 0:
            raise OracleError(
                f"Epoch query for height {height} failed: {response.get('log') or response.get('info')}"
            )

        try:
            value = base64.b64decode(response.get("value") or "", validate=True)
            epoch = decode_optional_epoch(value)
        except (binascii.Error, ValueError) as exc:
            raise OracleError(f"Malformed epoch response for height {height}: {exc}") from exc

        if epoch is None:
            raise OracleError(f"Node has no epoch for height {height}")
        return epoch

    async def is_reachable(self) -> bool:
        """Check if the node answers RPC calls"""
        try:
            response = await self.client.get(f"{self.node_url}/health", timeout=self.timeout)
        except httpx.HTTPError:
            return False
        return response.status_code == 200

    # ------------------------------------------------------------------ helpers
    async def _abci_query(self, path: str) -> dict[str, Any]:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": "abci_query",
            "params": {"path": path, "data": "", "height": "0", "prove": False},
        }
        try:
            response = await self.client.post(self.node_url, json=payload, timeout=self.timeout)
        except httpx.HTTPError as exc:
            logger.error("RPC request %s to %s failed: %s", path, self.node_url, exc)
            raise OracleError(f"Node unreachable: {exc}") from exc

        if response.status_code != 200:
            logger.error("RPC request %s returned HTTP %s", path, response.status_code)
            raise OracleError(f"Node returned HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise OracleError(f"Node returned invalid JSON: {exc}") from exc

        if not isinstance(body, dict):
            raise OracleError("RPC response is not a JSON object")
        if body.get("error"):
            raise OracleError(f"RPC error: {body['error']}")

        result = body.get("result")
        if not isinstance(result, dict):
            raise OracleError("RPC response has no result")
        return result
