from __future__ import annotations
import logging
from functools import lru_cache
from typing import Any, Protocol

import requests

from txproof.config import settings

logger = logging.getLogger(__name__)


class InvalidBlockNumber(ValueError):
    pass


class EmptyBlock(LookupError):
    pass


class BlockSourceError(RuntimeError):
    pass


def parse_block_number(value: str | int) -> int:
    if isinstance(value, bool):
        raise InvalidBlockNumber("Invalid block number provided.")
    if isinstance(value, int):
        n = value
    else:
        v = str(value).strip()
        if not (v.isascii() and v.isdigit()):
            raise InvalidBlockNumber("Invalid block number provided.")
        n = int(v, 10)
    if n < 0:
        raise InvalidBlockNumber("Invalid block number provided.")
    return n


class BlockSource(Protocol):
    def transaction_hashes(self, block_number: int) -> list[str]:
        ...


class JsonRpcBlockSource:
    """Ethereum JSON-RPC block reader. One bounded call per block, no retries."""

    def __init__(self, url: str, timeout_seconds: float = 10.0, session: Any | None = None):
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self._next_id = 0

    def _call(self, method: str, params: list) -> Any:
        self._next_id += 1
        body = {"jsonrpc": "2.0", "id": self._next_id, "method": method, "params": params}
        try:
            resp = self.session.post(self.url, json=body, timeout=self.timeout_seconds)
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("rpc %s failed: %s", method, e)
            raise BlockSourceError(f"{method} failed: {e}") from e
        if not isinstance(payload, dict):
            raise BlockSourceError(f"{method}: unexpected response shape")
        if payload.get("error"):
            err = payload["error"]
            msg = err.get("message") if isinstance(err, dict) else str(err)
            logger.warning("rpc %s returned error: %s", method, msg)
            raise BlockSourceError(f"{method}: {msg}")
        return payload.get("result")

    def transaction_hashes(self, block_number: int) -> list[str]:
        n = parse_block_number(block_number)
        block = self._call("eth_getBlockByNumber", [hex(n), False])
        if block is not None and not isinstance(block, dict):
            raise BlockSourceError("eth_getBlockByNumber: unexpected response shape")
        if not block or not block.get("transactions"):
            raise EmptyBlock("No transactions found in the specified block.")
        txs = block["transactions"]
        if not isinstance(txs, list):
            raise BlockSourceError("eth_getBlockByNumber: unexpected response shape")
        out = []
        for tx in txs:
            # full transaction objects if the node ignores the hydration flag
            if isinstance(tx, dict) and isinstance(tx.get("hash"), str):
                out.append(tx["hash"])
            elif isinstance(tx, str):
                out.append(tx)
            else:
                raise BlockSourceError("eth_getBlockByNumber: unexpected response shape")
        logger.info("block %d: fetched %d transaction hashes", n, len(out))
        return out


@lru_cache(maxsize=1)
def get_block_source() -> BlockSource:
    return JsonRpcBlockSource(settings.rpc_url, timeout_seconds=settings.rpc_timeout_seconds)
