from __future__ import annotations
import hashlib
import re
from typing import Callable

from eth_utils import keccak

Hasher = Callable[[bytes], bytes]

_TX_HASH_RE = re.compile(r"^0x[0-9a-f]{64}$")


def keccak256(data: bytes) -> bytes:
    return keccak(data)


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


HASHERS: dict[str, Hasher] = {
    "keccak256": keccak256,
    "sha256": sha256,
}


def get_hasher(name: str) -> Hasher:
    try:
        return HASHERS[name]
    except KeyError:
        raise ValueError(f"unsupported hash_alg {name!r}") from None


def digest_size(hasher: Hasher) -> int:
    return len(hasher(b""))


def normalize_tx_hash(value: str) -> str:
    v = value.strip().lower()
    if not _TX_HASH_RE.match(v):
        raise ValueError("tx hash must be 0x followed by 64 hex digits")
    return v


def tx_leaf(tx_hash: str, hasher: Hasher = keccak256) -> bytes:
    """Leaf digest for a transaction: hash of the 0x-prefixed text form.

    On-chain verifiers receive keccak256(bytes(tx_hash_string)), so the
    leaf is derived from the string, not from the decoded 32 bytes.
    """
    return hasher(normalize_tx_hash(tx_hash).encode("utf-8"))
