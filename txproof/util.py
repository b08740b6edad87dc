from typing import Any

import orjson


def to_hex(data: bytes) -> str:
    return "0x" + data.hex()


def from_hex(s: str) -> bytes:
    # accepts "0x" prefixed or bare hex; raises ValueError on anything else
    v = s[2:] if s[:2] in ("0x", "0X") else s
    if len(v) % 2 != 0:
        raise ValueError("odd-length hex string")
    return bytes.fromhex(v)


def json_dumps(obj: Any) -> str:
    return orjson.dumps(obj, option=orjson.OPT_SORT_KEYS).decode("utf-8")
