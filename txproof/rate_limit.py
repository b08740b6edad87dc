from __future__ import annotations
import time
import redis
from fastapi import HTTPException, Request
from txproof.config import settings

# Fixed 1s window per client. Redis when configured, process memory otherwise.
_redis = redis.from_url(settings.redis_url, decode_responses=True) if settings.redis_url else None
_mem: dict[str, dict] = {}
_last_sweep = 0.0


def _sweep(now: float):
    global _last_sweep
    if now - _last_sweep < 1.0:
        return
    _last_sweep = now
    for k in [k for k, b in _mem.items() if now - b["t"] >= 1.0]:
        del _mem[k]


def _hit_memory(key: str, now: float) -> int:
    # expired windows are dropped at most once a second
    _sweep(now)
    bucket = _mem.get(key)
    if not bucket or now - bucket["t"] >= 1.0:
        _mem[key] = {"t": now, "n": 1}
        return 1
    bucket["n"] += 1
    return bucket["n"]


def _hit_redis(key: str, now: float) -> int:
    bucket = f"rl:{key}:{int(now)}"
    count = _redis.incr(bucket)
    if count == 1:
        _redis.expire(bucket, 2)
    return int(count)


def enforce_rl(request: Request):
    rps = settings.default_rps_limit
    if rps <= 0:
        return
    key = request.client.host if request.client else "anonymous"
    now = time.time()
    count = _hit_redis(key, now) if _redis is not None else _hit_memory(key, now)
    if count > rps:
        raise HTTPException(status_code=429, detail="rate_limited")
