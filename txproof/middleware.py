from __future__ import annotations
import logging
import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from txproof.metrics import REQS, LAT

logger = logging.getLogger(__name__)


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = rid
        start = time.time()
        resp = await call_next(request)
        dur = time.time() - start
        # label by route template so block numbers don't explode cardinality
        route = request.scope.get("route")
        path = getattr(route, "path", request.url.path)
        LAT.labels(path=path, method=request.method).observe(dur)
        REQS.labels(path=path, method=request.method, status=str(resp.status_code)).inc()
        resp.headers["X-Request-ID"] = rid
        logger.debug("%s %s -> %d in %.3fs [%s]", request.method, request.url.path, resp.status_code, dur, rid)
        return resp
