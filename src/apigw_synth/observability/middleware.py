"""
apigw_synth.observability.middleware

HTTP middleware for request-scoped logging context.

Responsibilities:
- Accept well-formed caller request ids, mint a fresh one otherwise.
- Bind request metadata into structlog contextvars.
- Emit one `request_served` line per request with status and latency.
"""

from __future__ import annotations

import re
import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from apigw_synth.observability.logging import get_logger

REQUEST_ID_HEADER = "x-request-id"
_REQUEST_ID_RE = re.compile(r"[A-Za-z0-9._:-]{1,128}")

log = get_logger(__name__)


def resolve_request_id(candidate: str | None) -> str:
    """Caller id when it is short and header-safe, else a new uuid4."""

    if candidate and _REQUEST_ID_RE.fullmatch(candidate):
        return candidate
    return str(uuid.uuid4())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Binds a request id to every log line emitted while a synthesis request is served,
    and echoes it back as `x-request-id`. Ids end up in JSON log lines and response
    headers, so anything outside `[A-Za-z0-9._:-]{1,128}` is replaced.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        supplied = request.headers.get(REQUEST_ID_HEADER)
        request_id = resolve_request_id(supplied)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
        )
        if supplied and supplied != request_id:
            log.warning("request_id_replaced", supplied_length=len(supplied))

        started = time.perf_counter()
        try:
            response: Response = await call_next(request)
            log.info(
                "request_served",
                status_code=response.status_code,
                elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
            )
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
