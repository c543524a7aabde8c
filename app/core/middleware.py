"""Access logging middleware with per-request IDs.

Each request gets a short ID, echoed back in ``X-Request-ID`` and in every
error body.  The access line also carries the error code chosen by the
error handlers, so a 400 for blank option fields and a 400 for a blank
location can be told apart in the log.
"""

from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("climate_options.access")

REQUEST_ID_HEADER = "X-Request-ID"


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.request_id = request_id = new_request_id()
        request.state.error_code = None

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        response.headers[REQUEST_ID_HEADER] = request_id

        code = getattr(request.state, "error_code", None)
        if code:
            logger.info(
                "%s %s %d %s %.1fms req=%s",
                request.method, request.url.path, response.status_code, code, elapsed_ms, request_id,
            )
        else:
            logger.info(
                "%s %s %d %.1fms req=%s",
                request.method, request.url.path, response.status_code, elapsed_ms, request_id,
            )
        return response
