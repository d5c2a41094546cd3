"""
Shoe Store Backend — Access Log Middleware
============================================

One line per request on the `shoestore.access` logger, written after the
response is produced. Runs inside RequestIDMiddleware, so the correlation
id is already set.

Log line:
    PUT /update id=9f2c... 404 15B 3.2ms [a1b2c3d4]

The shoe id is taken from the query string; request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from shoestore.middleware.request_id import request_id_var

logger = logging.getLogger("shoestore.access")

SKIPPED_PATHS = {"/health"}


def access_level(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def describe_target(request: Request) -> str:
    """`/getbyid id=abc`, or just the path when no shoe id was given."""
    shoe_id = request.query_params.get("id")
    if shoe_id:
        return f"{request.url.path} id={shoe_id}"
    return request.url.path


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIPPED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        status = response.status_code
        size = response.headers.get("content-length", "-")
        rid = request_id_var.get("")
        logger.log(
            access_level(status),
            "%s %s %d %sB %.1fms [%s]",
            request.method,
            describe_target(request),
            status,
            size,
            elapsed_ms,
            rid,
            extra={
                "request_id": rid,
                "status": status,
                "duration_ms": round(elapsed_ms, 2),
                "client_ip": request.client.host if request.client else "unknown",
            },
        )
        return response
