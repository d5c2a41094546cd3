"""
Shoe Store Backend — Request ID Middleware
============================================

What:  Tags every request with a correlation id and echoes it back.
How:   Accepts a well-formed incoming X-Request-ID, otherwise mints one.
       The id lives in a ContextVar for the duration of the request so
       exception handlers can put it in their log lines.
Who:   Applied to every request via Starlette middleware.

Accepted ids: 1 to 64 characters of letters, digits, '.', '_' or '-'.
Anything else (too long, spaces, control characters) is replaced, which
keeps the header out of the access log verbatim.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_VALID_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def resolve_request_id(incoming: Optional[str]) -> str:
    """Return the caller's id when it is well-formed, else a fresh one."""
    if incoming and _VALID_REQUEST_ID.fullmatch(incoming):
        return incoming
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = rid

        # Not reset afterwards: the outermost 500 handler logs it too
        request_id_var.set(rid)
        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
