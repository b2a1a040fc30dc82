"""
DumbPad Backend — Request ID Middleware
=========================================

What:  Gives every request a correlation ID for log lines and error bodies.
How:   A client-supplied X-Request-ID is reused only if it is a short token
       of letters, digits, ".", "_" or "-"; anything else (over-long, spaces,
       control characters) is replaced by a fresh 8-character hex ID. The ID
       is echoed in the response header and published through
       `request_id_var`, which the exception handlers, the PIN gate and the
       access log read.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_CLIENT_ID_RE = re.compile(r"[A-Za-z0-9._-]{1,64}")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(supplied: Optional[str]) -> str:
    """Return `supplied` if it is safe to log and echo, else a new ID."""
    if supplied and _CLIENT_ID_RE.fullmatch(supplied):
        return supplied
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        # Not reset afterwards: the catch-all 500 handler runs outside this middleware
        request_id_var.set(rid)
        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
