"""
DumbPad Backend — PIN Gate Middleware
=======================================

What:  Applies AccessGate.decide() to every gated /api request.
How:   Reads the PIN from the X-Pin header on each request (no session or
       cookie at the API layer). Denials are rendered here as JSON with the
       same body shape the global exception handlers produce, because
       exceptions raised inside BaseHTTPMiddleware bypass those handlers.

Passed through without a check:
    - Paths outside /api/ (health check, docs)
    - /api/verify-pin, /api/pin-required, /api/config
    - CORS preflight (OPTIONS) requests
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from dumbpad.exceptions import AuthenticationError, PinFormatError
from dumbpad.middleware.request_id import request_id_var
from dumbpad.services.access_gate import PIN_HEADER, AccessGate, GateDecision

logger = logging.getLogger(__name__)


class PinGateMiddleware(BaseHTTPMiddleware):
    """Rejects gated requests that carry a missing, malformed or wrong PIN."""

    def __init__(self, app: ASGIApp, gate: AccessGate):
        super().__init__(app)
        self.gate = gate

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "OPTIONS" or self.gate.is_exempt(request.url.path):
            return await call_next(request)

        decision = self.gate.decide(request.headers.get(PIN_HEADER))
        if decision is GateDecision.ALLOWED:
            return await call_next(request)

        error = PinFormatError() if decision is GateDecision.FORMAT_ERROR else AuthenticationError(
            message="Unauthorized"
        )
        client_ip = request.client.host if request.client else "unknown"
        logger.warning(
            "Blocked %s %s from %s: %s",
            request.method,
            request.url.path,
            client_ip,
            decision.value,
        )
        return JSONResponse(
            status_code=error.status_code,
            content=error.payload(request_id_var.get("")),
        )
