"""
DumbPad Backend — Access Gate
===============================

What:  Decides whether a request may proceed given the configured PIN, and
       runs the PIN verification flow with brute-force lockout.
Who:   PinGateMiddleware calls `decide()` for every gated request;
       the auth routes call `verify()` and `status()`.

Decision (per request, UNCHECKED → ALLOWED | DENIED):
    1. No valid PIN configured         → ALLOWED (protection disabled)
    2. Supplied PIN missing/malformed  → DENIED, format error (400)
    3. Supplied PIN matches            → ALLOWED
    4. Otherwise                       → DENIED, authentication failure (401)

Exempt paths skip the decision entirely; without them no client could ever
find out that a PIN is needed or submit one.
"""

import enum
import logging
from typing import Any, Optional

from dumbpad.exceptions import AuthenticationError, LockedOutError, PinFormatError
from dumbpad.schemas.notepad import PinStatusResponse
from dumbpad.services.credentials import is_valid_format, secure_compare
from dumbpad.services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

PIN_HEADER = "X-Pin"

GATED_PREFIX = "/api/"

EXEMPT_PATHS = frozenset({
    "/api/verify-pin",
    "/api/pin-required",
    "/api/config",
})


class GateDecision(enum.Enum):
    ALLOWED = "allowed"
    FORMAT_ERROR = "format_error"
    AUTH_FAILED = "auth_failed"


class AccessGate:
    """
    PIN-based access control for the API.

    Args:
        pin:      Configured shared PIN; empty or malformed disables protection
        limiter:  Failed-attempt tracker consulted by verify()
    """

    def __init__(self, pin: Optional[str], limiter: RateLimiter):
        self._pin = pin or ""
        self.limiter = limiter

        if self._pin and not is_valid_format(self._pin):
            logger.warning(
                "Configured PIN is not 4-10 digits; PIN protection is DISABLED"
            )

    @property
    def enabled(self) -> bool:
        return is_valid_format(self._pin)

    @property
    def pin_length(self) -> int:
        return len(self._pin)

    @staticmethod
    def is_exempt(path: str) -> bool:
        """True for paths that never require a PIN (non-API paths included)."""
        if not path.startswith(GATED_PREFIX):
            return True
        return path.rstrip("/") in EXEMPT_PATHS

    def decide(self, supplied: Any) -> GateDecision:
        if not self.enabled:
            return GateDecision.ALLOWED
        if not is_valid_format(supplied):
            return GateDecision.FORMAT_ERROR
        if secure_compare(supplied, self._pin):
            return GateDecision.ALLOWED
        return GateDecision.AUTH_FAILED

    def verify(self, supplied: Any, client_id: str) -> None:
        """
        Check a PIN submitted to /api/verify-pin.

        Every failed attempt (malformed or wrong) is recorded against the
        client; a correct PIN clears the client's history.

        Raises:
            LockedOutError: client is locked out (nothing recorded)
            PinFormatError: supplied PIN is missing or not 4-10 digits
            AuthenticationError: supplied PIN does not match
        """
        if not self.enabled:
            return

        if self.limiter.is_locked_out(client_id):
            logger.warning("PIN verification rejected: client %s is locked out", client_id)
            raise LockedOutError(retry_after=self.limiter.retry_after(client_id))

        decision = self.decide(supplied)

        if decision is GateDecision.ALLOWED:
            self.limiter.reset(client_id)
            logger.info("PIN verified for client %s", client_id)
            return

        self.limiter.record_failure(client_id)
        logger.warning("PIN verification failed for client %s (%s)", client_id, decision.value)
        if decision is GateDecision.FORMAT_ERROR:
            raise PinFormatError()
        raise AuthenticationError()

    def status(self, client_id: str) -> PinStatusResponse:
        return PinStatusResponse(
            required=self.enabled,
            length=self.pin_length,
            locked=self.limiter.is_locked_out(client_id),
        )
