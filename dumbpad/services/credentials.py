"""
DumbPad Backend — PIN Credential Validation
=============================================

What:  Format check and constant-time comparison for the shared PIN.

Comparison:
    Both values are UTF-8 encoded and hashed with SHA-256 before
    hmac.compare_digest runs. The digests are always 32 bytes, so the
    comparison never short-circuits on a length difference and its running
    time does not depend on where the first mismatching character is.

PIN values are never logged by this module or its callers.
"""

import hashlib
import hmac
import re
from typing import Any

PIN_MIN_LENGTH = 4
PIN_MAX_LENGTH = 10

# [0-9] rather than \d: \d also matches non-ASCII digits such as "٣"
_PIN_RE = re.compile(rf"[0-9]{{{PIN_MIN_LENGTH},{PIN_MAX_LENGTH}}}")


def is_valid_format(pin: Any) -> bool:
    """True iff `pin` is a str of 4-10 ASCII decimal digits."""
    return isinstance(pin, str) and _PIN_RE.fullmatch(pin) is not None


def _digest(value: str) -> bytes:
    return hashlib.sha256(value.encode("utf-8")).digest()


def secure_compare(a: Any, b: Any) -> bool:
    """
    Constant-time equality for two strings.

    Returns False, without raising, when either argument is not a str.
    """
    if not isinstance(a, str) or not isinstance(b, str):
        return False
    return hmac.compare_digest(_digest(a), _digest(b))
