"""
DumbPad Backend — Failed-PIN Lockout Tracker
==============================================

What:  Per-client brute-force protection for PIN verification.
How:   Keeps an in-memory dict of client id → (failed count, last attempt time).
       A client with `max_attempts` or more failures is locked out until
       `lockout_seconds` have passed since its last failure.
Who:   Used by AccessGate.verify() and the /api/pin-required status check.

Record lifecycle:
    record_failure()  → create or increment, stamp last attempt
    is_locked_out()   → read-only check; clears the record if its window passed
    reset()           → drop the record after a successful verification
    sweep()           → drop every expired record (run_sweeper calls it on a timer)

Concurrency:
    Safe for single-process async (uvicorn). The check-then-update sequences
    have no await points, so they run without interleaving on the event loop.
    State is not shared across worker processes and is lost on restart.
"""

import asyncio
import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict

logger = logging.getLogger(__name__)


@dataclass
class LockoutRecord:
    failed_count: int = 0
    last_attempt: float = 0.0


class RateLimiter:
    """
    Failed-attempt counter with a fixed lockout window.

    Args:
        max_attempts:     Failures that trigger a lockout (default: 5)
        lockout_seconds:  Window measured from the last failure (default: 15 minutes)
        clock:            Monotonic time source in seconds (tests inject a fake)
    """

    def __init__(
        self,
        max_attempts: int = 5,
        lockout_seconds: float = 15 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_attempts = max_attempts
        self.lockout_seconds = lockout_seconds
        self._clock = clock
        self._records: Dict[str, LockoutRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, client_id: str) -> bool:
        return client_id in self._records

    def _is_expired(self, record: LockoutRecord, now: float) -> bool:
        return now - record.last_attempt >= self.lockout_seconds

    def record_failure(self, client_id: str) -> None:
        record = self._records.setdefault(client_id, LockoutRecord())
        record.failed_count += 1
        record.last_attempt = self._clock()

        if record.failed_count == self.max_attempts:
            logger.warning(
                "Client %s locked out after %d failed PIN attempts",
                client_id,
                record.failed_count,
            )

    def is_locked_out(self, client_id: str) -> bool:
        """
        True iff the client has reached max_attempts and the window is still open.

        Never counts as an attempt. An expired record is removed before
        returning False, so a lockout ends on its own once the window passes.
        """
        record = self._records.get(client_id)
        if record is None:
            return False

        if self._is_expired(record, self._clock()):
            self.reset(client_id)
            return False

        return record.failed_count >= self.max_attempts

    def retry_after(self, client_id: str) -> int:
        """Whole seconds until the client's lockout ends (0 if not locked out)."""
        record = self._records.get(client_id)
        if record is None:
            return 0
        remaining = record.last_attempt + self.lockout_seconds - self._clock()
        return max(0, math.ceil(remaining))

    def reset(self, client_id: str) -> None:
        self._records.pop(client_id, None)

    def sweep(self) -> int:
        """Remove every expired record. Returns the number removed."""
        now = self._clock()
        expired = [
            client_id
            for client_id, record in self._records.items()
            if self._is_expired(record, now)
        ]
        for client_id in expired:
            del self._records[client_id]

        if expired:
            logger.debug("Swept %d expired lockout record(s)", len(expired))
        return len(expired)

    async def run_sweeper(self, interval: float = 60.0) -> None:
        """
        Sweep on a fixed interval until cancelled.

        Started by the application lifespan with asyncio.create_task() and
        cancelled on shutdown.
        """
        logger.debug("Lockout sweeper started (interval=%ss)", interval)
        while True:
            await asyncio.sleep(interval)
            self.sweep()
