"""Request and cost ceilings for the generative extraction fallback."""

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from ecoswap.app.services.url_parsing.models import UsageSnapshot

logger = logging.getLogger(__name__)

RESET_INTERVAL = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UsageGovernor:
    """Process-wide counters guarding the completion service.

    Callers ``reserve()`` a slot before calling the service, then either
    ``commit()`` the measured cost or ``release()`` the slot when the response
    is unusable. In-flight reservations count against the request ceiling, so
    concurrent callers cannot jointly overshoot it.
    """

    def __init__(
        self,
        max_requests: int,
        max_daily_cost: float,
        has_credential: bool,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.max_requests = max_requests
        self.max_daily_cost = max_daily_cost
        self.has_credential = has_credential
        self._clock = clock
        self._lock = threading.Lock()
        self._request_count = 0
        self._daily_cost = 0.0
        self._in_flight = 0
        self._last_reset = clock()

    @property
    def last_reset_time(self) -> datetime:
        return self._last_reset

    def _maybe_reset(self) -> None:
        now = self._clock()
        if now - self._last_reset >= RESET_INTERVAL:
            logger.info(
                "Resetting generative usage counters (requests=%d, cost=$%.4f)",
                self._request_count,
                self._daily_cost,
            )
            self._request_count = 0
            self._daily_cost = 0.0
            self._last_reset = now

    def reserve(self) -> bool:
        """Claim one request slot; False when the call must be skipped."""
        if not self.has_credential:
            logger.info("No completion service credential configured; skipping generative fallback")
            return False
        with self._lock:
            self._maybe_reset()
            if self._request_count + self._in_flight >= self.max_requests:
                logger.warning(
                    "Generative usage limit reached: %d/%d requests",
                    self._request_count + self._in_flight,
                    self.max_requests,
                )
                return False
            if self._daily_cost >= self.max_daily_cost:
                logger.warning(
                    "Generative cost limit reached: $%.3f/$%.2f",
                    self._daily_cost,
                    self.max_daily_cost,
                )
                return False
            self._in_flight += 1
            return True

    def release(self) -> None:
        """Give back a reserved slot without charging it."""
        with self._lock:
            self._in_flight = max(0, self._in_flight - 1)

    def commit(self, cost: float, tokens_used: Optional[int] = None) -> UsageSnapshot:
        """Charge a reserved slot and return the resulting snapshot."""
        with self._lock:
            self._in_flight = max(0, self._in_flight - 1)
            self._request_count += 1
            self._daily_cost += cost
            logger.info(
                "Generative call cost $%.4f; totals %d/%d requests, $%.4f/$%.2f",
                cost,
                self._request_count,
                self.max_requests,
                self._daily_cost,
                self.max_daily_cost,
            )
            return self._snapshot(tokens_used=tokens_used, cost_this_call=cost)

    def mark_exhausted(self) -> None:
        """Block further calls until the next reset after a provider rate-limit error."""
        with self._lock:
            self._in_flight = max(0, self._in_flight - 1)
            self._request_count = max(self._request_count, self.max_requests)
            logger.warning("Completion service rate limit hit; marking request budget exhausted")

    def reset(self) -> None:
        with self._lock:
            self._request_count = 0
            self._daily_cost = 0.0
            self._last_reset = self._clock()

    def _snapshot(
        self, tokens_used: Optional[int] = None, cost_this_call: Optional[float] = None
    ) -> UsageSnapshot:
        return UsageSnapshot(
            request_count=self._request_count,
            daily_cost=self._daily_cost,
            max_requests=self.max_requests,
            max_daily_cost=self.max_daily_cost,
            tokens_used=tokens_used,
            cost_this_call=cost_this_call,
        )

    def snapshot(self) -> UsageSnapshot:
        with self._lock:
            return self._snapshot()
