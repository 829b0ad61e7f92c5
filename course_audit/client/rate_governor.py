"""Adaptive throttling driven by the service's self-reported rate budget."""

import time
import random
import threading
from dataclasses import dataclass, replace
from typing import Optional

from ..config import RateLimitConfig
from ..utils.logging_config import get_logger
from ..utils.exceptions import ConfigurationError

logger = get_logger()

TOO_MANY_REQUESTS = 429


@dataclass
class RateState:
    """Snapshot of the rate budget as last reported by the service."""

    max_quota: int
    remaining: float
    average_cost: float = 0.0
    request_count: int = 0
    last_cost: float = 0.0
    last_status: Optional[int] = None
    cost_spike: bool = False
    transport_failures: int = 0

    @property
    def remaining_fraction(self) -> float:
        return self.remaining / self.max_quota


class RateGovernor:
    """
    Decides how long to wait before each request.

    The service reports the remaining quota and the cost of the request just
    served on every response. ``observe`` folds those into the state and
    ``admit`` sleeps according to the state before the next request goes out.
    """

    def __init__(self, config: Optional[RateLimitConfig] = None):
        """
        Initialize rate governor.

        Args:
            config: Rate limit configuration

        Raises:
            ConfigurationError: If the quota is not positive
        """
        self.config = config or RateLimitConfig()
        if self.config.max_quota <= 0:
            raise ConfigurationError(f"Rate limit quota must be positive, got {self.config.max_quota}")
        self._state = RateState(
            max_quota=self.config.max_quota,
            remaining=float(self.config.max_quota),
        )
        self._lock = threading.Lock()

    @property
    def state(self) -> RateState:
        """Copy of the current rate state."""
        with self._lock:
            return replace(self._state)

    def _parse_remaining(self, value: Optional[str]) -> float:
        try:
            remaining = float(value)
        except (TypeError, ValueError):
            logger.error(
                f"Could not parse remaining quota {value!r}, assuming half the budget is spent"
            )
            return self._state.max_quota / 2
        return min(max(remaining, 0.0), float(self._state.max_quota))

    def _parse_cost(self, value: Optional[str]) -> Optional[float]:
        try:
            cost = float(value)
        except (TypeError, ValueError):
            logger.error(f"Could not parse request cost {value!r}, using average cost")
            return None
        if cost <= 0:
            logger.warning(f"Non-positive request cost {cost}, using average cost")
            return None
        return cost

    def observe(
        self,
        remaining_header: Optional[str],
        cost_header: Optional[str],
        status_code: Optional[int],
    ) -> None:
        """
        Record the rate metadata of a completed response.

        Args:
            remaining_header: Raw remaining-quota header value
            cost_header: Raw request-cost header value
            status_code: HTTP status of the response
        """
        with self._lock:
            state = self._state
            state.request_count += 1
            state.last_status = status_code
            state.remaining = self._parse_remaining(remaining_header)

            previous_average = state.average_cost
            cost = self._parse_cost(cost_header)
            if cost is None:
                state.last_cost = previous_average
                state.cost_spike = False
                return

            state.last_cost = cost
            state.cost_spike = (
                previous_average > 0
                and cost > previous_average * self.config.cost_spike_ratio
            )
            if previous_average <= 0:
                state.average_cost = cost
            else:
                state.average_cost += (cost - previous_average) / state.request_count

    def skip(self) -> None:
        """Note a request that produced no response, leaving the budget untouched."""
        with self._lock:
            self._state.transport_failures += 1
        logger.debug("No rate signal received for last request")

    def _ladder_delay(self, state: RateState) -> float:
        fraction = state.remaining_fraction
        max_quota = state.max_quota

        if fraction <= 0.25:
            logger.warning(f"Rate limit under 25% of budget ({state.remaining:.1f} left)")
            return max_quota / 2
        if fraction <= 0.5:
            logger.warning(f"Rate limit under 50% of budget ({state.remaining:.1f} left)")
            return max_quota / 4
        if fraction <= 0.75:
            logger.info(f"Rate limit between 50% and 75% of budget ({state.remaining:.1f} left)")
            return max_quota / 8
        return 0.0

    def compute_delay(self) -> float:
        """
        Delay owed before the next request, without jitter.

        Returns:
            Delay in seconds
        """
        with self._lock:
            state = self._state
            delay = self._ladder_delay(state)

            if state.last_status == TOO_MANY_REQUESTS:
                logger.warning("Service answered 429, backing off")
                delay = self.config.throttled_delay_seconds

            if state.cost_spike:
                logger.warning(
                    f"Request cost {state.last_cost} jumped above average, adding a pause"
                )
                delay = max(delay, self.config.cost_spike_delay_seconds)

            return delay

    def jitter(self, delay: float) -> float:
        """Random extra wait proportional to the delay."""
        if delay <= 0:
            return 0.0
        return random.uniform(0, delay * self.config.jitter_fraction)

    def admit(self) -> float:
        """
        Block until the next request may be sent.

        Returns:
            Seconds slept
        """
        delay = self.compute_delay()
        if delay <= 0:
            return 0.0

        total = delay + self.jitter(delay)
        logger.info(f"Throttling: sleeping {total:.1f}s before next request")
        time.sleep(total)
        return total
