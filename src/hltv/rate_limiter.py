"""Request pacing for HLTVClient.

Cloudflare scores clients on request cadence, so page loads are spaced by
a randomized delay. The base delay widens after each challenge or failed
navigation and narrows toward ``min_delay`` as fetches succeed. Time
already spent since the previous request (converting, saving snapshots)
counts toward the next delay.
"""

import asyncio
import logging
import random
import time

from hltv.config import ClientConfig

logger = logging.getLogger(__name__)

# Jittered delays are drawn from [delay, delay * _JITTER_SPREAD]
_JITTER_SPREAD = 1.5


class RateLimiter:
    """Randomized spacing between requests that adapts to failures.

    While the base delay is within ``max_delay`` the drawn delay never
    exceeds ``max_delay``. Once backing off pushes the base delay past it,
    delays are drawn freely up to ``max_backoff * 1.5``.

    The first request goes out immediately.
    """

    def __init__(self, config: ClientConfig | None = None):
        self._config = config if config is not None else ClientConfig()
        self._delay = self._config.min_delay
        self._failures = 0
        self._last_request: float | None = None  # time.monotonic()
        self._lock = asyncio.Lock()

    @property
    def current_delay(self) -> float:
        """Base delay in seconds before jitter."""
        return self._delay

    @property
    def failure_streak(self) -> int:
        """Failures reported since the last success."""
        return self._failures

    def _draw(self) -> float:
        upper = self._delay * _JITTER_SPREAD
        if self._delay <= self._config.max_delay:
            upper = min(upper, self._config.max_delay)
        return random.uniform(self._delay, upper)

    async def wait(self) -> float:
        """Sleep until the next request may go out.

        Returns:
            The drawn delay, before the elapsed time is subtracted.
        """
        async with self._lock:
            delay = self._draw()
            if self._last_request is not None:
                remaining = delay - (time.monotonic() - self._last_request)
                if remaining > 0:
                    logger.debug("Pacing: sleeping %.2fs", remaining)
                    await asyncio.sleep(remaining)
            self._last_request = time.monotonic()
            return delay

    def backoff(self, reason: str) -> None:
        """Widen the delay after a challenge or failed navigation."""
        self._failures += 1
        self._delay = min(
            self._delay * self._config.backoff_factor, self._config.max_backoff
        )
        logger.warning(
            "Backing off after %s (%d in a row), delay now %.1fs",
            reason, self._failures, self._delay,
        )

    def recover(self) -> None:
        """Narrow the delay after a successful fetch."""
        if self._failures:
            logger.info(
                "Fetch succeeded after %d failure(s), delay %.1fs",
                self._failures, self._delay,
            )
        self._failures = 0
        self._delay = max(
            self._delay * self._config.recovery_factor, self._config.min_delay
        )
