"""
Per-class request pacing.

Semantic Scholar enforces stricter limits on search and recommendation
endpoints, so tools are grouped into rate-limit classes, each with its own
minimum gap between consecutive requests.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

from .models import RateLimitClass

logger = logging.getLogger("semantic-scholar-mcp")

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class RateLimiter:
    """
    Enforces a minimum delay between requests of the same class.

    Each class has its own asyncio lock, so the check of the last issue time
    and the update to the new one happen as a single serialized step: two
    concurrent callers of the same class can never both be released for the
    same instant. Classes do not block each other.

    If a caller is cancelled while waiting, the last issue time is left
    untouched. Once a caller has been released the timestamp is committed and
    never rolled back, even if the request it guards is later cancelled.
    """

    def __init__(
        self,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
        min_gaps: Optional[dict[RateLimitClass, float]] = None,
    ):
        """
        Initialize the rate limiter.

        Args:
            clock: Monotonic time source in seconds.
            sleep: Coroutine used to wait; injectable for tests.
            min_gaps: Override of the per-class minimum gaps in seconds.
        """
        self._clock = clock
        self._sleep = sleep
        self._min_gaps = {cls: cls.min_gap for cls in RateLimitClass}
        if min_gaps:
            self._min_gaps.update(min_gaps)
        self._last_issue: dict[RateLimitClass, float] = {}
        self._locks = {cls: asyncio.Lock() for cls in RateLimitClass}

    def min_gap(self, rate_class: RateLimitClass) -> float:
        return self._min_gaps[rate_class]

    def last_issue(self, rate_class: RateLimitClass) -> Optional[float]:
        """Time the last request of this class was released, if any."""
        return self._last_issue.get(rate_class)

    async def acquire(self, rate_class: RateLimitClass) -> float:
        """
        Wait until a request of this class may be issued.

        Args:
            rate_class: The class of the request about to be sent.

        Returns:
            The issue time recorded for this request.
        """
        async with self._locks[rate_class]:
            now = self._clock()
            last = self._last_issue.get(rate_class)
            if last is not None:
                next_eligible = last + self._min_gaps[rate_class]
                while now < next_eligible:
                    delay = next_eligible - now
                    logger.debug(f"Rate limiting {rate_class.value}: waiting {delay:.3f}s")
                    await self._sleep(delay)
                    now = self._clock()

            self._last_issue[rate_class] = now
            return now
