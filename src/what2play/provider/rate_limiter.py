"""
Rate limiter for Store API requests.

Token bucket pacing to stay under the Store API's undocumented
quota (roughly 200 requests per 5 minutes).
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any

from what2play.logger import get_logger


@dataclass
class RateLimiterConfig:
    """Configuration for rate limiter."""

    requests_per_minute: int = 40
    burst_size: int = 10


@dataclass
class RateLimiter:
    """
    Token bucket rate limiter.

    Allows up to burst_size requests at once, then paces them
    to requests_per_minute.

    Example:
        >>> limiter = RateLimiter(RateLimiterConfig(requests_per_minute=40))
        >>> async with limiter:
        ...     await fetch_categories(570)
    """

    config: RateLimiterConfig = field(default_factory=RateLimiterConfig)
    _tokens: float = field(init=False)
    _last_refill: float = field(init=False)
    _lock: asyncio.Lock = field(init=False, default_factory=asyncio.Lock)
    _logger: Any = field(init=False)

    def __post_init__(self) -> None:
        self._tokens = float(self.config.burst_size)
        self._last_refill = time.monotonic()
        self._logger = get_logger(__name__, component="rate_limiter")

    @property
    def _refill_rate(self) -> float:
        """Tokens added per second."""
        return self.config.requests_per_minute / 60.0

    def _refill(self) -> None:
        now = time.monotonic()
        elapsed = now - self._last_refill
        self._tokens = min(
            float(self.config.burst_size),
            self._tokens + elapsed * self._refill_rate,
        )
        self._last_refill = now

    async def acquire(self) -> None:
        """Take one token, sleeping until one is available."""
        async with self._lock:
            self._refill()

            if self._tokens < 1:
                wait_time = (1 - self._tokens) / self._refill_rate
                self._logger.debug(
                    "Store API pacing, waiting",
                    wait_seconds=round(wait_time, 2),
                )
                await asyncio.sleep(wait_time)
                self._refill()

            self._tokens -= 1

    async def __aenter__(self) -> "RateLimiter":
        await self.acquire()
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass

    @property
    def available_tokens(self) -> float:
        """Current available tokens (for monitoring)."""
        self._refill()
        return self._tokens
