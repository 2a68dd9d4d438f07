"""Retry strategies wrapped around the remote model call."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, FrozenSet, TypeVar

from draftflow.core.config import Settings
from draftflow.core.exceptions import UpstreamError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_STATUSES: FrozenSet[int] = frozenset({429, 500, 502, 503, 504})


class RetryPolicy(ABC):
    """Runs an async call, possibly more than once."""

    @abstractmethod
    async def run(self, call: Callable[[], Awaitable[T]]) -> T:
        pass


class NoRetry(RetryPolicy):
    """Call exactly once and surface any failure."""

    async def run(self, call: Callable[[], Awaitable[T]]) -> T:
        return await call()


class ExponentialBackoffRetry(RetryPolicy):
    """Retry upstream 429/5xx responses with exponential backoff.

    Anything other than an ``UpstreamError`` with a retryable status
    propagates immediately.
    """

    def __init__(
        self,
        max_retries: int = 2,
        base_delay: float = 0.5,
        max_delay: float = 8.0,
        retry_statuses: FrozenSet[int] = RETRYABLE_STATUSES,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.retry_statuses = retry_statuses
        self._sleep = sleep

    def delay_for(self, attempt: int) -> float:
        return min(self.base_delay * (2**attempt), self.max_delay)

    async def run(self, call: Callable[[], Awaitable[T]]) -> T:
        attempt = 0
        while True:
            try:
                return await call()
            except UpstreamError as e:
                if attempt >= self.max_retries or e.upstream_status not in self.retry_statuses:
                    raise
                delay = self.delay_for(attempt)
                attempt += 1
                logger.warning(
                    f"Upstream returned {e.upstream_status}, "
                    f"retry {attempt}/{self.max_retries} in {delay:.2f}s"
                )
                await self._sleep(delay)


def retry_policy_from_settings(settings: Settings) -> RetryPolicy:
    """Build the configured retry policy (``NoRetry`` unless enabled)."""
    if settings.upstream_max_retries <= 0:
        return NoRetry()
    return ExponentialBackoffRetry(
        max_retries=settings.upstream_max_retries,
        base_delay=settings.upstream_retry_base_delay,
        max_delay=settings.upstream_retry_max_delay,
    )
