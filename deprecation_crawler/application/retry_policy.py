from __future__ import annotations
import asyncio
import logging
from typing import Awaitable, Callable
from deprecation_crawler.domain.entities import PageRequest
from deprecation_crawler.domain.interfaces import IPageFetcher
from deprecation_crawler.domain.outcomes import FatalError, FetchOutcome, RateLimited, TransientError

log = logging.getLogger(__name__)

MAX_ATTEMPTS     = 5
RATE_LIMIT_SLEEP = 60
TRANSIENT_SLEEP  = 10

Sleep = Callable[[float], Awaitable[None]]


class RetryingPageFetcher:
    """
    Wraps an IPageFetcher in a bounded retry loop.

    The budget is the total number of attempts for one page. Attempt n tells
    the underlying fetcher it has `max_attempts - n` retries left, so its
    last attempt reports failures as FatalError. A fetcher that keeps
    returning retryable outcomes is cut off here as well.

    The sleep primitive is injected so tests can run on a fake clock.
    """

    def __init__(
        self,
        fetcher: IPageFetcher,
        sleep: Sleep = asyncio.sleep,
        max_attempts: int = MAX_ATTEMPTS,
        rate_limit_sleep: float = RATE_LIMIT_SLEEP,
        transient_sleep: float = TRANSIENT_SLEEP,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._fetcher          = fetcher
        self._sleep            = sleep
        self._max_attempts     = max_attempts
        self._rate_limit_sleep = rate_limit_sleep
        self._transient_sleep  = transient_sleep

    async def fetch(self, request: PageRequest) -> FetchOutcome:
        """Fetch one page, retrying as needed. Never raises for HTTP failures."""
        for attempt in range(1, self._max_attempts + 1):
            remaining = self._max_attempts - attempt
            outcome = await self._fetcher.fetch(request, remaining)

            if isinstance(outcome, RateLimited):
                if remaining == 0:
                    return FatalError(f"still rate limited after {self._max_attempts} attempts")
                log.warning(
                    "429 Too Many Requests on page %d (attempt %d/%d), sleeping %ss",
                    request.page, attempt, self._max_attempts, self._rate_limit_sleep,
                )
                await self._sleep(self._rate_limit_sleep)

            elif isinstance(outcome, TransientError):
                if remaining == 0:
                    return FatalError(outcome.cause)
                log.warning(
                    "Error on page %d (attempt %d/%d): %s, retrying in %ss",
                    request.page, attempt, self._max_attempts, outcome.cause, self._transient_sleep,
                )
                await self._sleep(self._transient_sleep)

            else:
                # Success or FatalError
                return outcome

        # Unreachable: the last attempt always returns above
        return FatalError(f"exhausted {self._max_attempts} attempts")
