"""Unit tests for the bounded page retry loop."""

import pytest

from deprecation_crawler.application.retry_policy import (
    MAX_ATTEMPTS,
    RATE_LIMIT_SLEEP,
    TRANSIENT_SLEEP,
    RetryingPageFetcher,
)
from deprecation_crawler.domain.entities import PageRequest
from deprecation_crawler.domain.outcomes import FatalError, RateLimited, Success, TransientError
from fakes import ScriptedPageFetcher, record_for_page


class TestRetryingPageFetcher:

    @pytest.mark.asyncio
    async def test_success_on_first_attempt_does_not_sleep(self, fake_sleep):
        fetcher = ScriptedPageFetcher()
        retrying = RetryingPageFetcher(fetcher, sleep=fake_sleep)

        outcome = await retrying.fetch(PageRequest(1, 2))

        assert isinstance(outcome, Success)
        assert [r.name for r in outcome.records] == ["pkg-1-0", "pkg-1-1"]
        assert fetcher.calls == [(1, MAX_ATTEMPTS - 1)]
        assert fake_sleep.calls == []

    @pytest.mark.asyncio
    async def test_rate_limited_twice_then_success(self, fake_sleep):
        records = (record_for_page(3),)
        fetcher = ScriptedPageFetcher({3: [RateLimited(), RateLimited(), Success(records)]})
        retrying = RetryingPageFetcher(fetcher, sleep=fake_sleep)

        outcome = await retrying.fetch(PageRequest(3, 1))

        assert outcome == Success(records)
        assert len(fetcher.calls) == 3
        assert fake_sleep.calls == [RATE_LIMIT_SLEEP, RATE_LIMIT_SLEEP]

    @pytest.mark.asyncio
    async def test_transient_errors_use_short_delay(self, fake_sleep):
        fetcher = ScriptedPageFetcher({2: [TransientError("HTTP 502"), Success(())]})
        retrying = RetryingPageFetcher(fetcher, sleep=fake_sleep)

        outcome = await retrying.fetch(PageRequest(2, 1))

        assert outcome == Success(())
        assert fake_sleep.calls == [TRANSIENT_SLEEP]

    @pytest.mark.asyncio
    async def test_remaining_retries_counts_down(self, fake_sleep):
        fetcher = ScriptedPageFetcher({1: [TransientError("boom")]})
        retrying = RetryingPageFetcher(fetcher, sleep=fake_sleep)

        await retrying.fetch(PageRequest(1, 1))

        assert [remaining for _, remaining in fetcher.calls] == [4, 3, 2, 1, 0]

    @pytest.mark.asyncio
    async def test_always_transient_gives_up_after_budget(self, fake_sleep):
        fetcher = ScriptedPageFetcher({5: [TransientError("connection reset")]})
        retrying = RetryingPageFetcher(fetcher, sleep=fake_sleep)

        outcome = await retrying.fetch(PageRequest(5, 1))

        assert outcome == FatalError("connection reset")
        assert len(fetcher.calls) == MAX_ATTEMPTS
        # no sleep after the final attempt
        assert fake_sleep.calls == [TRANSIENT_SLEEP] * (MAX_ATTEMPTS - 1)

    @pytest.mark.asyncio
    async def test_always_rate_limited_becomes_fatal(self, fake_sleep):
        fetcher = ScriptedPageFetcher({1: [RateLimited()]})
        retrying = RetryingPageFetcher(fetcher, sleep=fake_sleep, max_attempts=3)

        outcome = await retrying.fetch(PageRequest(1, 1))

        assert isinstance(outcome, FatalError)
        assert "rate limited" in outcome.cause
        assert len(fetcher.calls) == 3
        assert fake_sleep.calls == [RATE_LIMIT_SLEEP, RATE_LIMIT_SLEEP]

    @pytest.mark.asyncio
    async def test_fatal_error_returns_immediately(self, fake_sleep):
        fetcher = ScriptedPageFetcher({1: [FatalError("HTTP 401")]})
        retrying = RetryingPageFetcher(fetcher, sleep=fake_sleep)

        outcome = await retrying.fetch(PageRequest(1, 1))

        assert outcome == FatalError("HTTP 401")
        assert len(fetcher.calls) == 1
        assert fake_sleep.calls == []

    def test_rejects_empty_budget(self):
        with pytest.raises(ValueError):
            RetryingPageFetcher(ScriptedPageFetcher(), max_attempts=0)
