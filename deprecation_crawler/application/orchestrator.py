from __future__ import annotations
import asyncio
import logging
from deprecation_crawler.domain.entities import PageFailure, PageRequest, PaginationReport
from deprecation_crawler.domain.outcomes import FatalError, Success
from .enricher import RecordEnricher
from .progress import SharedProgress
from .retry_policy import RetryingPageFetcher, Sleep

log = logging.getLogger(__name__)

PAGE_PACING_SLEEP = 1


class PaginationEngine:
    """
    Crawls pages 1..total_pages with a fixed pool of asyncio workers.

    All dependencies are injected, this class creates NOTHING itself:
      - RetryingPageFetcher  → how to get one page (with retries)
      - RecordEnricher       → how to attach GitHub metadata
      - sleep                → how to pause between pages

    Each worker claims a page from SharedProgress, fetches it, enriches it,
    appends it, and pauses. A page that runs out of retries, or raises
    while being processed, is logged and skipped; the worker moves on to
    its next claim.
    """

    def __init__(
        self,
        fetcher: RetryingPageFetcher,
        enricher: RecordEnricher,
        sleep: Sleep = asyncio.sleep,
        pacing_sleep: float = PAGE_PACING_SLEEP,
    ) -> None:
        self._fetcher      = fetcher
        self._enricher     = enricher
        self._sleep        = sleep
        self._pacing_sleep = pacing_sleep

    async def _process_page(self, progress: SharedProgress, page: int, per_page: int) -> None:
        outcome = await self._fetcher.fetch(PageRequest(page, per_page))

        if isinstance(outcome, Success):
            enriched = await self._enricher.enrich_page(outcome.records)
            await progress.append(enriched)
            log.info("Page %d: %d records added", page, len(enriched))
        else:
            cause = outcome.cause if isinstance(outcome, FatalError) else repr(outcome)
            log.error("Page %d failed, skipping: %s", page, cause)
            await progress.record_failure(PageFailure(page, cause))

    async def _worker(self, worker_id: int, progress: SharedProgress, total_pages: int, per_page: int) -> None:
        while True:
            page = await progress.claim()
            if page > total_pages:
                log.debug("Worker %d | no pages left, exiting", worker_id)
                return

            log.info("Worker %d | fetching page %d/%d", worker_id, page, total_pages)
            try:
                await self._process_page(progress, page, per_page)
            except Exception as exc:
                log.error("Page %d crashed, skipping: %r", page, exc, exc_info=True)
                await progress.record_failure(PageFailure(page, repr(exc)))

            await self._sleep(self._pacing_sleep)

    async def run(self, total_pages: int, per_page: int, concurrency: int) -> PaginationReport:
        """
        Crawl every page and return what was aggregated.
        Returns only after every worker has exited.
        """
        if total_pages < 1 or per_page < 1 or concurrency < 1:
            raise ValueError(
                f"total_pages, per_page and concurrency must be positive "
                f"(got {total_pages}, {per_page}, {concurrency})"
            )

        progress = SharedProgress()

        log.info("Starting crawl | pages=%d | per_page=%d | concurrency=%d", total_pages, per_page, concurrency)

        await asyncio.gather(*[
            self._worker(i + 1, progress, total_pages, per_page)
            for i in range(concurrency)
        ])

        report = progress.snapshot()
        log.info(
            "Pagination complete | %d records | %d/%d pages ok | %d skipped",
            len(report.records), report.pages_completed, total_pages, len(report.failed_pages),
        )
        return report
