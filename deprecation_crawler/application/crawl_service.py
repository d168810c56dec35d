from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from deprecation_crawler.domain.entities import CrawlResult, EnrichedRecord, is_deprecated
from deprecation_crawler.domain.interfaces import IRecordStorage
from .orchestrator import PaginationEngine

log = logging.getLogger(__name__)


class CrawlApplicationService:
    """
    Runs the pagination engine, then hands everything it aggregated to the
    record storage with the deprecation filter, and turns the outcome into
    a CrawlResult for main.py to report.
    """

    def __init__(
        self,
        engine: PaginationEngine,
        storage: IRecordStorage,
        predicate: Callable[[EnrichedRecord], bool] = is_deprecated,
    ) -> None:
        self._engine    = engine
        self._storage   = storage
        self._predicate = predicate

    async def execute(self, total_pages: int, per_page: int, concurrency: int) -> CrawlResult:
        """
        Run a full crawl and persist the filtered results.

        Skipped pages do not make the run fail; only an unexpected
        exception (e.g. the output file cannot be written) does.
        """
        started_at = datetime.now(tz=timezone.utc)
        total      = 0
        completed  = 0
        failed     = ()

        try:
            report    = await self._engine.run(total_pages, per_page, concurrency)
            total     = len(report.records)
            completed = report.pages_completed
            failed    = report.failed_pages

            persisted = self._storage.persist(report.records, self._predicate)

            elapsed = (datetime.now(tz=timezone.utc) - started_at).total_seconds()
            if failed:
                log.warning(
                    "%d page(s) skipped, their records are missing from the output: %s",
                    len(failed), ", ".join(str(f.page) for f in failed),
                )
            log.info(
                "Crawl complete | %d records aggregated | %d persisted | %d/%d pages | %.0fs",
                total, persisted, completed, total_pages, elapsed,
            )
            return CrawlResult(
                total_records     = total,
                persisted_records = persisted,
                pages_completed   = completed,
                failed_pages      = failed,
                status            = "success",
                elapsed_secs      = elapsed,
            )
        except Exception as exc:
            elapsed = (datetime.now(tz=timezone.utc) - started_at).total_seconds()
            log.error("Crawl failed: %s", exc, exc_info=True)
            return CrawlResult(
                total_records     = total,
                persisted_records = 0,
                pages_completed   = completed,
                failed_pages      = failed,
                status            = "failed",
                elapsed_secs      = elapsed,
                error_message     = str(exc),
            )
