from __future__ import annotations
import asyncio
from typing import Iterable
from deprecation_crawler.domain.entities import EnrichedRecord, PageFailure, PaginationReport


class SharedProgress:
    """
    The only mutable state shared between pagination workers.

    One asyncio.Lock guards the claim counter, another guards the results,
    so no two coroutines ever claim the same page or interleave an append.
    Created once per run, read once via snapshot() after all workers join.
    """

    def __init__(self) -> None:
        self._next_page = 1
        self._results:  list[EnrichedRecord] = []
        self._failures: list[PageFailure] = []
        self._completed = 0
        self._claim_lock  = asyncio.Lock()
        self._append_lock = asyncio.Lock()

    async def claim(self) -> int:
        """Return the next unclaimed page number and advance the counter."""
        async with self._claim_lock:
            page = self._next_page
            self._next_page += 1
            return page

    async def append(self, records: Iterable[EnrichedRecord]) -> None:
        """Append one page worth of records, keeping their order."""
        async with self._append_lock:
            self._results.extend(records)
            self._completed += 1

    async def record_failure(self, failure: PageFailure) -> None:
        async with self._append_lock:
            self._failures.append(failure)

    def snapshot(self) -> PaginationReport:
        return PaginationReport(
            records         = tuple(self._results),
            failed_pages    = tuple(sorted(self._failures, key=lambda f: f.page)),
            pages_completed = self._completed,
        )
